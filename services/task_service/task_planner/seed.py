"""Load sample tasks into an empty collection.

Run with ``python -m task_planner.seed``. Existing tasks are deleted first.
"""

import asyncio
import logging
from datetime import datetime, timezone

from .config import Settings
from .database import TaskStore
from .main import configure_logging
from .service import utcnow
from .validators import validate_task

logger = logging.getLogger(__name__)


def _date(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


# Each task type carries its own extra fields
SAMPLE_TASKS = [
    {
        "title": "Complete project proposal",
        "description": "Write and submit Q1 project proposal for client",
        "priority": 4,
        "category": "work",
        "taskType": "work",
        "project": "Q1 Planning",
        "deadline": _date(2026, 2, 1),
        "assignedTo": "John Doe",
        "estimatedHours": 8,
        "tags": ["urgent", "planning", "client-work"],
        "status": "in-progress",
    },
    {
        "title": "Buy groceries",
        "description": "Weekly grocery shopping for the family",
        "priority": 2,
        "category": "personal",
        "taskType": "shopping",
        "items": ["milk", "bread", "eggs", "cheese", "vegetables"],
        "store": "Whole Foods",
        "budget": 75,
        "estimatedTime": "1 hour",
    },
    {
        "title": "Doctor appointment",
        "description": "Annual physical checkup",
        "priority": 3,
        "category": "health",
        "taskType": "health",
        "doctorName": "Dr. Sarah Johnson",
        "appointmentTime": "10:00 AM",
        "clinic": "City Medical Center",
        "symptoms": [],
        "followUpNeeded": False,
    },
    {
        "title": "Study for Python exam",
        "description": "Review asyncio and typing features",
        "priority": 4,
        "category": "school",
        "taskType": "education",
        "subject": "Python",
        "examDate": _date(2026, 1, 25),
        "studyHours": 10,
        "resources": ["Python docs", "asyncio tutorial", "Practice exercises"],
        "progress": 65,
    },
    {
        "title": "Plan vacation",
        "description": "Research and book summer vacation",
        "priority": 1,
        "category": "personal",
        "taskType": "personal",
        "destination": "Bali, Indonesia",
        "duration": "2 weeks",
        "budget": 3000,
        "travelDates": {"start": _date(2026, 7, 1), "end": _date(2026, 7, 15)},
        "activities": ["beach", "hiking", "cultural sites"],
    },
    {
        "title": "Fix kitchen sink",
        "description": "Repair leaky kitchen faucet",
        "priority": 3,
        "category": "home",
        "taskType": "home",
        "tools": ["wrench", "plumber's tape", "replacement parts"],
        "estimatedCost": 50,
        "difficulty": "medium",
        "timeEstimate": "2 hours",
    },
    {
        "title": "Review code changes",
        "description": "Code review for the new authentication feature",
        "priority": 3,
        "category": "work",
        "taskType": "work",
        "project": "User Authentication",
        "pullRequest": "#123",
        "reviewer": "Jane Smith",
        "deadline": _date(2026, 1, 22),
        "complexity": "high",
    },
    {
        "title": "Call mom",
        "description": "Weekly catch-up call with mother",
        "priority": 2,
        "category": "personal",
        "taskType": "personal",
        "frequency": "weekly",
        "duration": "30 minutes",
        "importance": "high",
    },
]


async def seed(store, tasks=SAMPLE_TASKS) -> int:
    """Replace the store's contents with ``tasks``. Returns the number inserted."""
    now = utcnow()
    documents = []
    for task in tasks:
        document = validate_task(task).to_document(with_defaults=True)
        document["createdAt"] = now
        document["updatedAt"] = now
        documents.append(document)

    cleared = await store.delete_all()
    logger.info("Cleared %d existing tasks", cleared)

    inserted = await store.insert_many(documents)
    logger.info("Successfully seeded %d tasks", inserted)

    logger.info("Tasks by type:")
    for row in await store.summarize_by_type():
        logger.info(
            "  %s: %d tasks (avg priority: %.1f)",
            row["taskType"],
            row["count"],
            row["avgPriority"] or 0,
        )
    return inserted


async def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    store = TaskStore(settings.mongodb_uri, settings.db_name)
    await store.open()
    try:
        await seed(store)
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
