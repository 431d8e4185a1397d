import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import NotFound
from .filters import TaskFilter, build_filter
from .models import Task, TaskStats
from .stats import compute_stats
from .validators import validate_task

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskService:
    """Request-level task operations. Holds no state beyond the store handle."""

    def __init__(self, store):
        self.store = store

    async def list_tasks(
        self,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Task]:
        task_filter = build_filter(category=category, priority=priority, search=search)
        documents = await self.store.find(task_filter)
        return [Task.from_document(document) for document in documents]

    async def get_task(self, task_id: str) -> Task:
        document = await self.store.get(task_id)
        if document is None:
            raise NotFound()
        return Task.from_document(document)

    async def create_task(self, payload: Any) -> Task:
        document = validate_task(payload).to_document(with_defaults=True)
        now = utcnow()
        document["createdAt"] = now
        document["updatedAt"] = now

        created = await self.store.insert(document)
        logger.info("Created task %s", created["_id"])
        return Task.from_document(created)

    async def update_task(self, task_id: str, payload: Any) -> Task:
        """Validate, then merge the payload's fields into the stored task.

        ``createdAt`` and ids in the payload are ignored. No record is created
        for an unknown id.
        """
        fields = validate_task(payload).to_document()
        fields["updatedAt"] = utcnow()

        updated = await self.store.update(task_id, fields)
        if updated is None:
            raise NotFound()
        logger.info("Updated task %s", task_id)
        return Task.from_document(updated)

    async def delete_task(self, task_id: str) -> Dict[str, str]:
        deleted = await self.store.delete(task_id)
        if not deleted:
            raise NotFound()
        logger.info("Deleted task %s", task_id)
        return {"message": "Task deleted successfully"}

    async def stats(self) -> TaskStats:
        documents = await self.store.find(
            TaskFilter(), error_message="Server error getting statistics"
        )
        return compute_stats(Task.from_document(document) for document in documents)
