from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .models import Task, TaskStats

UNCATEGORIZED = "Uncategorized"
HIGH_PRIORITY_THRESHOLD = 4


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    """Aggregate counts over the whole task set.

    The average divides by the total number of tasks, including tasks that
    carry no priority.
    """
    total_tasks = 0
    total_priority = 0
    high_priority_count = 0
    categories: Counter = Counter()

    for task in tasks:
        total_tasks += 1
        if task.priority:
            total_priority += task.priority
            if task.priority >= HIGH_PRIORITY_THRESHOLD:
                high_priority_count += 1
        categories[task.category or UNCATEGORIZED] += 1

    return TaskStats(
        total_tasks=total_tasks,
        avg_priority=average(total_priority, total_tasks),
        high_priority_count=high_priority_count,
        category_stats=dict(categories),
    )


def average(total: int, count: int) -> float:
    """Mean rounded half-up to one decimal place, 0 for an empty set."""
    if count == 0:
        return 0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
