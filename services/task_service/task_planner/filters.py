import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import ValidationError


@dataclass(frozen=True)
class TaskFilter:
    """Which tasks a list query returns. Set fields combine with AND."""

    category: Optional[str] = None
    priority: Optional[int] = None
    search: Optional[str] = None

    def to_query(self) -> Dict[str, Any]:
        """Render as a MongoDB query document."""
        query: Dict[str, Any] = {}
        if self.category is not None:
            query["category"] = self.category
        if self.priority is not None:
            query["priority"] = self.priority
        if self.search is not None:
            query["title"] = {"$regex": re.escape(self.search), "$options": "i"}
        return query

    def matches(self, document: Mapping[str, Any]) -> bool:
        """Evaluate the same predicate as :meth:`to_query` against a document."""
        if self.category is not None and document.get("category") != self.category:
            return False
        if self.priority is not None and document.get("priority") != self.priority:
            return False
        if self.search is not None:
            title = document.get("title")
            if not isinstance(title, str) or self.search.lower() not in title.lower():
                return False
        return True


def build_filter(
    category: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
) -> TaskFilter:
    """Translate optional query parameters into a :class:`TaskFilter`.

    Empty strings count as absent. ``priority`` is an exact match, not a threshold.
    """
    return TaskFilter(
        category=category or None,
        priority=parse_priority(priority) if priority else None,
        search=search or None,
    )


def parse_priority(value: Any) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError('"priority" must be an integer') from None
