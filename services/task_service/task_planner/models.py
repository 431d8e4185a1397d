from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic_core import PydanticCustomError

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
PRIORITY_MIN = 1
PRIORITY_MAX = 5
DEFAULT_PRIORITY = 2


class TaskType(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    EDUCATION = "education"
    HOME = "home"
    OTHER = "other"


DEFAULT_TASK_TYPE = TaskType.PERSONAL

# Value of a field outside the known schema. Nested lists and maps are stored as-is.
ExtraValue = Union[
    StrictBool,
    StrictInt,
    StrictFloat,
    datetime,
    StrictStr,
    List[Any],
    Dict[str, Any],
    None,
]

# Python attribute name -> document / wire name
KNOWN_FIELDS = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "category": "category",
    "deadline": "deadline",
    "task_type": "taskType",
}

# Set by the server, never taken from a payload
RESERVED_FIELDS = {"_id", "id", "createdAt", "updatedAt"}


class TaskPayload(BaseModel):
    """Incoming task body as accepted by the validator.

    Unknown keys are allowed and end up in :meth:`extras`.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    title: str = Field(
        ...,
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
        examples=["Buy groceries"],
    )
    description: Optional[str] = Field(
        None, max_length=DESCRIPTION_MAX_LENGTH, examples=["Milk, bread and eggs"]
    )
    priority: Optional[int] = Field(None, ge=PRIORITY_MIN, le=PRIORITY_MAX)
    category: Optional[str] = Field(None, examples=["work"])
    deadline: Optional[datetime] = Field(None, examples=["2026-02-01T15:00:00"])
    task_type: Optional[TaskType] = Field(None, alias="taskType")

    @field_validator("priority", mode="before")
    @classmethod
    def reject_boolean_priority(cls, value):
        if isinstance(value, bool):
            raise PydanticCustomError("int_type", "Input should be a valid integer")
        return value

    @field_validator("task_type", mode="before")
    @classmethod
    def lowercase_task_type(cls, value):
        if isinstance(value, str):
            return value.lower()
        return value

    def extras(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key not in RESERVED_FIELDS
        }

    def to_document(self, with_defaults: bool = False) -> Dict[str, Any]:
        """Fields to persist: extras plus the known fields that carry a value."""
        document = self.extras()
        document.update(
            self.model_dump(
                include=set(KNOWN_FIELDS), by_alias=True, exclude_none=True
            )
        )
        if with_defaults:
            document.setdefault("priority", DEFAULT_PRIORITY)
            document.setdefault("taskType", DEFAULT_TASK_TYPE.value)
        return document


class Task(BaseModel):
    """A stored task record."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str
    title: str
    description: Optional[str] = None
    priority: Optional[int] = None
    category: Optional[str] = None
    deadline: Optional[datetime] = None
    task_type: Optional[TaskType] = Field(None, alias="taskType")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    extras: Dict[str, ExtraValue] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Task":
        data = dict(document)
        task_id = str(data.pop("_id"))
        known = {
            name: data.pop(name)
            for name in (*KNOWN_FIELDS.values(), "createdAt", "updatedAt")
            if name in data
        }
        data.pop("id", None)
        return cls(id=task_id, extras=data, **known)

    def to_response(self) -> Dict[str, Any]:
        body = self.model_dump(by_alias=True, exclude={"extras"}, exclude_none=True)
        for key, value in self.extras.items():
            body.setdefault(key, value)
        return body


class TaskStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_tasks: int = Field(..., alias="totalTasks")
    avg_priority: float = Field(..., alias="avgPriority")
    high_priority_count: int = Field(..., alias="highPriorityCount")
    category_stats: Dict[str, int] = Field(default_factory=dict, alias="categoryStats")
