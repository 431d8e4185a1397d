"""Payload validation for incoming task bodies."""

from collections.abc import Mapping
from typing import Any, Dict

import pydantic

from .errors import ValidationError
from .models import TaskPayload, TaskType

# BSON stores integers as signed 64-bit
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_TASK_TYPES = ", ".join(task_type.value for task_type in TaskType)

_REASONS = {
    "missing": "is required",
    "string_type": "must be a string",
    "string_too_short": "length must be at least {min_length} characters long",
    "string_too_long": "length must be less than or equal to {max_length} characters long",
    "int_type": "must be a number",
    "int_parsing": "must be a number",
    "int_from_float": "must be an integer",
    "greater_than_equal": "must be greater than or equal to {ge}",
    "less_than_equal": "must be less than or equal to {le}",
    "enum": "must be one of [" + _TASK_TYPES + "]",
}


def validate_task(payload: Any) -> TaskPayload:
    """Check a task payload against the field rules.

    Returns the parsed payload. Raises :class:`ValidationError` carrying the
    message of the first rule that fails, checked in field order. Unknown
    fields are accepted and kept unless their key contains "." or starts with
    "$", or they hold an integer outside the 64-bit range.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError('"value" must be of type object')
    try:
        task = TaskPayload.model_validate(dict(payload))
    except pydantic.ValidationError as exc:
        raise ValidationError(describe_error(exc.errors()[0])) from exc
    check_extras(task.extras())
    return task


def check_extras(extras: Dict[str, Any]) -> None:
    """Reject extra fields the store cannot hold as plain top-level values.

    Dotted or $-prefixed keys would be read as paths or operators by $set.
    """
    for key, value in extras.items():
        if key.startswith("$") or "." in key:
            raise ValidationError(f'"{key}" is not allowed')
        if not _fits_int64(value):
            raise ValidationError(f'"{key}" contains a number that is too large')


def _fits_int64(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, int):
        return INT64_MIN <= value <= INT64_MAX
    if isinstance(value, Mapping):
        return all(_fits_int64(item) for item in value.values())
    if isinstance(value, (list, tuple)):
        return all(_fits_int64(item) for item in value)
    return True


def describe_error(error: Dict[str, Any]) -> str:
    field = ".".join(str(part) for part in error["loc"]) or "value"
    error_type = error["type"]
    if error_type.startswith("datetime") or error_type.startswith("date_"):
        reason = "must be a valid date"
    elif error_type in _REASONS:
        reason = _REASONS[error_type].format(**error.get("ctx", {}))
    else:
        reason = error["msg"]
    return f'"{field}" {reason}'
