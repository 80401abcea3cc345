"""Field-name translation between payload (camelCase) and PocketBase storage shapes.

Each entity has a pure to-storage and from-storage function. to-storage only
maps the keys present in its input so partial updates never touch unrelated
columns; from-storage fills defaults for null or missing columns.
"""

from collections.abc import Callable
from typing import Any

from taskflow.core.config import Constants
from taskflow.domain.task import Priority


TASK_FIELDS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "category": "category_name",
    "priority": "priority",
    "dueDate": "due_date",
    "completed": "is_completed",
    "createdAt": "created_at",
    "completedAt": "completed_at",
}

CATEGORY_FIELDS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "color": "color",
    "taskCount": "task_count",
}

_OPTIONAL_DATES = {"due_date", "completed_at"}


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _coerce_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _blank_to_none(value: Any) -> Any:
    return None if value in ("", None) else value


def _rename(payload: dict[str, Any], names: dict[str, str]) -> dict[str, Any]:
    return {names[key]: value for key, value in payload.items() if key in names}


def task_to_storage(payload: dict[str, Any]) -> dict[str, Any]:
    """Map task payload fields to storage columns, dropping the id and unknown keys."""
    stored = _rename({k: v for k, v in payload.items() if k != "id"}, TASK_FIELDS)

    if "is_completed" in stored:
        stored["is_completed"] = _coerce_bool(stored["is_completed"])
    if "priority" in stored and stored["priority"] is not None:
        stored["priority"] = str(stored["priority"])
    for column in _OPTIONAL_DATES & stored.keys():
        # PocketBase clears date columns with an empty string
        if stored[column] is None:
            stored[column] = ""
    return stored


def task_from_storage(record: dict[str, Any]) -> dict[str, Any]:
    """Map a stored task record back to payload fields with defaults."""
    return {
        "id": str(record.get("id", "")),
        "title": record.get("title") or "",
        "category": record.get("category_name") or Constants.DEFAULT_CATEGORY,
        "priority": record.get("priority") or Priority.MEDIUM.value,
        "dueDate": _blank_to_none(record.get("due_date")),
        "completed": _coerce_bool(record.get("is_completed") or False),
        "createdAt": record.get("created_at") or "",
        "completedAt": _blank_to_none(record.get("completed_at")),
    }


def category_to_storage(payload: dict[str, Any]) -> dict[str, Any]:
    """Map category payload fields to storage columns, dropping the id and unknown keys."""
    stored = _rename({k: v for k, v in payload.items() if k != "id"}, CATEGORY_FIELDS)

    if "task_count" in stored:
        stored["task_count"] = _coerce_int(stored["task_count"])
    if "color" in stored and stored["color"] is None:
        del stored["color"]
    return stored


def category_from_storage(record: dict[str, Any]) -> dict[str, Any]:
    """Map a stored category record back to payload fields with defaults."""
    return {
        "id": str(record.get("id", "")),
        "name": record.get("name") or "",
        "color": record.get("color") or Constants.DEFAULT_CATEGORY_COLOR,
        "taskCount": _coerce_int(record.get("task_count")),
    }


Mapper = Callable[[dict[str, Any]], dict[str, Any]]
