"""Partial update models.

Only fields explicitly set by the caller are applied (shallow merge). Unknown
fields, including id, createdAt and taskCount, are ignored. Fields that can
only be cleared (dueDate, completedAt) accept an explicit null; every other
field rejects it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from taskflow.domain.task import Priority


class PartialUpdate(BaseModel):
    """Base for partial updates."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def changes(self) -> dict[str, Any]:
        """Return the explicitly supplied fields keyed by their camelCase names."""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=True)


def _reject_null(v: Any) -> Any:
    if v is None:
        msg = "Field cannot be null"
        raise ValueError(msg)
    return v


class TaskUpdate(PartialUpdate):
    """Partial task update.

    The caller supplies completed and completedAt together when toggling.
    """

    title: str | None = None
    category: str | None = None
    priority: Priority | None = None
    due_date: str | None = None
    completed: bool | None = None
    completed_at: str | None = None

    @field_validator("title", "category", "priority", "completed")
    @classmethod
    def validate_not_null(cls, v: Any) -> Any:
        """Omit a field to leave it unchanged; null is not a value for it."""
        return _reject_null(v)


class CategoryUpdate(PartialUpdate):
    """Partial category update."""

    name: str | None = None
    color: str | None = None

    @field_validator("name", "color")
    @classmethod
    def validate_not_null(cls, v: Any) -> Any:
        """Omit a field to leave it unchanged; null is not a value for it."""
        return _reject_null(v)
