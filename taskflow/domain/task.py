"""Task domain models and enums."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskflow.core.config import Constants


class Priority(StrEnum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(BaseModel):
    """Task data transfer object.

    Attributes are snake_case; payloads use the camelCase aliases
    (dueDate, createdAt, completedAt).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique task ID")
    title: str = Field(..., description="Task title")
    category: str = Field(default=Constants.DEFAULT_CATEGORY, description="Name of the referenced category")
    priority: Priority = Field(default=Priority.MEDIUM, description="low, medium or high")
    due_date: str | None = Field(default=None, description="Due date (ISO format)")
    completed: bool = Field(default=False, description="Whether the task is done")
    created_at: str = Field(..., description="Creation timestamp (ISO format), immutable")
    completed_at: str | None = Field(default=None, description="Completion timestamp (ISO format)")

    def to_payload(self) -> dict:
        """Serialize using the camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")

    @property
    def completion_consistent(self) -> bool:
        """True when completed_at is set exactly when the task is completed."""
        return self.completed == (self.completed_at is not None)
