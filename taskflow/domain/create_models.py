"""Pydantic models for creating records."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskflow.domain.task import Priority


class TaskCreate(BaseModel):
    """Input for creating a task. Unset fields receive the store defaults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., description="Task title")
    category: str | None = Field(default=None, description="Category name (defaults to 'general')")
    priority: Priority | None = Field(default=None, description="Priority (defaults to medium)")
    due_date: str | None = Field(default=None, description="Due date (ISO format)")


class CategoryCreate(BaseModel):
    """Input for creating a category."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., description="Category name")
    color: str | None = Field(default=None, description="Display color (defaults to neutral gray)")
