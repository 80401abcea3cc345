"""Domain models and DTOs."""

from taskflow.domain.category import Category
from taskflow.domain.create_models import CategoryCreate, TaskCreate
from taskflow.domain.task import Priority, Task
from taskflow.domain.update_models import CategoryUpdate, TaskUpdate


__all__ = [
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "Priority",
    "Task",
    "TaskCreate",
    "TaskUpdate",
]
