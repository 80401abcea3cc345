"""Task store: create/read/update/delete/query over the task collection."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from taskflow.core.config import Constants
from taskflow.core.logging import span
from taskflow.domain.create_models import TaskCreate
from taskflow.domain.task import Priority, Task
from taskflow.domain.update_models import TaskUpdate
from taskflow.services.collection_store import CollectionStore
from taskflow.services.task_query import order_tasks


logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TaskStore(CollectionStore[Task]):
    """Owns the task collection.

    get_all() orders incomplete before completed and newest first within each
    group; the filtered getters keep the collection's own relative order.
    """

    entity = "task"
    update_model = TaskUpdate

    def _order(self, records: list[Task]) -> list[Task]:
        return order_tasks(records)

    async def create(self, task_input: TaskCreate | Mapping[str, Any]) -> Task:
        """Create a task with defaults applied and insert it at the front of the collection.

        Args:
            task_input: Title plus optional category, priority and dueDate

        Returns:
            The created task
        """
        if not isinstance(task_input, TaskCreate):
            task_input = TaskCreate.model_validate(dict(task_input))

        values = {
            "title": task_input.title,
            "category": task_input.category or Constants.DEFAULT_CATEGORY,
            "priority": (task_input.priority or Priority.MEDIUM).value,
            "dueDate": task_input.due_date or None,
            "completed": False,
            "createdAt": utc_now_iso(),
            "completedAt": None,
        }
        return await self._insert(values)

    async def get_by_category(self, category: str) -> list[Task]:
        """Tasks whose category equals the given name."""
        with span("task_store.get_by_category", category=category):
            return await self._query({"category": category})

    async def get_completed(self) -> list[Task]:
        with span("task_store.get_completed"):
            return await self._query({"completed": True})

    async def get_pending(self) -> list[Task]:
        with span("task_store.get_pending"):
            return await self._query({"completed": False})
