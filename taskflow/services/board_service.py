"""Page-level task operations built on the task and category stores."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from taskflow.core.config import Constants
from taskflow.core.errors import PartialBatchFailureError, TaskFlowError, ValidationFailedError
from taskflow.core.logging import log_with_context, span
from taskflow.domain.category import Category
from taskflow.domain.create_models import TaskCreate
from taskflow.domain.task import Task
from taskflow.domain.update_models import TaskUpdate
from taskflow.services.category_store import CategoryStore
from taskflow.services.task_query import count_by_category
from taskflow.services.task_store import TaskStore, utc_now_iso


logger = logging.getLogger(__name__)


class Board(BaseModel):
    """Tasks and categories loaded together for one view."""

    tasks: list[Task]
    categories: list[Category]


class BoardService:
    """Operations the task list page performs: add, toggle, bulk complete and bulk delete.

    Stores are injected; the service holds no state of its own.
    """

    def __init__(self, task_store: TaskStore, category_store: CategoryStore) -> None:
        self.tasks = task_store
        self.categories = category_store

    async def load(self) -> Board:
        """Fetch tasks and categories concurrently."""
        with span("board_service.load"):
            tasks, categories = await asyncio.gather(self.tasks.get_all(), self.categories.get_all())
            counts = count_by_category(tasks, categories)
            categories = [c.model_copy(update={"task_count": counts.get(c.name, 0)}) for c in categories]
            return Board(tasks=tasks, categories=categories)

    async def add_task(self, data: TaskCreate | Mapping[str, Any]) -> Task:
        """Validate and create a task.

        Raises:
            ValidationFailedError: If the title is empty after trimming
        """
        task_input = data if isinstance(data, TaskCreate) else TaskCreate.model_validate(dict(data))
        title = task_input.title.strip()
        if not title:
            raise ValidationFailedError("Task title is required", {"title": "Task title is required"})

        with span("board_service.add_task"):
            return await self.tasks.create(
                task_input.model_copy(
                    update={
                        "title": title,
                        "due_date": task_input.due_date or None,
                        "category": task_input.category or Constants.DEFAULT_CATEGORY,
                    }
                )
            )

    async def toggle_complete(self, task_id: str) -> Task:
        """Flip completion, setting or clearing completedAt alongside it."""
        with span("board_service.toggle_complete"):
            task = await self.tasks.get_by_id(task_id)
            completed = not task.completed
            return await self.tasks.update(
                task_id,
                TaskUpdate(completed=completed, completed_at=utc_now_iso() if completed else None),
            )

    async def bulk_complete(self, task_ids: Iterable[str]) -> list[Task]:
        """Complete every selected task concurrently.

        Tasks that are already completed are returned unchanged.

        Raises:
            PartialBatchFailureError: If any update failed
        """
        ids = list(dict.fromkeys(task_ids))

        async def _complete(task_id: str) -> Task:
            task = await self.tasks.get_by_id(task_id)
            if task.completed:
                return task
            return await self.tasks.update(task_id, TaskUpdate(completed=True, completed_at=utc_now_iso()))

        with span("board_service.bulk_complete", count=len(ids)):
            results = await asyncio.gather(*(_complete(i) for i in ids), return_exceptions=True)
            return self._collect(ids, results, action="complete")

    async def bulk_delete(self, task_ids: Iterable[str]) -> list[str]:
        """Delete every selected task concurrently and return the deleted ids.

        Raises:
            PartialBatchFailureError: If any deletion failed; successful deletions stay deleted
        """
        ids = list(dict.fromkeys(task_ids))

        with span("board_service.bulk_delete", count=len(ids)):
            results = await asyncio.gather(*(self.tasks.delete(i) for i in ids), return_exceptions=True)
            self._collect(ids, results, action="delete")
            return ids

    def _collect(self, ids: list[str], results: list[Any], *, action: str) -> list[Any]:
        failed: dict[str, str] = {}
        for task_id, result in zip(ids, results, strict=True):
            if isinstance(result, TaskFlowError):
                failed[task_id] = str(result)
            elif isinstance(result, BaseException):
                raise result

        if failed:
            succeeded = [i for i in ids if i not in failed]
            log_with_context(
                logger,
                "warning",
                f"Bulk {action} partially failed",
                failed=list(failed),
                succeeded_count=len(succeeded),
            )
            raise PartialBatchFailureError(
                f"Failed to {action} {len(failed)} of {len(ids)} tasks",
                succeeded=succeeded,
                failed=failed,
            )

        logger.info("Bulk %s completed for %d tasks", action, len(ids))
        return list(results)
