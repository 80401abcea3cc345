"""Category store: create/read/update/delete over the category collection."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from taskflow.core.config import Constants
from taskflow.core.logging import span
from taskflow.domain.category import Category
from taskflow.domain.create_models import CategoryCreate
from taskflow.domain.task import Task
from taskflow.domain.update_models import CategoryUpdate
from taskflow.services.collection_store import CollectionStore
from taskflow.services.task_query import count_by_category


logger = logging.getLogger(__name__)


class CategoryStore(CollectionStore[Category]):
    """Owns the category collection. get_all() keeps collection order.

    Deleting a category leaves tasks that reference its name untouched.
    """

    entity = "category"
    update_model = CategoryUpdate

    async def create(self, category_input: CategoryCreate | Mapping[str, Any]) -> Category:
        """Append a new category; color defaults to neutral gray."""
        if not isinstance(category_input, CategoryCreate):
            category_input = CategoryCreate.model_validate(dict(category_input))

        values = {
            "name": category_input.name,
            "color": category_input.color or Constants.DEFAULT_CATEGORY_COLOR,
            "taskCount": 0,
        }
        return await self._insert(values)

    async def get_by_name(self, name: str) -> Category | None:
        """First category with this name, or None."""
        with span("category_store.get_by_name"):
            matches = await self._query({"name": name})
            return matches[0] if matches else None

    async def with_task_counts(self, tasks: Iterable[Task]) -> list[Category]:
        """Categories with taskCount recomputed from the given tasks.

        The stored counter is never trusted; nothing is written back.
        """
        categories = await self.get_all()
        counts = count_by_category(tasks, categories)
        return [c.model_copy(update={"task_count": counts.get(c.name, 0)}) for c in categories]
