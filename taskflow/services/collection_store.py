"""Generic persisted collection shared by the task and category stores."""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Generic

from pydantic import ValidationError

from taskflow.core.errors import BackendUnavailableError, ValidationFailedError
from taskflow.core.logging import span
from taskflow.domain.update_models import PartialUpdate
from taskflow.storage.base import ModelT, StorageBackend


logger = logging.getLogger(__name__)


class CollectionStore(Generic[ModelT]):
    """Exclusive owner of one entity collection; all mutations pass through it.

    Reads that fail at the backend are logged and yield an empty list so callers
    always have something to render. Write failures propagate.
    """

    entity: ClassVar[str] = "record"
    update_model: ClassVar[type[PartialUpdate]]

    def __init__(self, backend: StorageBackend[ModelT]) -> None:
        self._backend = backend

    def _order(self, records: list[ModelT]) -> list[ModelT]:
        return records

    async def _query(self, where: dict[str, Any] | None = None) -> list[ModelT]:
        try:
            return await self._backend.list(where)
        except BackendUnavailableError as e:
            logger.error(
                "Read failed, returning empty collection",
                extra={"entity": self.entity, "where": where, "error": str(e)},
            )
            return []

    async def get_all(self) -> list[ModelT]:
        """Return snapshots of every record."""
        with span(f"{self.entity}_store.get_all"):
            return self._order(await self._query())

    async def get_by_id(self, record_id: str) -> ModelT:
        """Return one record.

        Raises:
            NotFoundError: If no record has this ID
        """
        with span(f"{self.entity}_store.get_by_id", record_id=record_id):
            return await self._backend.get(record_id)

    async def _insert(self, values: dict[str, Any]) -> ModelT:
        with span(f"{self.entity}_store.create"):
            record = await self._backend.insert(values)
            logger.info("Created %s %s", self.entity, record.id)  # type: ignore[attr-defined]
            return record

    async def update(self, record_id: str, changes: PartialUpdate | Mapping[str, Any]) -> ModelT:
        """Shallow-merge the supplied fields into a record.

        Args:
            record_id: ID of the record to update
            changes: Update model or camelCase mapping; only supplied fields change

        Raises:
            NotFoundError: If no record has this ID
            ValidationFailedError: If a supplied field has an invalid value
        """
        try:
            if not isinstance(changes, PartialUpdate):
                changes = self.update_model.model_validate(dict(changes))

            with span(f"{self.entity}_store.update", record_id=record_id):
                record = await self._backend.patch(record_id, changes.changes())
        except ValidationError as e:
            raise ValidationFailedError.from_validation_error(f"Invalid {self.entity} update", e) from e

        logger.info("Updated %s %s", self.entity, record_id)
        return record

    async def delete(self, record_id: str) -> bool:
        """Remove a record.

        Raises:
            NotFoundError: If no record has this ID
        """
        with span(f"{self.entity}_store.delete", record_id=record_id):
            await self._backend.remove(record_id)
            logger.info("Deleted %s %s", self.entity, record_id)
            return True
