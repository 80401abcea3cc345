"""Remote persistence: proxies every operation to a PocketBase collection."""

import logging
from collections.abc import Sequence
from typing import Any, Generic

from taskflow.core.errors import (
    BackendUnavailableError,
    NotFoundError,
    PartialBatchFailureError,
    ValidationFailedError,
)
from taskflow.core.record_client import HTTP_NOT_FOUND, BatchResult, Predicate, RecordClient, RecordQuery
from taskflow.storage.base import ModelT
from taskflow.storage.mapping import Mapper


logger = logging.getLogger(__name__)


def raise_for_batch(batch: BatchResult, *, action: str, entity: str) -> None:
    """Apply the batch failure policy.

    Any failed record fails the call. Records that succeeded are not rolled back.
    """
    if batch.all_succeeded:
        return

    failed = batch.failed
    if not batch.succeeded:
        first = failed[0] if failed else None
        if first is None:
            raise BackendUnavailableError(f"Failed to {action} {entity}: no records returned")
        if len(failed) == 1 and first.status == HTTP_NOT_FOUND and first.record_id:
            raise NotFoundError(entity, first.record_id)
        if first.field_errors:
            raise ValidationFailedError(f"Failed to {action} {entity}: invalid fields", first.field_errors)
        raise BackendUnavailableError(f"Failed to {action} {entity}: {first.message}")

    raise PartialBatchFailureError(
        f"Failed to {action} {len(failed)} of {len(batch.results)} {entity} records",
        succeeded=[r.record_id for r in batch.succeeded if r.record_id],
        failed={r.record_id or "": r.message for r in failed},
    )


class RemoteBackend(Generic[ModelT]):
    """Backend strategy over a PocketBase collection.

    Payload dicts are translated with the entity's to-storage/from-storage
    mappers; storage column names never leave this class.
    """

    def __init__(
        self,
        *,
        client: RecordClient,
        collection: str,
        model: type[ModelT],
        entity: str,
        to_storage: Mapper,
        from_storage: Mapper,
        columns: tuple[str, ...],
        sort: tuple[str, ...] = (),
    ) -> None:
        self._client = client
        self._collection = collection
        self._model = model
        self._entity = entity
        self._to_storage = to_storage
        self._from_storage = from_storage
        self._columns = columns
        self._sort = sort

    def _to_model(self, record: dict[str, Any]) -> ModelT:
        return self._model.model_validate(self._from_storage(record))

    def _build_query(self, where: dict[str, Any] | None) -> RecordQuery:
        filters = tuple(Predicate(field=column, value=value) for column, value in self._to_storage(where or {}).items())
        return RecordQuery(fields=self._columns, filters=filters, sort=self._sort)

    async def list(self, where: dict[str, Any] | None = None) -> list[ModelT]:
        records = await self._client.list_records(collection=self._collection, query=self._build_query(where))
        return [self._to_model(r) for r in records]

    async def get(self, record_id: str) -> ModelT:
        try:
            record = await self._client.get_record(
                collection=self._collection, record_id=record_id, fields=self._columns
            )
        except NotFoundError as e:
            raise NotFoundError(self._entity, record_id) from e
        return self._to_model(record)

    async def insert(self, values: dict[str, Any]) -> ModelT:
        batch = await self._client.create_records(collection=self._collection, items=[self._to_storage(values)])
        raise_for_batch(batch, action="create", entity=self._entity)
        return self._to_model(batch.succeeded[0].record or {})

    async def patch(self, record_id: str, changes: dict[str, Any]) -> ModelT:
        stored = self._to_storage(changes)
        if not stored:
            # Nothing to write; still report NotFound for unknown ids
            return await self.get(record_id)

        batch = await self._client.update_records(collection=self._collection, updates={record_id: stored})
        raise_for_batch(batch, action="update", entity=self._entity)
        return self._to_model(batch.succeeded[0].record or {})

    async def remove(self, record_id: str) -> None:
        await self.remove_many([record_id])

    async def remove_many(self, record_ids: Sequence[str]) -> None:
        """Delete several records; succeeds only if every deletion succeeded."""
        if not record_ids:
            return

        batch = await self._client.delete_records(collection=self._collection, record_ids=list(record_ids))
        raise_for_batch(batch, action="delete", entity=self._entity)
