"""Local persistence: one JSON array per collection in on-device key-value storage."""

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Any, Generic

from pydantic import TypeAdapter, ValidationError

from taskflow.core.errors import NotFoundError
from taskflow.core.kv_store import KeyValueStore
from taskflow.storage.base import ModelT


logger = logging.getLogger(__name__)


class LocalBackend(Generic[ModelT]):
    """Holds the canonical collection in memory and mirrors it to key-value storage.

    The collection is loaded on first use. A missing or unreadable blob is
    replaced by the bundled seed. Every mutation rewrites the whole blob;
    write failures are logged and the in-memory state is kept.
    """

    def __init__(
        self,
        *,
        kv: KeyValueStore,
        key: str,
        model: type[ModelT],
        entity: str,
        seed_path: Path,
        insert_at_front: bool = False,
    ) -> None:
        self._kv = kv
        self._key = key
        self._model = model
        self._entity = entity
        self._seed_path = seed_path
        self._insert_at_front = insert_at_front
        self._adapter = TypeAdapter(list[model])
        self._records: list[ModelT] | None = None
        self._load_lock = asyncio.Lock()
        self._last_id = 0

    async def _collection(self) -> list[ModelT]:
        if self._records is not None:
            return self._records

        async with self._load_lock:
            if self._records is None:
                records = await self._load_persisted()
                if records is None:
                    records = self._load_seed()
                    self._records = records
                    await self._persist()
                else:
                    self._records = records
        return self._records

    async def _load_persisted(self) -> list[ModelT] | None:
        try:
            raw = await self._kv.get(self._key)
        except Exception as e:
            logger.warning("Failed to read persisted collection", extra={"key": self._key, "error": str(e)})
            return None

        if raw is None:
            return None

        try:
            return self._adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                "Persisted collection is unreadable, falling back to seed",
                extra={"key": self._key, "error": str(e)},
            )
            return None

    def _load_seed(self) -> list[ModelT]:
        try:
            records = self._adapter.validate_json(self._seed_path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Seed data unavailable", extra={"seed_path": str(self._seed_path), "error": str(e)})
            return []

        logger.info("Seeded collection", extra={"key": self._key, "count": len(records)})
        return records

    async def _persist(self) -> None:
        records = self._records or []
        blob = json.dumps([r.model_dump(by_alias=True, mode="json") for r in records])
        try:
            await self._kv.set(self._key, blob)
        except Exception as e:
            logger.warning("Failed to persist collection", extra={"key": self._key, "error": str(e)})

    def _next_id(self, records: list[ModelT]) -> str:
        """Epoch-millisecond id, bumped past any id already handed out."""
        taken = {r.id for r in records}  # type: ignore[attr-defined]
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def _index_of(self, records: list[ModelT], record_id: str) -> int:
        for index, record in enumerate(records):
            if record.id == record_id:  # type: ignore[attr-defined]
                return index
        raise NotFoundError(self._entity, record_id)

    async def list(self, where: dict[str, Any] | None = None) -> list[ModelT]:
        records = await self._collection()
        snapshots = [r.model_copy(deep=True) for r in records]
        if not where:
            return snapshots

        return [r for r in snapshots if all(r.to_payload().get(k) == v for k, v in where.items())]  # type: ignore[attr-defined]

    async def get(self, record_id: str) -> ModelT:
        records = await self._collection()
        return records[self._index_of(records, record_id)].model_copy(deep=True)

    async def insert(self, values: dict[str, Any]) -> ModelT:
        records = await self._collection()
        record = self._model.model_validate({**values, "id": self._next_id(records)})

        if self._insert_at_front:
            records.insert(0, record)
        else:
            records.append(record)

        await self._persist()
        logger.info("Created record", extra={"key": self._key, "record_id": record.id})  # type: ignore[attr-defined]
        return record.model_copy(deep=True)

    async def patch(self, record_id: str, changes: dict[str, Any]) -> ModelT:
        records = await self._collection()
        index = self._index_of(records, record_id)

        merged = {**records[index].model_dump(by_alias=True, mode="json"), **changes, "id": record_id}
        records[index] = self._model.model_validate(merged)

        await self._persist()
        logger.info("Updated record", extra={"key": self._key, "record_id": record_id})
        return records[index].model_copy(deep=True)

    async def remove(self, record_id: str) -> None:
        records = await self._collection()
        del records[self._index_of(records, record_id)]

        await self._persist()
        logger.info("Deleted record", extra={"key": self._key, "record_id": record_id})
