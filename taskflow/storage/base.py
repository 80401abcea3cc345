"""Backend strategy interface shared by the local and remote persistence layers."""

from typing import Any, Protocol, TypeVar

from pydantic import BaseModel


ModelT = TypeVar("ModelT", bound=BaseModel)


class StorageBackend(Protocol[ModelT]):
    """Persistence capability set used by a collection store.

    All field dicts use the camelCase payload names (title, dueDate, createdAt, ...).
    Returned models are snapshots the caller may freely mutate.
    """

    async def list(self, where: dict[str, Any] | None = None) -> list[ModelT]:
        """Return records in collection order, optionally filtered by field equality."""
        ...

    async def get(self, record_id: str) -> ModelT:
        """Return one record. Raises NotFoundError when absent."""
        ...

    async def insert(self, values: dict[str, Any]) -> ModelT:
        """Store a new record, assigning its id."""
        ...

    async def patch(self, record_id: str, changes: dict[str, Any]) -> ModelT:
        """Shallow-merge changes into a record. Raises NotFoundError when absent."""
        ...

    async def remove(self, record_id: str) -> None:
        """Delete a record. Raises NotFoundError when absent."""
        ...
