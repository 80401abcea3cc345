"""Async wrapper around the PocketBase SDK with per-record batch outcomes."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from pocketbase import PocketBase
from pocketbase.client import ClientResponseError

from taskflow.core.config import constants
from taskflow.core.errors import BackendUnavailableError, NotFoundError


logger = logging.getLogger(__name__)

HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404

FilterOperator = Literal["=", "!=", ">", "<", ">=", "<=", "~"]


def sanitize_param(value: str | int | float | bool | None) -> str:
    """Escape a value for safe embedding in filter strings via json.dumps."""
    return json.dumps(str(value))[1:-1]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if value is None:
        return '""'
    return f'"{sanitize_param(value)}"'


@dataclass(frozen=True)
class Predicate:
    """A single filter comparison against a storage field."""

    field: str
    value: Any
    op: FilterOperator = "="

    def render(self) -> str:
        return f"{self.field} {self.op} {_format_value(self.value)}"


@dataclass(frozen=True)
class RecordQuery:
    """Declarative list query: field list, filter predicates and sort clauses.

    Sort clauses use PocketBase syntax: "-field" descending, "+field" or "field" ascending.
    """

    fields: tuple[str, ...] = ()
    filters: tuple[Predicate, ...] = ()
    sort: tuple[str, ...] = ()

    def to_query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.fields:
            params["fields"] = ",".join(self.fields)
        if self.filters:
            params["filter"] = " && ".join(p.render() for p in self.filters)
        if self.sort:
            params["sort"] = ",".join(self.sort)
        return params


@dataclass
class RecordResult:
    """Outcome of one record within a batch call."""

    success: bool
    record_id: str | None = None
    record: dict[str, Any] | None = None
    message: str = ""
    status: int = 0
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def transport_failure(self) -> bool:
        return not self.success and (self.status == 0 or self.status >= 500)  # noqa: PLR2004


@dataclass
class BatchResult:
    """Per-record outcomes of a create/update/delete batch."""

    results: list[RecordResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[RecordResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[RecordResult]:
        return [r for r in self.results if not r.success]

    @property
    def all_succeeded(self) -> bool:
        return bool(self.results) and not self.failed


def _record_to_dict(record: Any) -> dict[str, Any]:
    """Convert an SDK record object into a plain dict."""
    if isinstance(record, dict):
        return dict(record)
    data = {k: v for k, v in vars(record).items() if k not in ("expand", "collection_id", "collection_name")}
    data["id"] = str(data.get("id", ""))
    return data


def _extract_field_errors(error: ClientResponseError) -> dict[str, str]:
    """Pull field-level validation messages out of a PocketBase 400 response."""
    data = error.data if isinstance(error.data, dict) else {}
    fields = data.get("data") if isinstance(data.get("data"), dict) else {}

    field_errors: dict[str, str] = {}
    for name, detail in fields.items():
        field_errors[name] = detail.get("message", str(detail)) if isinstance(detail, dict) else str(detail)
    return field_errors


def _to_result(error: ClientResponseError, record_id: str | None) -> RecordResult:
    status = getattr(error, "status", 0) or 0
    field_errors = _extract_field_errors(error) if status == HTTP_BAD_REQUEST else {}
    return RecordResult(
        success=False,
        record_id=record_id,
        message=str(error),
        status=status,
        field_errors=field_errors,
    )


class RecordClient:
    """Generic list/get/create/update/delete access to PocketBase collections.

    The SDK is synchronous; every call runs in a worker thread.
    """

    def __init__(self, pb: PocketBase) -> None:
        self._pb = pb

    @classmethod
    def from_url(cls, url: str) -> "RecordClient":
        """Create a client for the PocketBase server at url."""
        return cls(PocketBase(url, timeout=constants.API_TIMEOUT_SECONDS))

    async def list_records(self, *, collection: str, query: RecordQuery | None = None) -> list[dict[str, Any]]:
        """List every record matching query.

        Raises:
            BackendUnavailableError: If the request fails
        """
        params = (query or RecordQuery()).to_query_params()
        try:
            records = await asyncio.to_thread(
                self._pb.collection(collection).get_full_list,
                constants.FULL_LIST_BATCH_SIZE,
                params,
            )
        except ClientResponseError as e:
            logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
            raise BackendUnavailableError(f"Failed to list records from {collection}: {e}") from e

        logger.info("Listed records", extra={"collection": collection, "count": len(records)})
        return [_record_to_dict(r) for r in records]

    async def get_record(
        self, *, collection: str, record_id: str, fields: tuple[str, ...] = ()
    ) -> dict[str, Any]:
        """Fetch a single record by ID.

        Raises:
            NotFoundError: If no record has this ID
            BackendUnavailableError: For other failures
        """
        params = RecordQuery(fields=fields).to_query_params()
        try:
            record = await asyncio.to_thread(self._pb.collection(collection).get_one, record_id, params)
        except ClientResponseError as e:
            if getattr(e, "status", 0) == HTTP_NOT_FOUND:
                raise NotFoundError(collection, record_id) from e
            logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
            raise BackendUnavailableError(f"Failed to get record from {collection}: {e}") from e

        return _record_to_dict(record)

    async def create_records(self, *, collection: str, items: list[dict[str, Any]]) -> BatchResult:
        """Create each item, collecting a per-record outcome."""
        batch = BatchResult()
        for item in items:
            try:
                record = await asyncio.to_thread(self._pb.collection(collection).create, item)
            except ClientResponseError as e:
                logger.warning("create_record_failed", extra={"collection": collection, "error": str(e)})
                batch.results.append(_to_result(e, None))
                continue
            data = _record_to_dict(record)
            batch.results.append(RecordResult(success=True, record_id=data["id"], record=data))

        logger.info(
            "Created records",
            extra={"collection": collection, "succeeded": len(batch.succeeded), "failed": len(batch.failed)},
        )
        return batch

    async def update_records(self, *, collection: str, updates: dict[str, dict[str, Any]]) -> BatchResult:
        """Apply each record_id -> changes update, collecting a per-record outcome."""
        batch = BatchResult()
        for record_id, changes in updates.items():
            try:
                record = await asyncio.to_thread(self._pb.collection(collection).update, record_id, changes)
            except ClientResponseError as e:
                logger.warning(
                    "update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)}
                )
                batch.results.append(_to_result(e, record_id))
                continue
            batch.results.append(RecordResult(success=True, record_id=record_id, record=_record_to_dict(record)))

        logger.info(
            "Updated records",
            extra={"collection": collection, "succeeded": len(batch.succeeded), "failed": len(batch.failed)},
        )
        return batch

    async def delete_records(self, *, collection: str, record_ids: list[str]) -> BatchResult:
        """Delete each record ID, collecting a per-record outcome."""
        batch = BatchResult()
        for record_id in record_ids:
            try:
                await asyncio.to_thread(self._pb.collection(collection).delete, record_id)
            except ClientResponseError as e:
                logger.warning(
                    "delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)}
                )
                batch.results.append(_to_result(e, record_id))
                continue
            batch.results.append(RecordResult(success=True, record_id=record_id))

        logger.info(
            "Deleted records",
            extra={"collection": collection, "succeeded": len(batch.succeeded), "failed": len(batch.failed)},
        )
        return batch
