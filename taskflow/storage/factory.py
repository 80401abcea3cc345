"""Backend strategy selection for the task and category stores."""

import logging

from taskflow.core.config import Settings, constants
from taskflow.core.kv_store import KeyValueStore
from taskflow.core.record_client import RecordClient
from taskflow.domain.category import Category
from taskflow.domain.task import Task
from taskflow.storage.base import StorageBackend
from taskflow.storage.local import LocalBackend
from taskflow.storage.mapping import (
    CATEGORY_FIELDS,
    TASK_FIELDS,
    category_from_storage,
    category_to_storage,
    task_from_storage,
    task_to_storage,
)
from taskflow.storage.remote import RemoteBackend


logger = logging.getLogger(__name__)

TASK_SORT = ("-created_at",)
CATEGORY_SORT = ("+created",)


def local_task_backend(kv: KeyValueStore, *, key: str = "taskflow_tasks") -> LocalBackend[Task]:
    return LocalBackend(
        kv=kv,
        key=key,
        model=Task,
        entity="task",
        seed_path=constants.TASK_SEED_FILE,
        insert_at_front=True,
    )


def local_category_backend(kv: KeyValueStore, *, key: str = "taskflow_categories") -> LocalBackend[Category]:
    return LocalBackend(
        kv=kv,
        key=key,
        model=Category,
        entity="category",
        seed_path=constants.CATEGORY_SEED_FILE,
    )


def remote_task_backend(client: RecordClient) -> RemoteBackend[Task]:
    return RemoteBackend(
        client=client,
        collection=constants.TASK_COLLECTION,
        model=Task,
        entity="task",
        to_storage=task_to_storage,
        from_storage=task_from_storage,
        columns=tuple(TASK_FIELDS.values()),
        sort=TASK_SORT,
    )


def remote_category_backend(client: RecordClient) -> RemoteBackend[Category]:
    return RemoteBackend(
        client=client,
        collection=constants.CATEGORY_COLLECTION,
        model=Category,
        entity="category",
        to_storage=category_to_storage,
        from_storage=category_from_storage,
        columns=tuple(CATEGORY_FIELDS.values()),
        sort=CATEGORY_SORT,
    )


def build_backends(
    settings: Settings,
    *,
    kv: KeyValueStore | None = None,
    client: RecordClient | None = None,
) -> tuple[StorageBackend[Task], StorageBackend[Category]]:
    """Build the (task, category) backends for the configured strategy.

    Args:
        settings: Application settings; settings.backend selects the strategy
        kv: Key-value storage for the local strategy (created from settings if omitted)
        client: Record client for the remote strategy (created from settings if omitted)
    """
    if settings.backend == "remote":
        client = client or RecordClient.from_url(settings.pocketbase_url)
        logger.info("Using remote backend", extra={"pocketbase_url": settings.pocketbase_url})
        return remote_task_backend(client), remote_category_backend(client)

    kv = kv or KeyValueStore(settings.local_db_path)
    logger.info("Using local backend", extra={"db_path": str(kv.path)})
    return (
        local_task_backend(kv, key=settings.tasks_storage_key),
        local_category_backend(kv, key=settings.categories_storage_key),
    )
