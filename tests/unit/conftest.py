"""Pytest configuration and fixtures for unit tests."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from taskflow.core.kv_store import KeyValueStore
from taskflow.core.record_client import RecordClient
from taskflow.domain.category import Category
from taskflow.domain.task import Task
from taskflow.services.board_service import BoardService
from taskflow.services.category_store import CategoryStore
from taskflow.services.task_store import TaskStore
from taskflow.storage.factory import remote_category_backend, remote_task_backend
from taskflow.storage.local import LocalBackend
from tests.unit.mocks import InMemoryPocketBase


@pytest.fixture
async def kv(tmp_path: Path) -> AsyncIterator[KeyValueStore]:
    """Provides a fresh SQLite key-value store in a temp directory."""
    store = KeyValueStore(tmp_path / "storage.db")
    yield store
    await store.close()


@pytest.fixture
def empty_seed(tmp_path: Path) -> Path:
    """Seed file holding an empty collection."""
    path = tmp_path / "empty_seed.json"
    path.write_text("[]", encoding="utf-8")
    return path


def make_local_task_backend(kv: KeyValueStore, seed_path: Path) -> LocalBackend[Task]:
    return LocalBackend(
        kv=kv, key="taskflow_tasks", model=Task, entity="task", seed_path=seed_path, insert_at_front=True
    )


def make_local_category_backend(kv: KeyValueStore, seed_path: Path) -> LocalBackend[Category]:
    return LocalBackend(kv=kv, key="taskflow_categories", model=Category, entity="category", seed_path=seed_path)


@pytest.fixture
def task_store(kv: KeyValueStore, empty_seed: Path) -> TaskStore:
    """Task store on the local backend, starting empty."""
    return TaskStore(make_local_task_backend(kv, empty_seed))


@pytest.fixture
def category_store(kv: KeyValueStore, empty_seed: Path) -> CategoryStore:
    """Category store on the local backend, starting empty."""
    return CategoryStore(make_local_category_backend(kv, empty_seed))


@pytest.fixture
def board(task_store: TaskStore, category_store: CategoryStore) -> BoardService:
    return BoardService(task_store, category_store)


@pytest.fixture
def pocketbase() -> InMemoryPocketBase:
    """Provides an in-memory PocketBase stand-in."""
    return InMemoryPocketBase()


@pytest.fixture
def record_client(pocketbase: InMemoryPocketBase) -> RecordClient:
    return RecordClient(pocketbase)  # type: ignore[arg-type]


@pytest.fixture
def remote_task_store(record_client: RecordClient) -> TaskStore:
    """Task store on the remote backend."""
    return TaskStore(remote_task_backend(record_client))


@pytest.fixture
def remote_category_store(record_client: RecordClient) -> CategoryStore:
    """Category store on the remote backend."""
    return CategoryStore(remote_category_backend(record_client))


@pytest.fixture
def fixed_clock(monkeypatch: pytest.MonkeyPatch):
    """Makes task creation timestamps deterministic: each create is one minute after the last."""
    timestamps = iter(f"2024-03-01T10:{minute:02d}:00.000Z" for minute in range(60))
    monkeypatch.setattr("taskflow.services.task_store.utc_now_iso", lambda: next(timestamps))
