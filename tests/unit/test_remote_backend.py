"""Unit tests for the remote (PocketBase) backend and the stores running on it."""

import pytest

from taskflow.core.errors import (
    BackendUnavailableError,
    NotFoundError,
    PartialBatchFailureError,
    ValidationFailedError,
)
from taskflow.core.record_client import BatchResult, RecordResult
from taskflow.domain import Priority
from taskflow.storage.factory import remote_task_backend
from taskflow.storage.remote import raise_for_batch


@pytest.mark.unit
class TestRaiseForBatch:
    """Tests for the batch failure policy."""

    def test_all_succeeded(self):
        """Test a fully successful batch does not raise."""
        raise_for_batch(BatchResult([RecordResult(success=True, record_id="a")]), action="create", entity="task")

    def test_single_not_found(self):
        """Test one 404 becomes NotFoundError for that id."""
        batch = BatchResult([RecordResult(success=False, record_id="a", status=404)])

        with pytest.raises(NotFoundError) as exc_info:
            raise_for_batch(batch, action="update", entity="task")

        assert exc_info.value.record_id == "a"

    def test_field_errors(self):
        """Test rejected fields become ValidationFailedError."""
        batch = BatchResult([RecordResult(success=False, status=400, field_errors={"title": "Missing required value."})])

        with pytest.raises(ValidationFailedError) as exc_info:
            raise_for_batch(batch, action="create", entity="task")

        assert exc_info.value.field_errors == {"title": "Missing required value."}

    def test_overall_failure(self):
        """Test any other total failure is BackendUnavailableError."""
        batch = BatchResult([RecordResult(success=False, status=0, message="connection refused")])

        with pytest.raises(BackendUnavailableError, match="connection refused"):
            raise_for_batch(batch, action="create", entity="task")

    def test_empty_batch(self):
        """Test a batch with no results is treated as a failure."""
        with pytest.raises(BackendUnavailableError):
            raise_for_batch(BatchResult(), action="create", entity="task")

    def test_partial_failure(self):
        """Test a mixed batch reports both sides."""
        batch = BatchResult(
            [
                RecordResult(success=True, record_id="a"),
                RecordResult(success=False, record_id="b", status=500, message="boom"),
            ]
        )

        with pytest.raises(PartialBatchFailureError) as exc_info:
            raise_for_batch(batch, action="delete", entity="task")

        assert exc_info.value.succeeded == ["a"]
        assert exc_info.value.failed == {"b": "boom"}


@pytest.mark.unit
class TestRemoteTaskStore:
    """Tests for TaskStore backed by PocketBase."""

    async def test_create_and_get(self, remote_task_store, pocketbase):
        """Test a created task is stored with storage column names and read back with defaults."""
        created = await remote_task_store.create({"title": "Buy milk", "category": "home"})

        stored = pocketbase.collections["task"][created.id]
        assert stored["category_name"] == "home"
        assert stored["is_completed"] is False
        assert stored["due_date"] == ""

        task = await remote_task_store.get_by_id(created.id)
        assert task.title == "Buy milk"
        assert task.priority == Priority.MEDIUM
        assert task.due_date is None
        assert task.completed_at is None

    async def test_filtered_reads_use_storage_columns(self, remote_task_store, pocketbase):
        """Test category filters are sent as storage column predicates."""
        await remote_task_store.create({"title": "a", "category": "work"})
        await remote_task_store.create({"title": "b", "category": "home"})

        tasks = await remote_task_store.get_by_category("work")

        assert [t.title for t in tasks] == ["a"]
        assert pocketbase.last_query_params["filter"] == 'category_name = "work"'
        assert pocketbase.last_query_params["sort"] == "-created_at"

    async def test_completed_and_pending(self, remote_task_store):
        """Test boolean filters split tasks by completion."""
        done = await remote_task_store.create({"title": "done"})
        todo = await remote_task_store.create({"title": "todo"})
        await remote_task_store.update(done.id, {"completed": True, "completedAt": "2024-03-02T08:00:00.000Z"})

        assert [t.id for t in await remote_task_store.get_completed()] == [done.id]
        assert [t.id for t in await remote_task_store.get_pending()] == [todo.id]

    async def test_update_only_sends_supplied_columns(self, remote_task_store, pocketbase):
        """Test a partial update leaves other columns untouched."""
        created = await remote_task_store.create({"title": "x", "dueDate": "2024-05-01"})

        task = await remote_task_store.update(created.id, {"priority": "high"})

        assert task.priority == Priority.HIGH
        assert task.due_date == "2024-05-01"
        assert pocketbase.collections["task"][created.id]["title"] == "x"

    async def test_empty_update_still_checks_existence(self, remote_task_store):
        """Test an update with nothing to write raises for unknown ids."""
        with pytest.raises(NotFoundError):
            await remote_task_store.update("missing", {"id": "ignored"})

    async def test_update_and_delete_missing(self, remote_task_store):
        """Test unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError, match="Task not found: missing"):
            await remote_task_store.update("missing", {"title": "y"})
        with pytest.raises(NotFoundError):
            await remote_task_store.delete("missing")
        with pytest.raises(NotFoundError):
            await remote_task_store.get_by_id("missing")

    async def test_create_rejected_by_storage(self, remote_task_store):
        """Test a create the storage tier rejects raises ValidationFailedError."""
        with pytest.raises(ValidationFailedError) as exc_info:
            await remote_task_store.create({"title": ""})

        assert "title" in exc_info.value.field_errors

    async def test_reads_degrade_to_empty(self, remote_task_store, pocketbase):
        """Test an unavailable backend yields empty lists for reads."""
        await remote_task_store.create({"title": "x"})
        pocketbase.unavailable = True

        assert await remote_task_store.get_all() == []
        assert await remote_task_store.get_pending() == []

    async def test_writes_raise_when_unavailable(self, remote_task_store, pocketbase):
        """Test writes against an unavailable backend raise BackendUnavailableError."""
        pocketbase.unavailable = True

        with pytest.raises(BackendUnavailableError):
            await remote_task_store.create({"title": "x"})

    async def test_remove_many_partial_failure(self, record_client, pocketbase):
        """Test deleting several records reports the ones that failed."""
        backend = remote_task_backend(record_client)
        a = await backend.insert({"title": "a", "createdAt": "2024-03-01"})
        b = await backend.insert({"title": "b", "createdAt": "2024-03-01"})
        pocketbase.fail_ids[b.id] = 500

        with pytest.raises(PartialBatchFailureError) as exc_info:
            await backend.remove_many([a.id, b.id])

        assert exc_info.value.succeeded == [a.id]
        assert list(exc_info.value.failed) == [b.id]
        assert a.id not in pocketbase.collections["task"]

    async def test_remove_many_empty(self, record_client):
        """Test deleting nothing is a no-op."""
        await remote_task_backend(record_client).remove_many([])


@pytest.mark.unit
class TestRemoteCategoryStore:
    """Tests for CategoryStore backed by PocketBase."""

    async def test_create_and_list_in_creation_order(self, remote_category_store, pocketbase):
        """Test categories come back oldest first with the default color."""
        await remote_category_store.create({"name": "work"})
        await remote_category_store.create({"name": "home", "color": "#10B981"})

        categories = await remote_category_store.get_all()

        assert [c.name for c in categories] == ["work", "home"]
        assert categories[0].color == "#6B7280"
        assert pocketbase.last_query_params["sort"] == "+created"

    async def test_get_by_name(self, remote_category_store):
        """Test lookup by name filters on the name column."""
        work = await remote_category_store.create({"name": "work"})

        assert (await remote_category_store.get_by_name("work")).id == work.id
        assert await remote_category_store.get_by_name("other") is None
