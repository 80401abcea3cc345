"""Unit tests for PocketBase schema definitions and merging."""

import pytest

from taskflow.core.schema import COLLECTIONS, get_collection_schema, merge_fields, rules_to_update
from taskflow.storage.factory import CATEGORY_SORT, TASK_SORT
from taskflow.storage.mapping import CATEGORY_FIELDS, TASK_FIELDS


@pytest.mark.unit
class TestCollectionSchemas:
    """Tests for the declared collections."""

    @pytest.mark.parametrize(("collection", "mapping"), [("task", TASK_FIELDS), ("category", CATEGORY_FIELDS)])
    def test_schema_covers_mapped_columns(self, collection, mapping):
        """Test every mapped storage column exists in the collection schema."""
        schema = get_collection_schema(collection)
        declared = {f["name"] for f in schema["fields"]}

        assert set(mapping.values()) - {"id"} <= declared

    def test_categories_created_before_tasks(self):
        """Test collections are synced in dependency order."""
        assert COLLECTIONS == ["category", "task"]

    @pytest.mark.parametrize(("collection", "sort"), [("task", TASK_SORT), ("category", CATEGORY_SORT)])
    def test_sort_columns_are_declared(self, collection, sort):
        """Test every column the remote backends sort on exists in the schema."""
        declared = {f["name"] for f in get_collection_schema(collection)["fields"]}

        assert {clause.lstrip("+-") for clause in sort} <= declared

    def test_created_is_set_on_create_only(self):
        """Test the category creation timestamp never changes after insert."""
        fields = {f["name"]: f for f in get_collection_schema("category")["fields"]}

        assert fields["created"]["type"] == "autodate"
        assert fields["created"]["onCreate"] is True
        assert fields["created"]["onUpdate"] is False


@pytest.mark.unit
class TestMergeFields:
    """Tests for merge_fields and rules_to_update."""

    def test_adds_missing_and_updates_changed(self):
        """Test new fields are appended and changed ones merged in place."""
        schema = {"fields": [{"name": "title", "type": "text", "required": True}, {"name": "color", "type": "text"}]}
        current = {
            "fields": [
                {"id": "f1", "name": "title", "type": "text", "required": False},
                {"id": "f2", "name": "legacy", "type": "text"},
            ]
        }

        merged, updated, added = merge_fields(schema, current)

        assert merged[0] == {"id": "f1", "name": "title", "type": "text", "required": True}
        assert merged[1]["name"] == "legacy"
        assert merged[2]["name"] == "color"
        assert updated == ["title"]
        assert added == ["color"]

    def test_unchanged_schema(self):
        """Test identical fields report no changes."""
        schema = {"fields": [{"name": "title", "type": "text"}]}

        _, updated, added = merge_fields(schema, {"fields": [{"id": "f1", "name": "title", "type": "text"}]})

        assert updated == []
        assert added == []

    def test_rules_to_update(self):
        """Test only differing API rules are returned."""
        schema = {"listRule": "", "viewRule": ""}

        assert rules_to_update(schema, {"listRule": None, "viewRule": ""}) == {"listRule": ""}
