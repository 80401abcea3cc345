"""PocketBase schema management for the remote backend (code-first approach)."""

import asyncio
import logging
from typing import Any

import httpx
from pocketbase import PocketBase
from pocketbase.client import ClientResponseError

from taskflow.core.config import constants, settings


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    constants.CATEGORY_COLLECTION,
    constants.TASK_COLLECTION,
]

# API rule keys that can be set on collections
_API_RULE_KEYS = ("listRule", "viewRule", "createRule", "updateRule", "deleteRule")


def get_collection_schema(collection_name: str) -> dict[str, Any]:
    """Return the expected schema for a collection.

    PocketBase v0.23+ uses 'fields' with options flattened onto each field and
    no implicit created/updated columns, so both are declared as autodate fields.
    Tasks reference categories by name, so there is no relation field.
    """
    schemas = {
        constants.CATEGORY_COLLECTION: {
            "name": constants.CATEGORY_COLLECTION,
            "type": "base",
            "system": False,
            # Single-user app: open rules
            "listRule": "",
            "viewRule": "",
            "createRule": "",
            "updateRule": "",
            "deleteRule": "",
            "fields": [
                {"name": "name", "type": "text", "required": True},
                {"name": "color", "type": "text", "required": False},
                {"name": "task_count", "type": "number", "required": False},
                # Remote categories are listed in creation order
                {"name": "created", "type": "autodate", "onCreate": True, "onUpdate": False},
                {"name": "updated", "type": "autodate", "onCreate": True, "onUpdate": True},
            ],
            "indexes": [f"CREATE INDEX idx_category_name ON {constants.CATEGORY_COLLECTION} (name)"],
        },
        constants.TASK_COLLECTION: {
            "name": constants.TASK_COLLECTION,
            "type": "base",
            "system": False,
            "listRule": "",
            "viewRule": "",
            "createRule": "",
            "updateRule": "",
            "deleteRule": "",
            "fields": [
                {"name": "title", "type": "text", "required": True},
                {"name": "category_name", "type": "text", "required": False},
                {
                    "name": "priority",
                    "type": "select",
                    "required": False,
                    "values": ["low", "medium", "high"],
                    "maxSelect": 1,
                },
                {"name": "due_date", "type": "date", "required": False},
                # required=False: PocketBase rejects False on required bool fields
                {"name": "is_completed", "type": "bool", "required": False},
                {"name": "created_at", "type": "date", "required": True},
                {"name": "completed_at", "type": "date", "required": False},
                {"name": "created", "type": "autodate", "onCreate": True, "onUpdate": False},
                {"name": "updated", "type": "autodate", "onCreate": True, "onUpdate": True},
            ],
            "indexes": [
                f"CREATE INDEX idx_task_category ON {constants.TASK_COLLECTION} (category_name)",
                f"CREATE INDEX idx_task_completed ON {constants.TASK_COLLECTION} (is_completed)",
            ],
        },
    }
    return schemas[collection_name]


def merge_fields(
    schema: dict[str, Any],
    current: dict[str, Any],
) -> tuple[list[dict[str, Any]], list[str], list[str]]:
    """Merge desired fields into the existing ones.

    Returns:
        Tuple of (merged_fields, fields_updated, fields_added).
    """
    desired_fields = {f["name"]: f for f in schema.get("fields", [])}
    existing_fields = {f["name"]: f for f in current.get("fields", [])}

    merged_fields = []
    fields_updated = []
    fields_added = []

    for field_name, existing_field in existing_fields.items():
        if field_name in desired_fields:
            merged = {**existing_field, **desired_fields[field_name]}
            merged_fields.append(merged)
            if merged != existing_field:
                fields_updated.append(field_name)
        else:
            merged_fields.append(existing_field)

    for field_name, desired_field in desired_fields.items():
        if field_name not in existing_fields:
            merged_fields.append(desired_field)
            fields_added.append(field_name)

    return merged_fields, fields_updated, fields_added


def rules_to_update(schema: dict[str, Any], current: dict[str, Any]) -> dict[str, str | None]:
    """API rules whose desired value differs from the current one."""
    return {key: schema[key] for key in _API_RULE_KEYS if key in schema and schema[key] != current.get(key)}


async def _collection_exists(*, client: httpx.AsyncClient, collection_name: str) -> bool:
    try:
        response = await client.get(f"/api/collections/{collection_name}")
        return response.is_success
    except httpx.HTTPError:
        return False


async def _create_collection(*, client: httpx.AsyncClient, schema: dict[str, Any]) -> None:
    response = await client.post("/api/collections", json=schema)
    response.raise_for_status()
    logger.info("Created collection: %s", schema["name"])


async def _update_collection(*, client: httpx.AsyncClient, collection_name: str, schema: dict[str, Any]) -> None:
    """Add missing fields, update changed ones and sync API rules and indexes."""
    response = await client.get(f"/api/collections/{collection_name}")
    response.raise_for_status()
    current = response.json()

    merged_fields, fields_updated, fields_added = merge_fields(schema, current)
    rules = rules_to_update(schema, current)
    existing_indexes = list(current.get("indexes", []))
    new_indexes = [idx for idx in schema.get("indexes", []) if idx not in existing_indexes]

    if not fields_added and not fields_updated and not rules and not new_indexes:
        logger.info("Collection %s schema is already up to date", collection_name)
        return

    payload: dict[str, Any] = {"fields": merged_fields, **rules}
    if new_indexes:
        payload["indexes"] = existing_indexes + new_indexes

    response = await client.patch(f"/api/collections/{collection_name}", json=payload)
    response.raise_for_status()
    logger.info(
        "Updated collection %s",
        collection_name,
        extra={"fields_added": fields_added, "fields_updated": fields_updated, "rules": list(rules)},
    )


async def sync_schema(
    pocketbase_url: str | None = None,
    *,
    admin_email: str,
    admin_password: str,
) -> None:
    """Create or update the task and category collections (idempotent)."""
    logger.info("Starting PocketBase schema sync...")

    url = pocketbase_url or settings.pocketbase_url
    pb = PocketBase(url)

    try:
        await asyncio.to_thread(pb.admins.auth_with_password, admin_email, admin_password)
    except ClientResponseError as e:
        logger.error("Failed to authenticate as admin: %s", e)
        raise

    async with httpx.AsyncClient(base_url=url, timeout=constants.API_TIMEOUT_SECONDS) as http_client:
        http_client.headers["Authorization"] = f"Bearer {pb.auth_store.token}"

        for collection_name in COLLECTIONS:
            schema = get_collection_schema(collection_name)
            if await _collection_exists(client=http_client, collection_name=collection_name):
                await _update_collection(client=http_client, collection_name=collection_name, schema=schema)
            else:
                await _create_collection(client=http_client, schema=schema)

    logger.info("PocketBase schema sync complete")


def main() -> None:
    """Sync the schema using credentials from the environment."""
    logging.basicConfig(level=logging.INFO)
    admin_email = settings.require_credential("pocketbase_admin_email", "PocketBase Admin Email")
    admin_password = settings.require_credential("pocketbase_admin_password", "PocketBase Admin Password")
    asyncio.run(sync_schema(admin_email=admin_email, admin_password=admin_password))


if __name__ == "__main__":
    main()
