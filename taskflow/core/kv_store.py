"""SQLite-backed key-value storage for on-device persistence."""

import asyncio
import logging
from pathlib import Path

import aiosqlite


logger = logging.getLogger(__name__)


_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


class KeyValueStore:
    """Persistent string-to-string storage kept in a single SQLite table.

    The connection is opened lazily on first use and reused until close().
    """

    def __init__(self, db_path: str | Path) -> None:
        self._path = Path(db_path).resolve()
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def _get_connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn

        async with self._lock:
            # Double-check after acquiring lock
            if self._conn is not None:
                return self._conn

            self._path.parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(str(self._path))
            await conn.execute("PRAGMA journal_mode = WAL")
            await conn.execute(_SCHEMA)
            await conn.commit()
            self._conn = conn

            logger.info("Opened key-value storage", extra={"db_path": str(self._path)})
            return conn

    async def get(self, key: str) -> str | None:
        """Return the stored value for key, or None when absent."""
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = await cursor.fetchone()
        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        conn = await self._get_connection()
        await conn.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
            (key, value),
        )
        await conn.commit()

    async def close(self) -> None:
        """Close the underlying connection if it is open."""
        if self._conn is None:
            return

        try:
            await self._conn.close()
            logger.info("Closed key-value storage", extra={"db_path": str(self._path)})
        except Exception as e:
            logger.warning("Error closing key-value storage", extra={"error": str(e), "db_path": str(self._path)})
        finally:
            self._conn = None
