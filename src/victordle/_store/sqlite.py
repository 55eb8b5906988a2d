# Area: Store
"""
victordle._store.sqlite — SQLite-backed document store
======================================================

Persists documents as JSON rows in a single ``documents`` table keyed
by (collection, doc_id). Blocking sqlite calls run in the default
executor; subscriptions use the in-process listener hub, so live
updates reach every client that shares this store instance.

The database path must be a file: each statement opens its own
connection, so ``:memory:`` would lose data between calls.
"""

import asyncio
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from .base import Document
from .observable import ObservableDocumentStore
from ..errors import StoreError

logger = logging.getLogger("victordle.store.sqlite")

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


class SqliteDocumentStore(ObservableDocumentStore):
    """
    Document store persisted in SQLite.

    The ``documents`` table is created on construction if missing, so
    several stores (or processes) can point at the same file.

    Args:
        db_path: SQLite file holding every collection
        clock: Source of store timestamps
    """

    def __init__(self, db_path: str = "victordle.db", clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self.db_path = db_path
        conn = self._connect()
        try:
            conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
        finally:
            conn.close()
        logger.info(f"Document store ready at {db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _statement(self, sql: str, params: tuple, fetch: bool) -> Any:
        """Run one statement on a fresh connection.

        Returns the rows as dicts when ``fetch`` is set, otherwise the
        number of documents written or removed.
        """
        conn = self._connect()
        try:
            cursor = conn.execute(sql, params)
            if fetch:
                return [dict(row) for row in cursor.fetchall()]
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    async def _run(self, operation: str, collection: str, doc_id: Optional[str],
                   sql: str, params: tuple = (), fetch: bool = False) -> Any:
        """Run a statement off the event loop; sqlite errors become StoreError."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._statement, sql, params, fetch)
        except sqlite3.Error as e:
            raise StoreError(operation, collection, doc_id, str(e)) from e

    # ── Backend primitives ───────────────────────────────────

    async def _load(self, collection: str, doc_id: str) -> Optional[Document]:
        rows = await self._run(
            "get", collection, doc_id,
            "SELECT data FROM documents WHERE collection = ? AND doc_id = ?",
            (collection, doc_id), fetch=True,
        )
        return json.loads(rows[0]["data"]) if rows else None

    async def _save(self, collection: str, doc_id: str, data: Document) -> None:
        await self._run(
            "set", collection, doc_id,
            """
            INSERT OR REPLACE INTO documents (collection, doc_id, data, updated_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
            """,
            (collection, doc_id, json.dumps(data)),
        )

    async def _remove(self, collection: str, doc_id: str) -> bool:
        count = await self._run(
            "delete", collection, doc_id,
            "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
            (collection, doc_id),
        )
        return bool(count)

    async def _scan(self, collection: str) -> List[Tuple[str, Document]]:
        rows = await self._run(
            "query", collection, None,
            "SELECT doc_id, data FROM documents WHERE collection = ?",
            (collection,), fetch=True,
        )
        return [(row["doc_id"], json.loads(row["data"])) for row in rows]
