# Area: Store
"""
victordle._store.observable — Listener hub shared by store backends
===================================================================

Implements subscriptions, special field values and write
serialization on top of four raw primitives a backend provides:
``_load``, ``_save``, ``_remove`` and ``_scan``.

Delivery model:
- each subscription owns a queue and a worker task, so snapshots for
  one listener arrive in order and never inline with the write
- a snapshot is only queued when it differs from the last one
  delivered to that listener
- a listener that raises is logged and keeps receiving snapshots
"""

from __future__ import annotations
import asyncio
import copy
import logging
import time
from abc import abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from .base import (
    SERVER_TIMESTAMP,
    Document,
    DocumentSnapshot,
    DocumentStore,
    Increment,
    Query,
    QuerySnapshot,
)
from .._shared.ids import maybe_await
from ..errors import DocumentNotFoundError
from ..types import Disposer, SnapshotCallback

logger = logging.getLogger("victordle.store")

_UNSET = object()


def resolve_fields(fields: Document, existing: Document, now: float) -> Document:
    """
    Replace special field values with concrete ones.

    Args:
        fields: Fields being written (may contain SERVER_TIMESTAMP / Increment)
        existing: Current stored values used as the base for increments
        now: Store clock value for SERVER_TIMESTAMP

    Returns:
        A new dict safe to store
    """
    resolved: Document = {}
    for key, value in fields.items():
        if value is SERVER_TIMESTAMP:
            resolved[key] = now
        elif isinstance(value, Increment):
            current = existing.get(key)
            if isinstance(current, bool) or not isinstance(current, (int, float)):
                current = 0
            total = current + value.amount
            resolved[key] = int(total) if float(total).is_integer() else total
        elif isinstance(value, dict):
            base = existing.get(key)
            resolved[key] = resolve_fields(value, base if isinstance(base, dict) else {}, now)
        else:
            resolved[key] = copy.deepcopy(value)
    return resolved


class _Listener:
    """One subscription: a callback, its pending snapshots and its worker."""

    def __init__(self, callback: SnapshotCallback, query: Optional[Query] = None):
        self.callback = callback
        self.query = query
        self.active = True
        self.last: Any = _UNSET
        self.pending: asyncio.Queue = asyncio.Queue()
        self.worker = asyncio.get_running_loop().create_task(self._run())

    def offer(self, snapshot: Any) -> None:
        if not self.active or snapshot == self.last:
            return
        self.last = snapshot
        self.pending.put_nowait(snapshot)

    def close(self) -> None:
        self.active = False
        self.pending.put_nowait(None)

    async def _run(self) -> None:
        while True:
            snapshot = await self.pending.get()
            if snapshot is None or not self.active:
                return
            try:
                await maybe_await(self.callback(snapshot))
            except Exception as e:
                logger.error(f"Snapshot listener failed: {e}", exc_info=True)


class ObservableDocumentStore(DocumentStore):
    """
    DocumentStore with in-process subscriptions.

    Writes are serialized by one lock so that ``Increment`` is atomic
    with respect to every other write through this store.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._write_lock: Optional[asyncio.Lock] = None
        self._doc_listeners: Dict[Tuple[str, str], List[_Listener]] = defaultdict(list)
        self._query_listeners: Dict[str, List[_Listener]] = defaultdict(list)

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    # ── Backend primitives ───────────────────────────────────

    @abstractmethod
    async def _load(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return a private copy of the stored document, or None."""

    @abstractmethod
    async def _save(self, collection: str, doc_id: str, data: Document) -> None:
        """Store a fully resolved document."""

    @abstractmethod
    async def _remove(self, collection: str, doc_id: str) -> bool:
        """Remove a document; return True if it existed."""

    @abstractmethod
    async def _scan(self, collection: str) -> List[Tuple[str, Document]]:
        """Return private copies of every document in a collection."""

    # ── DocumentStore API ────────────────────────────────────

    def _lock(self) -> asyncio.Lock:
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        return self._write_lock

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        return await self._load(collection, doc_id)

    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        async with self._lock():
            await self._save(collection, doc_id, resolve_fields(data, {}, self._clock()))
        await self._notify(collection, doc_id)

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        async with self._lock():
            existing = await self._load(collection, doc_id)
            if existing is None:
                raise DocumentNotFoundError(collection, doc_id)
            merged = dict(existing)
            merged.update(resolve_fields(fields, existing, self._clock()))
            await self._save(collection, doc_id, merged)
        await self._notify(collection, doc_id)

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._lock():
            removed = await self._remove(collection, doc_id)
        if removed:
            await self._notify(collection, doc_id)

    async def query(self, query: Query) -> List[Tuple[str, Document]]:
        return query.apply(await self._scan(query.collection))

    async def subscribe_document(
        self, collection: str, doc_id: str, callback: SnapshotCallback
    ) -> Disposer:
        listener = _Listener(callback)
        registry = self._doc_listeners[(collection, doc_id)]
        registry.append(listener)
        listener.offer(DocumentSnapshot(doc_id, await self._load(collection, doc_id)))
        logger.debug(f"Document listener attached: {collection}/{doc_id}")
        return self._disposer(registry, listener)

    async def subscribe_query(self, query: Query, callback: SnapshotCallback) -> Disposer:
        listener = _Listener(callback, query)
        registry = self._query_listeners[query.collection]
        registry.append(listener)
        listener.offer(QuerySnapshot(query.apply(await self._scan(query.collection))))
        logger.debug(f"Query listener attached: {query}")
        return self._disposer(registry, listener)

    def listener_count(self) -> int:
        """Number of live subscriptions (for diagnostics and tests)."""
        docs = sum(len(v) for v in self._doc_listeners.values())
        queries = sum(len(v) for v in self._query_listeners.values())
        return docs + queries

    # ── Internals ────────────────────────────────────────────

    @staticmethod
    def _disposer(registry: List[_Listener], listener: _Listener) -> Disposer:
        def dispose() -> None:
            if not listener.active:
                return
            listener.close()
            if listener in registry:
                registry.remove(listener)
        return dispose

    async def _notify(self, collection: str, doc_id: str) -> None:
        doc_listeners = list(self._doc_listeners.get((collection, doc_id), ()))
        if doc_listeners:
            snapshot = DocumentSnapshot(doc_id, await self._load(collection, doc_id))
            for listener in doc_listeners:
                listener.offer(snapshot)

        query_listeners = list(self._query_listeners.get(collection, ()))
        if query_listeners:
            docs = await self._scan(collection)
            for listener in query_listeners:
                listener.offer(QuerySnapshot(listener.query.apply(docs)))
