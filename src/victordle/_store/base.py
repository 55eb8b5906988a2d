# Area: Store
"""
victordle._store.base — Document store abstraction
==================================================

The engine talks to a shared key/value document store through this
interface only. Documents are plain JSON-compatible dicts grouped in
named collections.

Supported primitives:
- point get / set (overwrite) / update (top-level merge) / delete
- equality-filtered, ordered collection queries
- live subscriptions on a single document or on a query; each one
  delivers an initial snapshot and then one per change, until its
  disposer is called
- two special field values: ``SERVER_TIMESTAMP`` (filled with the
  store clock) and ``Increment(n)`` (atomic add, the only atomic
  primitive the engine relies on)

There are no transactions and no compare-and-swap.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from ..types import Disposer, SnapshotCallback

Document = Dict[str, Any]


class _ServerTimestamp:
    """Sentinel replaced by the store clock at write time."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Increment:
    """Field value that atomically adds ``amount`` to the stored number."""
    amount: float


@dataclass(frozen=True)
class Query:
    """
    Equality-filtered, optionally ordered view of one collection.

    Documents missing the ``order_by`` field are excluded, and ties
    are broken by document id so every client sees the same order.
    """
    collection: str
    where: Tuple[Tuple[str, Any], ...] = ()
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None

    def matches(self, data: Document) -> bool:
        return all(data.get(name) == value for name, value in self.where)

    def apply(self, docs: Iterable[Tuple[str, Document]]) -> List[Tuple[str, Document]]:
        selected = [(doc_id, data) for doc_id, data in docs if self.matches(data)]
        if self.order_by is not None:
            key = self.order_by
            selected = [item for item in selected if item[1].get(key) is not None]
            selected.sort(key=lambda item: item[0])
            selected.sort(key=lambda item: item[1][key], reverse=self.descending)
        else:
            selected.sort(key=lambda item: item[0])
        if self.limit is not None:
            selected = selected[: self.limit]
        return selected


@dataclass(frozen=True)
class DocumentSnapshot:
    """State of one document at delivery time."""
    doc_id: str
    data: Optional[Document]

    @property
    def exists(self) -> bool:
        return self.data is not None


@dataclass(frozen=True)
class QuerySnapshot:
    """Ordered query results at delivery time."""
    docs: List[Tuple[str, Document]] = field(default_factory=list)

    def __iter__(self) -> Iterator[Tuple[str, Document]]:
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)


class DocumentStore(ABC):
    """
    Abstract asyncio document store.

    Every method is a suspension point. Implementations must never
    invoke subscription callbacks inline with the write that caused
    them.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document or None if it does not exist."""

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        """Create or fully overwrite a document."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        """
        Merge top-level fields into an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. No error if it is already absent."""

    @abstractmethod
    async def query(self, query: Query) -> List[Tuple[str, Document]]:
        """Run a query once and return ``(doc_id, data)`` pairs."""

    @abstractmethod
    async def subscribe_document(
        self, collection: str, doc_id: str, callback: SnapshotCallback
    ) -> Disposer:
        """Deliver a DocumentSnapshot now and after every change."""

    @abstractmethod
    async def subscribe_query(self, query: Query, callback: SnapshotCallback) -> Disposer:
        """Deliver a QuerySnapshot now and after every change to the results."""

    @property
    @abstractmethod
    def clock(self):
        """Callable returning the store's notion of 'now' (epoch seconds)."""
