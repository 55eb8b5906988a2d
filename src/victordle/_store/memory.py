# Area: Store
"""
victordle._store.memory — In-process document store
===================================================

Dict-backed store for tests, demos and single-process simulations.
Several clients sharing one instance behave like several devices
sharing one remote store.
"""

import copy
import time
from typing import Callable, Dict, List, Optional, Tuple

from .base import Document
from .observable import ObservableDocumentStore


class InMemoryDocumentStore(ObservableDocumentStore):
    """Document store kept in a nested dict: collection -> doc_id -> data."""

    def __init__(self, clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self._collections: Dict[str, Dict[str, Document]] = {}

    async def _load(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    async def _save(self, collection: str, doc_id: str, data: Document) -> None:
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    async def _remove(self, collection: str, doc_id: str) -> bool:
        return self._collections.get(collection, {}).pop(doc_id, None) is not None

    async def _scan(self, collection: str) -> List[Tuple[str, Document]]:
        docs = self._collections.get(collection, {})
        return [(doc_id, copy.deepcopy(data)) for doc_id, data in docs.items()]

    def dump(self, collection: str) -> Dict[str, Document]:
        """Synchronous copy of a whole collection (for inspection)."""
        return copy.deepcopy(self._collections.get(collection, {}))
