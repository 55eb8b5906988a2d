# Area: Store
"""
Document store layer.

This package contains:
- The abstract DocumentStore interface and its special field values
- The in-process listener hub shared by the backends
- In-memory and SQLite backends
"""

from .base import (
    SERVER_TIMESTAMP,
    Document,
    DocumentSnapshot,
    DocumentStore,
    Increment,
    Query,
    QuerySnapshot,
)
from .observable import ObservableDocumentStore, resolve_fields
from .memory import InMemoryDocumentStore
from .sqlite import SqliteDocumentStore

__all__ = [
    "SERVER_TIMESTAMP",
    "Document",
    "DocumentSnapshot",
    "DocumentStore",
    "Increment",
    "Query",
    "QuerySnapshot",
    "ObservableDocumentStore",
    "resolve_fields",
    "InMemoryDocumentStore",
    "SqliteDocumentStore",
]
