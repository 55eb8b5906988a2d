# Area: Shared
"""
Shared utilities used by the store, matchmaking and session layers.

This package contains:
- Logging configuration
- Identifier and callback helpers
"""

from .logging_config import setup_logging, log_engine_error
from .ids import generate_match_id, maybe_await

__all__ = [
    "setup_logging",
    "log_engine_error",
    "generate_match_id",
    "maybe_await",
]
