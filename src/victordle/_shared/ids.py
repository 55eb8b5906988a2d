# Area: Shared
"""
victordle._shared.ids — Identifier and callback helpers
=======================================================

Helpers shared by the matchmaking and session layers.
"""

import inspect
import time
import uuid
from typing import Any


def generate_match_id() -> str:
    """Generate a unique match / session ID.

    Format: match_<epoch-millis>_<6 hex chars>
    """
    millis = int(time.time() * 1000)
    return f"match_{millis}_{uuid.uuid4().hex[:6]}"


async def maybe_await(result: Any) -> Any:
    """Await ``result`` if a callback returned an awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result
