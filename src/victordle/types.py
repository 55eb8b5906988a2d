"""
victordle.types — Typed inputs and callback signatures
======================================================

The engine treats identities as opaque strings supplied by an
external auth component. Callbacks may be plain functions or
coroutine functions.

    >>> Identity.__annotations__
    {'id': <class 'str'>, 'display_name': <class 'str'>}
"""

from typing import Any, Awaitable, Callable, TypedDict, Union

from .models import GameSession


class Identity(TypedDict):
    """The signed-in user, as supplied by the auth layer."""
    id: str                 # e.g., "user_2Nf8..."
    display_name: str       # e.g., "victor"


# on_match_found(session_id)
MatchFoundCallback = Callable[[str], Union[None, Awaitable[None]]]

# on_game_update(session)
GameUpdateCallback = Callable[[GameSession], Union[None, Awaitable[None]]]

# Store subscription callback: receives a DocumentSnapshot or QuerySnapshot
SnapshotCallback = Callable[[Any], Union[None, Awaitable[None]]]

# Undoes exactly one subscription. Safe to call more than once.
Disposer = Callable[[], None]
