# Area: Matchmaking
"""
victordle._matchmaking.enums — Queue State Machine Enums
========================================================

Defines the local states and events of one player's matchmaking
session. These are client-side states; the stored queue entry only
carries gettingReady / searching / matched.
"""

from enum import Enum


class QueueState(Enum):
    """
    States of a player's matchmaking session.

    State transitions:
    IDLE -> GETTING_READY (on JOIN)
    GETTING_READY -> SEARCHING (on LISTENERS_READY)
    GETTING_READY -> MATCHED (on MATCHED, announce raced the match)
    SEARCHING -> MATCHED (on MATCHED)
    MATCHED -> CLEANED_UP (on CLEANUP)
    Any non-idle state -> IDLE (on LEAVE)
    """
    IDLE = "IDLE"
    GETTING_READY = "GETTING_READY"
    SEARCHING = "SEARCHING"
    MATCHED = "MATCHED"
    CLEANED_UP = "CLEANED_UP"


class QueueEvent(Enum):
    """
    Events that trigger queue state transitions.

    Events are triggered by:
    - JOIN: join_queue() wrote the gettingReady entry
    - LISTENERS_READY: listeners attached and settle delay elapsed
    - MATCHED: own entry observed with status=matched
    - CLEANUP: match-found callback delivered
    - LEAVE: leave_queue() called
    """
    JOIN = "JOIN"
    LISTENERS_READY = "LISTENERS_READY"
    MATCHED = "MATCHED"
    CLEANUP = "CLEANUP"
    LEAVE = "LEAVE"
