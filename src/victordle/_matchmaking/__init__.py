# Area: Matchmaking
"""
Matchmaking layer.

This package handles:
- The per-player queue state machine
- FIFO pair selection with staleness filtering
- The decentralized match creation protocol
"""

from .enums import QueueState, QueueEvent
from .state_machine import QueueStateMachine, TRANSITIONS
from .matching import is_stale, live_candidates, select_pair
from .queue_manager import QueueManager

__all__ = [
    "QueueState",
    "QueueEvent",
    "QueueStateMachine",
    "TRANSITIONS",
    "is_stale",
    "live_candidates",
    "select_pair",
    "QueueManager",
]
