# Area: Matchmaking
"""
victordle._matchmaking.state_machine — Queue State Machine
==========================================================

Tracks one player's matchmaking lifecycle and rejects out-of-order
transitions. The MATCHED transition doubles as the idempotency gate
for the match-found callback: it can only happen once per join.
"""

import logging

from .enums import QueueState, QueueEvent

logger = logging.getLogger("victordle.matchmaking.state_machine")


# {state: {event: next_state}}; events missing from a row are rejected
TRANSITIONS = {
    QueueState.IDLE: {
        QueueEvent.JOIN: QueueState.GETTING_READY,
    },
    QueueState.GETTING_READY: {
        QueueEvent.LISTENERS_READY: QueueState.SEARCHING,
        QueueEvent.MATCHED: QueueState.MATCHED,
        QueueEvent.LEAVE: QueueState.IDLE,
    },
    QueueState.SEARCHING: {
        QueueEvent.MATCHED: QueueState.MATCHED,
        QueueEvent.LEAVE: QueueState.IDLE,
    },
    QueueState.MATCHED: {
        QueueEvent.CLEANUP: QueueState.CLEANED_UP,
        QueueEvent.LEAVE: QueueState.IDLE,
    },
    QueueState.CLEANED_UP: {
        QueueEvent.LEAVE: QueueState.IDLE,
    },
}


class QueueStateMachine:
    """
    One player's position in the matchmaking lifecycle.

    Attributes:
        current_state: Where the player is now; starts at IDLE
    """

    def __init__(self):
        self.current_state = QueueState.IDLE

    def can_transition(self, event: QueueEvent) -> bool:
        """True when ``event`` is accepted in the current state."""
        return event in TRANSITIONS.get(self.current_state, {})

    def transition(self, event: QueueEvent) -> QueueState:
        """
        Apply ``event`` and return the state it leads to.

        Raises:
            ValueError: ``event`` is not accepted in the current state
        """
        if not self.can_transition(event):
            raise ValueError(
                f"Queue event {event.value} not allowed in state {self.current_state.value}"
            )

        previous, self.current_state = self.current_state, TRANSITIONS[self.current_state][event]
        logger.debug(f"Queue state: {previous.value} → {self.current_state.value}")
        return self.current_state
