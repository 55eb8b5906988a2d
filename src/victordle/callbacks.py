# Area: Client Callbacks
"""
victordle.callbacks — Callbacks a game front-end implements
===========================================================

Subclass ClientCallbacks and pass an instance to VictordleClient.
The client calls these methods as matchmaking and the game progress;
the front-end never touches queue entries or session documents.

Methods may be plain or ``async def``; async ones are awaited on the
delivery or turn-timer task, so keep them short.

Type Definitions
----------------
    from victordle import GameSession, GuessColor

    >>> GameSession.model_fields.keys()
    dict_keys(['id', 'player_order', 'players', 'word', 'current_turn', ...])
"""

from abc import ABC, abstractmethod

from .models import GameSession


class ClientCallbacks(ABC):
    """
    Abstract base class for a Victordle front-end.

    Implement ``on_match_found`` and ``on_game_update``;
    ``on_turn_tick`` is optional.
    """

    # ──────────────────────────────────────────────────────────────
    # CALLBACK 1: A match was made
    # ──────────────────────────────────────────────────────────────
    @abstractmethod
    def on_match_found(self, session_id: str) -> None:
        """
        Called exactly once per search, when the session document exists.

        Parameters
        ----------
        session_id : str
            e.g. "match_1767225600000_a1b2c3"
        """

    # ──────────────────────────────────────────────────────────────
    # CALLBACK 2: The session changed
    # ──────────────────────────────────────────────────────────────
    @abstractmethod
    def on_game_update(self, session: GameSession) -> None:
        """
        Called with the full session after every change, including the
        first snapshot right after the match.

        Parameters
        ----------
        session : GameSession
            Decoded session; ``session.current_turn`` holds the mover.
        """

    # ──────────────────────────────────────────────────────────────
    # CALLBACK 3 (optional): Turn countdown
    # ──────────────────────────────────────────────────────────────
    def on_turn_tick(self, seconds_left: float) -> None:
        """Called roughly once per tick while a turn is running."""
