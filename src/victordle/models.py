"""
victordle.models — Document models
==================================

Pydantic models for every document the engine reads or writes.

Python attributes are snake_case; the stored documents use the
camelCase field names shared with the other clients of the store
(``userId``, ``lastPing``, ``playerOrder``, ``currentTurn`` ...).
Use ``to_document()`` to produce the stored shape and
``from_document()`` to decode a snapshot.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GuessColor(str, Enum):
    """Per-letter feedback for a submitted guess."""
    GREEN = "green"     # right letter, right position
    YELLOW = "yellow"   # letter in the word, wrong position
    GRAY = "gray"       # letter not (or no longer) available


class QueueStatus(str, Enum):
    """Status of a queue entry as seen by every client."""
    GETTING_READY = "gettingReady"
    SEARCHING = "searching"
    MATCHED = "matched"


class GameStatus(str, Enum):
    """Status of a game session. Only moves forward."""
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class StoredDocument(BaseModel):
    """Base model: alias-aware encode/decode of store documents."""

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def from_document(cls, data: Dict[str, Any]):
        return cls.model_validate(data)


class Player(StoredDocument):
    """Registry record for one user id."""
    id: str
    username: str
    score: int = 0
    created_at: Optional[float] = Field(default=None, alias="createdAt")
    last_active: Optional[float] = Field(default=None, alias="lastActive")


class QueueEntry(StoredDocument):
    """A player's advertised intent to be matched."""
    user_id: str = Field(alias="userId")
    timestamp: Optional[float] = None
    status: QueueStatus
    last_ping: Optional[float] = Field(default=None, alias="lastPing")
    match_id: Optional[str] = Field(default=None, alias="matchId")


class Guess(StoredDocument):
    """One submitted guess. Immutable once appended."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    word: str
    timestamp: float
    colors: List[GuessColor]


class PlayerSlot(StoredDocument):
    """Per-game view of one participant (independent of the registry score)."""
    id: str
    username: str = ""
    score: int = 0
    guesses: List[Guess] = Field(default_factory=list)


class GameSession(StoredDocument):
    """Authoritative representation of one two-player game."""
    id: str
    player_order: List[str] = Field(alias="playerOrder")
    players: Dict[str, PlayerSlot]
    word: str
    current_turn: str = Field(alias="currentTurn")
    status: GameStatus = GameStatus.WAITING
    last_move_timestamp: float = Field(alias="lastMoveTimestamp")

    @model_validator(mode="after")
    def _check_players(self) -> "GameSession":
        if len(self.player_order) != 2 or len(set(self.player_order)) != 2:
            raise ValueError("playerOrder must hold exactly two distinct player ids")
        if set(self.players) != set(self.player_order):
            raise ValueError("players map must be keyed by the playerOrder ids")
        if self.current_turn not in self.player_order:
            raise ValueError(f"currentTurn {self.current_turn!r} is not a participant")
        return self

    # ── Convenience accessors ────────────────────────────────

    @property
    def is_finished(self) -> bool:
        return self.status == GameStatus.FINISHED

    def other_player(self, player_id: str) -> str:
        first, second = self.player_order
        if player_id == first:
            return second
        if player_id == second:
            return first
        raise KeyError(player_id)

    def guesses_of(self, player_id: str) -> List[Guess]:
        return list(self.players[player_id].guesses)


class Pair(StoredDocument):
    """A pending or completed in-person pairing challenge."""
    user_id: str = Field(alias="userId")
    target_id: str = Field(alias="targetId")
    timestamp: float
    completed: bool = False
