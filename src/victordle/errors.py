"""
victordle.errors — Custom exception classes
===========================================

Defines the exception hierarchy for store, registry and game-rule
errors. Each exception stores its context for structured logging.

None of these are fatal to the process: callers log them and keep
listening for the next snapshot.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class VictordleError(Exception):
    """Base exception for all victordle package errors."""

    error_type = "ENGINE_ERROR"

    def context(self) -> Dict[str, Any]:
        return {}

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context(),
        )


# ── Store errors ───────────────────────────────────────────────

class StoreError(VictordleError):
    """Raised when a document store read or write fails (transient)."""

    error_type = "STORE_ERROR"

    def __init__(self, operation: str, collection: str, doc_id: Optional[str], reason: str):
        self.operation = operation
        self.collection = collection
        self.doc_id = doc_id
        self.reason = reason
        super().__init__(f"{operation} {collection}/{doc_id or '*'} failed: {reason}")

    def context(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "collection": self.collection,
            "doc_id": self.doc_id,
        }


class DocumentNotFoundError(StoreError):
    """Raised when a partial update targets a document that does not exist."""

    error_type = "DOCUMENT_NOT_FOUND"

    def __init__(self, collection: str, doc_id: str, operation: str = "update"):
        super().__init__(operation, collection, doc_id, "document does not exist")


# ── Registry errors ────────────────────────────────────────────

class PlayerNotFoundError(VictordleError):
    """Raised when a player lookup by id or username finds nothing."""

    error_type = "PLAYER_NOT_FOUND"

    def __init__(self, key: str, by: str = "id"):
        self.key = key
        self.by = by
        super().__init__(f"No player with {by} '{key}'")

    def context(self) -> Dict[str, Any]:
        return {"lookup": self.by, "key": self.key}


class AmbiguousUsernameError(VictordleError):
    """Raised when a username lookup matches more than one player."""

    error_type = "AMBIGUOUS_USERNAME"

    def __init__(self, username: str, player_ids: List[str]):
        self.username = username
        self.player_ids = player_ids
        super().__init__(
            f"Username '{username}' matches {len(player_ids)} players: {player_ids}"
        )

    def context(self) -> Dict[str, Any]:
        return {"username": self.username, "player_ids": self.player_ids}


# ── Game rule errors ───────────────────────────────────────────

class GameRuleError(VictordleError):
    """Base class for locally rejected game moves."""

    error_type = "GAME_RULE"

    def __init__(self, session_id: str, player_id: str, message: str):
        self.session_id = session_id
        self.player_id = player_id
        super().__init__(message)

    def context(self) -> Dict[str, Any]:
        return {"session_id": self.session_id, "player_id": self.player_id}


class NotYourTurnError(GameRuleError):
    """Raised when a player acts while the turn pointer is on the opponent."""

    error_type = "NOT_YOUR_TURN"

    def __init__(self, session_id: str, player_id: str, current_turn: str):
        self.current_turn = current_turn
        super().__init__(
            session_id, player_id,
            f"It is {current_turn}'s turn, not {player_id}'s",
        )


class GameFinishedError(GameRuleError):
    """Raised when a move is submitted after the session is finished."""

    error_type = "GAME_FINISHED"

    def __init__(self, session_id: str, player_id: str):
        super().__init__(session_id, player_id, f"Game {session_id} is already finished")


class InvalidGuessError(GameRuleError):
    """Raised when a guess is malformed or the player's row is exhausted."""

    error_type = "INVALID_GUESS"

    def __init__(self, session_id: str, player_id: str, guess: str, reason: str):
        self.guess = guess
        self.reason = reason
        super().__init__(session_id, player_id, f"Guess '{guess}' rejected: {reason}")

    def context(self) -> Dict[str, Any]:
        ctx = super().context()
        ctx["guess"] = self.guess
        return ctx


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
) -> str:
    """Format a structured error block for the log."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " ENGINE ERROR — STAYING IN CURRENT STATE",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
