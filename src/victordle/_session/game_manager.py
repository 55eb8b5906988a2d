# Area: Session
"""
victordle._session.game_manager — Session Manager
=================================================

Owns the stored representation of a two-player game: the secret
word, the turn pointer, each player's guess history and the status.

There is no server-side authority. Both clients write the same
session document, and a move is only gated by the local checks in
``build_guess_update`` (turn pointer and status). Callers send
partial updates; nothing prevents two partial updates from racing.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from pydantic import ValidationError

from .coloring import compute_guess_colors
from .words import DEFAULT_WORDS, choose_word, is_valid_word, normalize_word, normalize_word_list
from .._registry.players import PlayerRegistry
from .._shared.ids import maybe_await
from .._store import DocumentSnapshot, DocumentStore
from ..config import EngineConfig, ExhaustedRewardPolicy
from ..errors import GameFinishedError, InvalidGuessError, NotYourTurnError
from ..models import GameSession, GameStatus, Guess, PlayerSlot
from ..types import Disposer

logger = logging.getLogger("victordle.session.game_manager")


class GuessOutcome(str, Enum):
    """What a submitted guess did to the session."""
    CONTINUE = "continue"    # turn passes to the opponent
    WON = "won"              # exact match, game finished
    EXHAUSTED = "exhausted"  # last allowed guess missed, game finished


@dataclass
class GuessResult:
    """
    Result of a locally validated guess.

    Attributes:
        guess: The appended guess with its colors
        outcome: Effect on the session
        updates: Partial update to persist
        session: Local copy of the session with the update applied
    """
    guess: Guess
    outcome: GuessOutcome
    updates: Dict[str, Any]
    session: GameSession


class GameManager:
    """
    Creates, reads, subscribes to and updates game sessions.

    Usage:
        games = GameManager(store, registry, config)
        session = await games.create_game("match_1", "u1", "u2")
        result = await games.submit_guess(session, "u1", "CRANE")
    """

    def __init__(
        self,
        store: DocumentStore,
        registry: PlayerRegistry,
        config: Optional[EngineConfig] = None,
        words: Optional[Iterable[str]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.registry = registry
        self.config = config or EngineConfig()
        self.collection = self.config.games_collection
        self.words = normalize_word_list(words if words is not None else DEFAULT_WORDS)
        self._rng = rng or random.Random()

    # ── Storage operations ───────────────────────────────────

    async def create_game(self, session_id: str, player1_id: str, player2_id: str) -> GameSession:
        """
        Create and store a new session. ``player1_id`` moves first.

        Usernames are copied from the registry when the players are known.
        """
        slots = {}
        for player_id in (player1_id, player2_id):
            player = await self.registry.get(player_id)
            slots[player_id] = PlayerSlot(
                id=player_id,
                username=player.username if player else "",
            )

        session = GameSession(
            id=session_id,
            player_order=[player1_id, player2_id],
            players=slots,
            word=choose_word(self.words, self._rng),
            current_turn=player1_id,
            status=GameStatus.WAITING,
            last_move_timestamp=self.store.clock(),
        )
        await self.store.set(self.collection, session_id, session.to_document())
        logger.info(f"Game created: {session_id} ({player1_id} vs {player2_id})")
        return session

    async def get_game(self, session_id: str) -> Optional[GameSession]:
        """Return the decoded session, or None if it does not exist yet."""
        data = await self.store.get(self.collection, session_id)
        return GameSession.from_document(data) if data is not None else None

    async def subscribe_to_game(
        self, session_id: str, callback: Callable[[GameSession], Any]
    ) -> Disposer:
        """
        Invoke ``callback`` with the full session on every change.

        Not invoked while the document does not exist.
        """

        async def on_snapshot(snapshot: DocumentSnapshot) -> None:
            if not snapshot.exists:
                return
            try:
                session = GameSession.from_document(snapshot.data)
            except ValidationError as e:
                logger.warning(f"Skipping malformed session {session_id}: {e}")
                return
            await maybe_await(callback(session))

        return await self.store.subscribe_document(self.collection, session_id, on_snapshot)

    async def update_game_state(self, session_id: str, updates: Dict[str, Any]) -> None:
        """Merge a partial update into the stored session (no compare-and-swap)."""
        await self.store.update(self.collection, session_id, updates)
        logger.debug(f"Game {session_id} updated: {sorted(updates)}")

    # ── Turn protocol ────────────────────────────────────────

    def build_guess_update(
        self, session: GameSession, player_id: str, word: str, now: float
    ) -> GuessResult:
        """
        Validate a guess and build the partial update for it.

        Raises:
            GameFinishedError: If the session is finished
            NotYourTurnError: If ``player_id`` does not hold the turn
            InvalidGuessError: If the word is malformed or the row is full
        """
        if session.is_finished:
            raise GameFinishedError(session.id, player_id)
        if session.current_turn != player_id:
            raise NotYourTurnError(session.id, player_id, session.current_turn)

        word = normalize_word(word)
        if not is_valid_word(word):
            raise InvalidGuessError(session.id, player_id, word, "must be 5 letters A-Z")

        previous = session.guesses_of(player_id)
        if len(previous) >= self.config.max_guesses:
            raise InvalidGuessError(session.id, player_id, word, "no guesses left")

        guess = Guess(word=word, timestamp=now, colors=compute_guess_colors(word, session.word))
        slot = session.players[player_id].model_copy(update={"guesses": previous + [guess]})
        players = dict(session.players)
        players[player_id] = slot

        updates: Dict[str, Any] = {
            "players": {pid: s.to_document() for pid, s in players.items()},
            "lastMoveTimestamp": now,
        }

        if word == session.word.upper():
            outcome = GuessOutcome.WON
            updates["status"] = GameStatus.FINISHED.value
        elif len(slot.guesses) >= self.config.max_guesses:
            outcome = GuessOutcome.EXHAUSTED
            updates["status"] = GameStatus.FINISHED.value
        else:
            outcome = GuessOutcome.CONTINUE
            updates["currentTurn"] = session.other_player(player_id)
            updates["status"] = GameStatus.ACTIVE.value

        local = GameSession.from_document({**session.to_document(), **updates})
        return GuessResult(guess=guess, outcome=outcome, updates=updates, session=local)

    async def submit_guess(self, session: GameSession, player_id: str, word: str) -> GuessResult:
        """
        Run the full turn submission protocol for the acting client.

        Validates against the caller's latest snapshot, awards scores
        through registry increments, then persists the partial update.
        """
        result = self.build_guess_update(session, player_id, word, self.store.clock())
        logger.info(
            f"[{session.id}] {player_id} guessed {result.guess.word} -> {result.outcome.value}"
        )

        if result.outcome == GuessOutcome.WON:
            await self.registry.increment_score(player_id, self.config.win_bonus)
        elif result.outcome == GuessOutcome.EXHAUSTED:
            await self._apply_exhausted_reward(session)

        await self.update_game_state(session.id, result.updates)
        return result

    async def _apply_exhausted_reward(self, session: GameSession) -> None:
        policy = self.config.exhausted_reward_policy
        if policy == ExhaustedRewardPolicy.CONSOLATION and self.config.consolation_points > 0:
            for player_id in session.player_order:
                await self.registry.increment_score(player_id, self.config.consolation_points)

    def build_pass_turn_update(self, session: GameSession, now: float) -> Optional[Dict[str, Any]]:
        """Partial update handing the turn to the opponent, or None if finished."""
        if session.is_finished:
            return None
        return {
            "currentTurn": session.other_player(session.current_turn),
            "lastMoveTimestamp": now,
        }

    async def pass_turn(self, session: GameSession) -> Optional[Dict[str, Any]]:
        """
        Hand the turn to the other player after a turn timeout.

        Both clients compute the same next turn from the same snapshot,
        so a double fire writes the same value twice.
        """
        updates = self.build_pass_turn_update(session, self.store.clock())
        if updates is None:
            return None
        await self.update_game_state(session.id, updates)
        logger.info(f"[{session.id}] Turn passed to {updates['currentTurn']} (timeout)")
        return updates
