"""
victordle.client — Per-player engine facade
============================================

VictordleClient wires the registry, matchmaking, session and turn
timer services together for one signed-in player.

Usage:
    client = VictordleClient(store, {"id": "u1", "display_name": "victor"},
                             callbacks=MyFrontEnd())
    await client.start()
    await client.find_match()
    ...
    await client.submit_guess("CRANE")
    await client.close()
"""

from __future__ import annotations
import logging
import random
from typing import Iterable, Optional, Tuple

from ._matchmaking import QueueManager, QueueState
from ._registry import PlayerRegistry
from ._session import GameManager, GuessResult, LetterStates, TurnTimer
from ._session.board import keyboard_letter_states, winner_of
from ._shared import maybe_await
from ._store import DocumentStore
from .callbacks import ClientCallbacks
from .config import EngineConfig
from .errors import GameRuleError
from .models import GameSession, GameStatus
from .types import Disposer, GameUpdateCallback, Identity, MatchFoundCallback

logger = logging.getLogger("victordle.client")


class VictordleClient:
    """
    One player's view of the engine.

    Services are built per client; nothing is shared between clients
    except the store.

    Attributes:
        players: Player registry for this store
        games: Game session manager
        queue: Current matchmaking session (None before find_match)
    """

    def __init__(
        self,
        store: DocumentStore,
        identity: Identity,
        config: Optional[EngineConfig] = None,
        words: Optional[Iterable[str]] = None,
        callbacks: Optional[ClientCallbacks] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.identity = identity
        self.config = config or EngineConfig()
        self.callbacks = callbacks

        self.players = PlayerRegistry(store, self.config.players_collection)
        self.games = GameManager(store, self.players, self.config, words=words, rng=rng)
        self.queue: Optional[QueueManager] = None

        self._on_match_found: Optional[MatchFoundCallback] = None
        self._on_game_update: Optional[GameUpdateCallback] = None
        self._session: Optional[GameSession] = None
        self._game_disposer: Optional[Disposer] = None
        self._turn_key: Optional[Tuple[str, GameStatus]] = None
        self._timer = TurnTimer(
            self.config.turn_seconds,
            self._on_turn_expired,
            tick_seconds=self.config.turn_tick_seconds,
            on_tick=self._on_turn_tick,
        )

    # ── Getters ──────────────────────────────────────────────

    @property
    def user_id(self) -> str:
        return self.identity["id"]

    @property
    def current_game(self) -> Optional[GameSession]:
        return self._session

    @property
    def queue_state(self) -> QueueState:
        return self.queue.state if self.queue is not None else QueueState.IDLE

    @property
    def is_my_turn(self) -> bool:
        session = self._session
        return (
            session is not None
            and not session.is_finished
            and session.current_turn == self.user_id
        )

    @property
    def letter_states(self) -> LetterStates:
        if self._session is None:
            return LetterStates(frozenset(), frozenset(), frozenset())
        return keyboard_letter_states(self._session)

    @property
    def winner(self) -> Optional[str]:
        return winner_of(self._session) if self._session is not None else None

    @property
    def seconds_left(self) -> float:
        return self._timer.remaining

    # ── Lifecycle ────────────────────────────────────────────

    async def start(self) -> None:
        """Register (or refresh) this player in the registry."""
        await self.players.upsert(self.user_id, self.identity["display_name"])
        logger.info(f"Client started for {self.user_id}")

    async def find_match(
        self,
        on_game_update: Optional[GameUpdateCallback] = None,
        on_match_found: Optional[MatchFoundCallback] = None,
    ) -> None:
        """
        Leave any previous game and join the matchmaking queue.

        Explicit callbacks take precedence over the ClientCallbacks instance.
        """
        await self._leave_game()
        if self.queue is not None:
            await self.queue.leave_queue()

        self._on_game_update = on_game_update or (
            self.callbacks.on_game_update if self.callbacks else None
        )
        self._on_match_found = on_match_found or (
            self.callbacks.on_match_found if self.callbacks else None
        )
        self.queue = QueueManager(self.store, self.user_id, self.games, self.config)
        await self.queue.join_queue(self._handle_match_found)

    async def cancel_search(self) -> None:
        """Leave the queue without closing the client."""
        if self.queue is not None:
            await self.queue.leave_queue()

    async def close(self) -> None:
        """Stop the timer, drop the game subscription and leave the queue."""
        await self._leave_game()
        if self.queue is not None:
            await self.queue.leave_queue()
        logger.info(f"Client closed for {self.user_id}")

    # ── Game actions ─────────────────────────────────────────

    async def submit_guess(self, word: str) -> GuessResult:
        """
        Submit a guess against the latest session snapshot.

        Raises:
            GameRuleError: If there is no game or the move is rejected
        """
        if self._session is None:
            raise GameRuleError("", self.user_id, "No active game")
        result = await self.games.submit_guess(self._session, self.user_id, word)
        self._session = result.session
        return result

    # ── Internals ────────────────────────────────────────────

    async def _handle_match_found(self, session_id: str) -> None:
        if self._game_disposer is not None:
            self._game_disposer()
        self._game_disposer = await self.games.subscribe_to_game(
            session_id, self._handle_game_update
        )
        if self._on_match_found is not None:
            await maybe_await(self._on_match_found(session_id))

    async def _handle_game_update(self, session: GameSession) -> None:
        self._session = session
        key = (session.current_turn, session.status)
        if session.is_finished:
            self._timer.stop()
        elif key != self._turn_key:
            self._timer.restart()
        self._turn_key = key

        if self._on_game_update is not None:
            await maybe_await(self._on_game_update(session))

    async def _on_turn_expired(self) -> None:
        session = self._session
        if session is None or session.is_finished:
            return
        await self.games.pass_turn(session)

    async def _on_turn_tick(self, seconds_left: float) -> None:
        if self.callbacks is not None:
            await maybe_await(self.callbacks.on_turn_tick(seconds_left))

    async def _leave_game(self) -> None:
        self._timer.stop()
        if self._game_disposer is not None:
            self._game_disposer()
            self._game_disposer = None
        self._session = None
        self._turn_key = None
