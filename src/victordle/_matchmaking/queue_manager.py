# Area: Matchmaking
"""
victordle._matchmaking.queue_manager — Decentralized FIFO matchmaking
=====================================================================

One QueueManager per player. There is no matchmaker process: every
queued client watches the searching entries and the client whose
entry is first in FIFO order creates the match.

Protocol:
1. write own entry as gettingReady, start the heartbeat
2. listen to the own entry and to all searching entries
3. after the listener settle delay, flip own entry to searching
4. on each searching snapshot, pick the two oldest live entries; if
   this client is first, create the game, mark the opponent matched,
   wait briefly, then mark itself matched
5. whoever sees its own entry become matched resolves the game and
   fires ``on_match_found`` exactly once
6. after a grace delay the matching client deletes both entries, skipping
   any that a rejoining player has already replaced

Queue entries are single-writer, except that the matching client
writes the opponent's matched status.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable, List, Optional, Set

from pydantic import ValidationError

from .enums import QueueEvent, QueueState
from .matching import select_pair
from .state_machine import QueueStateMachine
from .._session.game_manager import GameManager
from .._shared import generate_match_id, log_engine_error, maybe_await
from .._store import SERVER_TIMESTAMP, DocumentSnapshot, DocumentStore, Query, QuerySnapshot
from ..config import EngineConfig
from ..errors import DocumentNotFoundError, StoreError
from ..models import QueueEntry, QueueStatus
from ..types import Disposer, MatchFoundCallback

logger = logging.getLogger("victordle.matchmaking.queue")


class QueueManager:
    """
    Matchmaking session for a single player.

    Usage:
        queue = QueueManager(store, "u1", games, config)
        await queue.join_queue(on_match_found)
        ...
        await queue.leave_queue()
    """

    def __init__(
        self,
        store: DocumentStore,
        user_id: str,
        games: GameManager,
        config: Optional[EngineConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.store = store
        self.user_id = user_id
        self.games = games
        self.config = config or EngineConfig()
        self.collection = self.config.queue_collection
        self._clock = clock or store.clock

        self._machine = QueueStateMachine()
        self._on_match_found: Optional[MatchFoundCallback] = None
        self._match_id: Optional[str] = None
        self._match_attempted = False

        self._heartbeat_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        # Grace cleanups outlive leave_queue(); held here until done
        self._cleanups: Set[asyncio.Task] = set()
        self._disposers: List[Disposer] = []

    # ── Getters ──────────────────────────────────────────────

    @property
    def state(self) -> QueueState:
        return self._machine.current_state

    @property
    def match_id(self) -> Optional[str]:
        return self._match_id

    @property
    def is_searching(self) -> bool:
        return self.state in (QueueState.GETTING_READY, QueueState.SEARCHING)

    # ── Public API ───────────────────────────────────────────

    async def join_queue(self, on_match_found: MatchFoundCallback) -> None:
        """
        Advertise this player and start looking for an opponent.

        Returns once the entry is searching. ``on_match_found`` is called
        later with the session id, at most once per join.

        Raises:
            ValueError: If already queued or matched
            StoreError: If the entry cannot be written (nothing is left behind)
        """
        self._machine.transition(QueueEvent.JOIN)
        self._on_match_found = on_match_found
        self._match_id = None
        self._match_attempted = False

        try:
            await self.store.set(self.collection, self.user_id, {
                "userId": self.user_id,
                "timestamp": SERVER_TIMESTAMP,
                "status": QueueStatus.GETTING_READY.value,
                "lastPing": SERVER_TIMESTAMP,
            })
            self._heartbeat_task = self._spawn(self._heartbeat())

            self._disposers.append(await self.store.subscribe_document(
                self.collection, self.user_id, self._on_own_entry
            ))
            self._disposers.append(await self.store.subscribe_query(
                self._searching_query(), self._on_searching
            ))

            await asyncio.sleep(self.config.listener_settle_seconds)

            if self._machine.can_transition(QueueEvent.LISTENERS_READY):
                self._machine.transition(QueueEvent.LISTENERS_READY)
                await self.store.update(
                    self.collection, self.user_id, {"status": QueueStatus.SEARCHING.value}
                )
                logger.info(f"{self.user_id} is searching for a match")
        except Exception:
            await self.leave_queue()
            raise

    async def leave_queue(self) -> None:
        """
        Stop searching: cancel tasks, drop listeners, delete own entry.

        Safe to call in any state and more than once. A pending cleanup
        of a match this client created is left to finish; it only removes
        entries still tagged with that match.
        """
        current = asyncio.current_task()
        pending = [t for t in self._tasks if t is not current]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._heartbeat_task = None
        self._dispose_listeners()

        if self._machine.can_transition(QueueEvent.LEAVE):
            self._machine.transition(QueueEvent.LEAVE)

        try:
            await self.store.delete(self.collection, self.user_id)
        except StoreError as e:
            log_engine_error(e, logging.WARNING)
        logger.info(f"{self.user_id} left the queue")

    # ── Heartbeat ────────────────────────────────────────────

    async def _heartbeat(self) -> None:
        while True:
            await asyncio.sleep(self.config.heartbeat_interval_seconds)
            try:
                await self.store.update(self.collection, self.user_id, {"lastPing": SERVER_TIMESTAMP})
            except DocumentNotFoundError:
                if not self.is_searching:
                    logger.debug(f"Heartbeat stopped, entry of {self.user_id} is gone")
                    return
                await self._restore_entry()
            except StoreError as e:
                log_engine_error(e, logging.WARNING)

    async def _restore_entry(self) -> None:
        """Re-advertise a searching player whose entry was removed under it."""
        if not self.is_searching:
            return
        status = (
            QueueStatus.SEARCHING if self.state == QueueState.SEARCHING
            else QueueStatus.GETTING_READY
        )
        logger.warning(f"Queue entry of {self.user_id} vanished while searching, rewriting it")
        try:
            await self.store.set(self.collection, self.user_id, {
                "userId": self.user_id,
                "timestamp": SERVER_TIMESTAMP,
                "status": status.value,
                "lastPing": SERVER_TIMESTAMP,
            })
        except StoreError as e:
            log_engine_error(e, logging.WARNING)

    def _stop_heartbeat(self) -> None:
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            self._heartbeat_task = None

    # ── Matching ─────────────────────────────────────────────

    def _searching_query(self) -> Query:
        return Query(
            collection=self.collection,
            where=(("status", QueueStatus.SEARCHING.value),),
            order_by="timestamp",
        )

    def _on_searching(self, snapshot: QuerySnapshot) -> None:
        if self._match_attempted or self.state != QueueState.SEARCHING:
            return

        entries = []
        for doc_id, data in snapshot:
            try:
                entries.append(QueueEntry.from_document(data))
            except ValidationError as e:
                logger.warning(f"Ignoring malformed queue entry {doc_id}: {e}")

        pair = select_pair(entries, self._clock(), self.config.staleness_threshold_seconds)
        if pair is None:
            return
        first, second = pair
        if first.user_id != self.user_id:
            return

        self._match_attempted = True
        self._spawn(self._create_match(second))

    async def _create_match(self, other: QueueEntry) -> None:
        # Let a freshly joined opponent finish attaching its listeners
        wait = other.timestamp + self.config.min_join_settle_seconds - self._clock()
        if wait > 0:
            await asyncio.sleep(wait)

        match_id = generate_match_id()
        matched = {"status": QueueStatus.MATCHED.value, "matchId": match_id}
        try:
            await self.games.create_game(match_id, self.user_id, other.user_id)
            # Only write to another player's entry in the whole protocol
            await self.store.update(self.collection, other.user_id, matched)
            await asyncio.sleep(self.config.other_then_self_delay_seconds)
            await self.store.update(self.collection, self.user_id, matched)
        except StoreError as e:
            log_engine_error(e, logging.WARNING)
            self._match_attempted = False
            return

        logger.info(f"Matched {self.user_id} with {other.user_id} in {match_id}")
        cleanup = asyncio.get_running_loop().create_task(
            self._cleanup_entries(other.user_id, match_id)
        )
        self._cleanups.add(cleanup)
        cleanup.add_done_callback(self._cleanups.discard)

    async def _cleanup_entries(self, other_id: str, match_id: str) -> None:
        await asyncio.sleep(self.config.cleanup_grace_seconds)
        for user_id in (other_id, self.user_id):
            try:
                data = await self.store.get(self.collection, user_id)
                # A player who already rejoined owns a fresh entry
                if not data or data.get("matchId") != match_id:
                    logger.debug(f"Queue entry of {user_id} no longer belongs to {match_id}")
                    continue
                await self.store.delete(self.collection, user_id)
            except StoreError as e:
                log_engine_error(e, logging.WARNING)
        logger.debug(f"Queue entries of match {match_id} cleaned up")

    # ── Match delivery ───────────────────────────────────────

    def _on_own_entry(self, snapshot: DocumentSnapshot) -> None:
        if not snapshot.exists:
            if self.is_searching:
                self._spawn(self._restore_entry())
            return
        try:
            entry = QueueEntry.from_document(snapshot.data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed own queue entry: {e}")
            return
        if entry.status != QueueStatus.MATCHED or not entry.match_id:
            return
        if not self._machine.can_transition(QueueEvent.MATCHED):
            return

        self._machine.transition(QueueEvent.MATCHED)
        self._match_id = entry.match_id
        self._stop_heartbeat()
        self._spawn(self._deliver_match(entry.match_id))

    async def _deliver_match(self, match_id: str) -> None:
        try:
            session = await self.games.get_game(match_id)
        except StoreError as e:
            log_engine_error(e, logging.WARNING)
            session = None

        if session is None:
            logger.debug(f"Game {match_id} not visible yet, waiting for it")
            ready = asyncio.Event()
            dispose = await self.games.subscribe_to_game(match_id, lambda _: ready.set())
            self._disposers.append(dispose)
            try:
                await ready.wait()
            finally:
                dispose()

        logger.info(f"Match found for {self.user_id}: {match_id}")
        try:
            await maybe_await(self._on_match_found(match_id))
        except Exception as e:
            logger.error(f"on_match_found failed for {match_id}: {e}", exc_info=True)

        if self._machine.can_transition(QueueEvent.CLEANUP):
            self._machine.transition(QueueEvent.CLEANUP)
        self._dispose_listeners()

    # ── Internals ────────────────────────────────────────────

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _dispose_listeners(self) -> None:
        disposers, self._disposers = self._disposers, []
        for dispose in disposers:
            dispose()
