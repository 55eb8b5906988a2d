# Area: Shared
"""
victordle.demo_bot — Self-playing front-end
===========================================

A ready-to-use ClientCallbacks implementation that plays on its own.
Used by ``python -m victordle --demo`` and handy for load testing.

Strategy: keep only the words consistent with every colored row on
the shared board (both players' guesses) and pick one at random.

Usage:
    bot = DemoBot()
    client = VictordleClient(store, identity, callbacks=bot)
    bot.bind(client)
    await client.start()
    await client.find_match()
    await bot.finished.wait()
"""

from __future__ import annotations
import asyncio
import logging
import random
from typing import TYPE_CHECKING, List, Optional, Sequence

from ._session.coloring import compute_guess_colors
from ._session.board import combined_board
from .callbacks import ClientCallbacks
from .errors import GameRuleError
from .models import GameSession

if TYPE_CHECKING:
    from .client import VictordleClient

logger = logging.getLogger("victordle.demo_bot")


def consistent_words(session: GameSession, words: Sequence[str]) -> List[str]:
    """Words that would have produced every colored row seen so far."""
    rows = [guess for _, guess in combined_board(session)]
    return [
        word for word in words
        if all(compute_guess_colors(g.word, word) == g.colors for g in rows)
    ]


class DemoBot(ClientCallbacks):
    """
    Plays whenever it holds the turn.

    Attributes:
        finished: Set once a finished session has been observed
        final_session: Last session seen
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self._client: Optional["VictordleClient"] = None
        self.finished = asyncio.Event()
        self.final_session: Optional[GameSession] = None
        self.matches: List[str] = []

    def bind(self, client: "VictordleClient") -> None:
        self._client = client

    def on_match_found(self, session_id: str) -> None:
        self.matches.append(session_id)
        logger.info(f"Bot matched into {session_id}")

    async def on_game_update(self, session: GameSession) -> None:
        self.final_session = session
        if session.is_finished:
            self.finished.set()
            return
        client = self._client
        if client is None or session.current_turn != client.user_id:
            return

        candidates = consistent_words(session, client.games.words) or list(client.games.words)
        word = self._rng.choice(candidates)
        try:
            await client.submit_guess(word)
        except GameRuleError as e:
            # Turn timed out or the opponent moved first; wait for the next snapshot
            logger.info(f"Bot move rejected: {e}")
