# Area: Registry
"""
victordle._registry.players — Player Registry
=============================================

Maps a stable user id to a display name and a score. Scores only
ever change through the store's ``Increment`` primitive so that two
matches finishing at the same time never lose an update.
"""

import logging
from typing import Callable, List, Optional

from .._store import SERVER_TIMESTAMP, DocumentStore, Increment, Query, QuerySnapshot
from .._shared.ids import maybe_await
from ..errors import AmbiguousUsernameError, DocumentNotFoundError, PlayerNotFoundError
from ..models import Player
from ..types import Disposer

logger = logging.getLogger("victordle.registry.players")


class PlayerRegistry:
    """
    Registry of players stored one document per user id.

    Usage:
        registry = PlayerRegistry(store)
        await registry.upsert("u1", "victor")
        await registry.increment_score("u1", 10)
    """

    def __init__(self, store: DocumentStore, collection: str = "players"):
        self.store = store
        self.collection = collection

    async def upsert(self, player_id: str, username: str) -> None:
        """
        Create the player on first contact, else refresh name and activity.

        The score of an existing player is never touched, so calling
        this on every session start is safe.

        Args:
            player_id: Stable id from the auth layer
            username: Current display name
        """
        existing = await self.store.get(self.collection, player_id)
        if existing is None:
            await self.store.set(self.collection, player_id, {
                "id": player_id,
                "username": username,
                "score": 0,
                "createdAt": SERVER_TIMESTAMP,
                "lastActive": SERVER_TIMESTAMP,
            })
            logger.info(f"Player created: {player_id} ({username})")
            return

        await self.store.update(self.collection, player_id, {
            "username": username,
            "lastActive": SERVER_TIMESTAMP,
        })
        logger.debug(f"Player refreshed: {player_id} ({username})")

    async def get(self, player_id: str) -> Optional[Player]:
        """Return the player or None if unknown."""
        data = await self.store.get(self.collection, player_id)
        return Player.from_document(data) if data is not None else None

    async def increment_score(self, player_id: str, delta: int) -> None:
        """
        Atomically add ``delta`` to a player's score.

        Raises:
            ValueError: If delta is negative (scores never decrease)
            PlayerNotFoundError: If the player does not exist
        """
        if delta < 0:
            raise ValueError(f"Score delta must be non-negative, got {delta}")
        try:
            await self.store.update(self.collection, player_id, {
                "score": Increment(delta),
                "lastActive": SERVER_TIMESTAMP,
            })
        except DocumentNotFoundError as e:
            raise PlayerNotFoundError(player_id) from e
        logger.info(f"Score +{delta} for {player_id}")

    async def increment_score_by_username(self, username: str, delta: int) -> str:
        """
        Add ``delta`` to the score of the player with this username.

        Usernames are not unique, so the lookup must resolve to exactly
        one player.

        Returns:
            The id of the player that was credited

        Raises:
            PlayerNotFoundError: If no player has this username
            AmbiguousUsernameError: If several players share it
        """
        matches = await self.store.query(
            Query(self.collection, where=(("username", username),))
        )
        if not matches:
            raise PlayerNotFoundError(username, by="username")
        if len(matches) > 1:
            raise AmbiguousUsernameError(username, [doc_id for doc_id, _ in matches])

        player_id = matches[0][0]
        await self.increment_score(player_id, delta)
        return player_id

    # ── Leaderboard ──────────────────────────────────────────

    def _leaderboard_query(self, limit: int) -> Query:
        return Query(self.collection, order_by="score", descending=True, limit=limit)

    async def top_players(self, limit: int = 10) -> List[Player]:
        """Return the ``limit`` highest-scoring players, best first."""
        docs = await self.store.query(self._leaderboard_query(limit))
        return [Player.from_document(data) for _, data in docs]

    async def subscribe_to_leaderboard(
        self, callback: Callable[[List[Player]], None], limit: int = 10
    ) -> Disposer:
        """Invoke ``callback`` with the top players now and on every change."""

        async def on_snapshot(snapshot: QuerySnapshot) -> None:
            players = [Player.from_document(data) for _, data in snapshot]
            await maybe_await(callback(players))

        return await self.store.subscribe_query(self._leaderboard_query(limit), on_snapshot)
