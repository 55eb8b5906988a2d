# Area: Registry
"""
victordle._registry.pairs — Pair Registry
=========================================

Tracks in-person pairing challenges: a user is given a target to
find, and the pair completes when the user scans the target's code.
How the target is detected (QR, proximity) is up to the UI; this
module only keeps the records. Scoring is left to the caller.
"""

import logging
from typing import Optional

from .._store import DocumentStore
from ..models import Pair

logger = logging.getLogger("victordle.registry.pairs")


class PairRegistry:
    """One pair document per user id."""

    def __init__(self, store: DocumentStore, collection: str = "pairs"):
        self.store = store
        self.collection = collection

    async def create_pair(self, user_id: str, target_id: str) -> Pair:
        """Assign ``target_id`` to ``user_id``, replacing any previous pair."""
        pair = Pair(
            user_id=user_id,
            target_id=target_id,
            timestamp=self.store.clock(),
            completed=False,
        )
        await self.store.set(self.collection, user_id, pair.to_document())
        logger.info(f"Pair created: {user_id} -> {target_id}")
        return pair

    async def get_current_pair(self, user_id: str) -> Optional[Pair]:
        data = await self.store.get(self.collection, user_id)
        return Pair.from_document(data) if data is not None else None

    async def verify_and_complete_pair(self, scanner_id: str, scanned_id: str) -> bool:
        """
        Complete the scanner's pair if they scanned their assigned target.

        Returns:
            True if the pair was pending for exactly this target and is
            now completed, False otherwise
        """
        pair = await self.get_current_pair(scanner_id)
        if pair is None or pair.target_id != scanned_id or pair.completed:
            return False
        await self.store.update(self.collection, scanner_id, {"completed": True})
        logger.info(f"Pair completed: {scanner_id} found {scanned_id}")
        return True

    async def remove_pair(self, user_id: str) -> None:
        await self.store.delete(self.collection, user_id)
