# Area: Matchmaking
"""
victordle._matchmaking.matching — FIFO pair selection
=====================================================

Pure selection logic run by every queued client on every snapshot
of the searching query. All clients see the same snapshot, so they
all pick the same pair; only the first of the pair may act on it.
"""

from typing import Iterable, List, Optional, Tuple

from ..models import QueueEntry, QueueStatus


def is_stale(entry: QueueEntry, now: float, threshold_seconds: float) -> bool:
    """
    True if the entry's heartbeat is too old to trust.

    Entries without a heartbeat yet are treated as stale.
    """
    if entry.last_ping is None:
        return True
    return now - entry.last_ping >= threshold_seconds


def live_candidates(
    entries: Iterable[QueueEntry], now: float, threshold_seconds: float
) -> List[QueueEntry]:
    """Searching, non-stale entries ordered by join time (then user id)."""
    live = [
        e for e in entries
        if e.status == QueueStatus.SEARCHING
        and e.timestamp is not None
        and not is_stale(e, now, threshold_seconds)
    ]
    return sorted(live, key=lambda e: (e.timestamp, e.user_id))


def select_pair(
    entries: Iterable[QueueEntry], now: float, threshold_seconds: float
) -> Optional[Tuple[QueueEntry, QueueEntry]]:
    """
    The two longest-waiting live entries, or None if fewer than two.

    Stale entries are ignored, never deleted: their owners may still
    come back, and cleaning up is not the observer's job.
    """
    live = live_candidates(entries, now, threshold_seconds)
    if len(live) < 2:
        return None
    return live[0], live[1]
