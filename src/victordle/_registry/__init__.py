# Area: Registry
"""
Player-facing registries: players (with leaderboard) and pairing challenges.
"""

from .players import PlayerRegistry
from .pairs import PairRegistry

__all__ = ["PlayerRegistry", "PairRegistry"]
