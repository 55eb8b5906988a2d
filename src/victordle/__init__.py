"""
victordle — Matchmaking and game-session engine for two-player Wordle
=====================================================================

Two players share one secret five-letter word and alternate guesses
on a shared board. There is no game server: clients coordinate only
through a shared document store and live subscriptions.

Quick Start (self-playing demo):
    python -m victordle --demo

Custom Front-end:
    from victordle import ClientCallbacks, InMemoryDocumentStore, VictordleClient

    class MyFrontEnd(ClientCallbacks): ...  # Implement 2 methods

    client = VictordleClient(store, {"id": "u1", "display_name": "victor"},
                             callbacks=MyFrontEnd())
    await client.start()
    await client.find_match()

Building Blocks
---------------
The services the client wires together are importable on their own:

    from victordle import (
        PlayerRegistry, PairRegistry, QueueManager, GameManager, TurnTimer,
        compute_guess_colors, keyboard_letter_states,
    )
"""

from .callbacks import ClientCallbacks
from .client import VictordleClient
from .demo_bot import DemoBot
from .config import EngineConfig, ExhaustedRewardPolicy, load_config, validate_config
from .errors import (
    VictordleError,
    StoreError,
    DocumentNotFoundError,
    PlayerNotFoundError,
    AmbiguousUsernameError,
    GameRuleError,
    NotYourTurnError,
    GameFinishedError,
    InvalidGuessError,
)
from .models import (
    GuessColor,
    QueueStatus,
    GameStatus,
    Player,
    QueueEntry,
    Guess,
    PlayerSlot,
    GameSession,
    Pair,
)
from .types import Identity
from ._store import (
    SERVER_TIMESTAMP,
    Increment,
    Query,
    DocumentStore,
    InMemoryDocumentStore,
    SqliteDocumentStore,
)
from ._registry import PlayerRegistry, PairRegistry
from ._matchmaking import QueueManager, QueueState
from ._session import (
    GameManager,
    GuessOutcome,
    GuessResult,
    TurnTimer,
    LetterStates,
    compute_guess_colors,
    combined_board,
    keyboard_letter_states,
    winner_of,
)
from ._shared import setup_logging

__all__ = [
    # Main classes
    "VictordleClient",
    "ClientCallbacks",
    "DemoBot",
    # Config
    "EngineConfig",
    "ExhaustedRewardPolicy",
    "load_config",
    "validate_config",
    # Errors
    "VictordleError",
    "StoreError",
    "DocumentNotFoundError",
    "PlayerNotFoundError",
    "AmbiguousUsernameError",
    "GameRuleError",
    "NotYourTurnError",
    "GameFinishedError",
    "InvalidGuessError",
    # Models
    "GuessColor",
    "QueueStatus",
    "GameStatus",
    "Player",
    "QueueEntry",
    "Guess",
    "PlayerSlot",
    "GameSession",
    "Pair",
    "Identity",
    # Store
    "SERVER_TIMESTAMP",
    "Increment",
    "Query",
    "DocumentStore",
    "InMemoryDocumentStore",
    "SqliteDocumentStore",
    # Services
    "PlayerRegistry",
    "PairRegistry",
    "QueueManager",
    "QueueState",
    "GameManager",
    "GuessOutcome",
    "GuessResult",
    "TurnTimer",
    # Board helpers
    "LetterStates",
    "compute_guess_colors",
    "combined_board",
    "keyboard_letter_states",
    "winner_of",
    # Logging
    "setup_logging",
]

__version__ = "1.0.0"
