# Area: Shared
"""
victordle.cli — Command-line interface
======================================

Provides the CLI entry point for the self-playing demo.

Usage:
    python -m victordle --demo                        # In-memory store
    python -m victordle --demo --db victordle.db      # SQLite store
    python -m victordle --demo --config config.json   # Custom timings

Demo mode can be enabled via:
    1. CLI flag: --demo
    2. Environment variable: DEMO_MODE=true
"""

import argparse
import asyncio
import logging
import os
import random
import sys
from typing import List, Optional

from ._registry import PlayerRegistry
from ._session.board import combined_board, winner_of
from ._shared import setup_logging
from ._store import DocumentStore, InMemoryDocumentStore, SqliteDocumentStore
from .client import VictordleClient
from .config import EngineConfig, load_config
from .demo_bot import DemoBot
from .models import GameSession, GuessColor

logger = logging.getLogger("victordle.cli")

# Timings used by the demo unless a config file is given
DEMO_TIMINGS = {
    "heartbeat_interval_seconds": 0.5,
    "staleness_threshold_seconds": 5.0,
    "listener_settle_seconds": 0.05,
    "min_join_settle_seconds": 0.1,
    "other_then_self_delay_seconds": 0.05,
    "cleanup_grace_seconds": 0.2,
    "turn_seconds": 3.0,
    "turn_tick_seconds": 0.5,
}

DEMO_PLAYERS = (("bot_alice", "alice"), ("bot_bob", "bob"))

_COLOR_MARKS = {GuessColor.GREEN: "G", GuessColor.YELLOW: "Y", GuessColor.GRAY: "."}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Victordle engine - run two bots through matchmaking and a game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m victordle --demo
  python -m victordle --demo --db victordle.db
  DEMO_MODE=true python -m victordle --config config.json
        """,
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run the self-playing two-bot demo",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file",
    )

    parser.add_argument(
        "--db",
        type=str,
        help="SQLite database path (default: in-memory store)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for word choice and bot moves",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Give up after this many seconds (default: 120)",
    )

    return parser.parse_args(argv)


def is_demo_mode(args: argparse.Namespace) -> bool:
    """Check if demo mode is enabled via CLI or environment."""
    if args.demo:
        return True
    return os.environ.get("DEMO_MODE", "").lower() in ("true", "1", "yes")


def build_config(config_path: Optional[str]) -> EngineConfig:
    """Load config; without a file, tighten the delays for a quick demo."""
    config = load_config(config_path)
    if config_path:
        return config
    return config.model_copy(update=DEMO_TIMINGS)


def build_store(db_path: Optional[str]) -> DocumentStore:
    if db_path:
        return SqliteDocumentStore(db_path)
    return InMemoryDocumentStore()


def format_board(session: GameSession) -> str:
    """Render both players' rows, oldest first."""
    lines = [f"Game {session.id} — word: {session.word}"]
    for player_id, guess in combined_board(session):
        name = session.players[player_id].username or player_id
        marks = "".join(_COLOR_MARKS[c] for c in guess.colors)
        lines.append(f"  {name:<10} {guess.word}  {marks}")

    winner = winner_of(session)
    if winner is not None:
        lines.append(f"Winner: {session.players[winner].username or winner}")
    else:
        lines.append("No winner")
    return "\n".join(lines)


async def run_demo(
    config: EngineConfig,
    store: DocumentStore,
    seed: Optional[int] = None,
    timeout: float = 120.0,
) -> GameSession:
    """
    Start two bot clients, let them match and play one game.

    Returns:
        The finished session

    Raises:
        asyncio.TimeoutError: If the game does not finish in time
    """
    rng = random.Random(seed)
    bots: List[DemoBot] = []
    clients: List[VictordleClient] = []

    for user_id, display_name in DEMO_PLAYERS:
        bot = DemoBot(rng=random.Random(rng.random()))
        client = VictordleClient(
            store,
            {"id": user_id, "display_name": display_name},
            config=config,
            callbacks=bot,
            rng=random.Random(rng.random()),
        )
        bot.bind(client)
        bots.append(bot)
        clients.append(client)

    try:
        for client in clients:
            await client.start()
        await asyncio.gather(*(client.find_match() for client in clients))
        await asyncio.wait_for(
            asyncio.gather(*(bot.finished.wait() for bot in bots)), timeout
        )
    finally:
        for client in clients:
            await client.close()

    return bots[0].final_session


async def _print_leaderboard(store: DocumentStore, config: EngineConfig) -> None:
    registry = PlayerRegistry(store, config.players_collection)
    print("Leaderboard:")
    for rank, player in enumerate(await registry.top_players(), start=1):
        print(f"  {rank}. {player.username:<10} {player.score}")


async def _demo_main(args: argparse.Namespace, config: EngineConfig) -> GameSession:
    store = build_store(args.db)
    session = await run_demo(config, store, seed=args.seed, timeout=args.timeout)
    print(format_board(session))
    await _print_leaderboard(store, config)
    return session


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    if not is_demo_mode(args):
        print("Error: Only demo mode is available from the command line.", file=sys.stderr)
        print("Use --demo, or build a VictordleClient from Python code.", file=sys.stderr)
        return 1

    try:
        config = build_config(args.config)
    except ValueError as e:
        print(f"Error: Invalid config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_file, level=logging.INFO)

    try:
        asyncio.run(_demo_main(args, config))
    except asyncio.TimeoutError:
        logger.error("Demo game did not finish in time")
        return 1
    return 0
