# Area: Session
"""
victordle._session.board — Derived board views
==============================================

Pure functions over a session's guess history. Nothing here is
stored; recompute on every snapshot.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from ..models import GameSession, Guess, GuessColor


@dataclass(frozen=True)
class LetterStates:
    """Disjoint keyboard letter sets."""
    green: FrozenSet[str]
    yellow: FrozenSet[str]
    gray: FrozenSet[str]


def combined_board(session: GameSession) -> List[Tuple[str, Guess]]:
    """
    Every guess of both players as ``(player_id, guess)`` rows.

    Ordered by guess timestamp; equal timestamps keep display order.
    """
    rows = [
        (player_id, guess)
        for player_id in session.player_order
        for guess in session.players[player_id].guesses
    ]
    return sorted(rows, key=lambda row: row[1].timestamp)


def keyboard_letter_states(session: GameSession) -> LetterStates:
    """
    Aggregate letter feedback across both players' guesses.

    A letter ever marked green is green; otherwise ever marked yellow
    is yellow; otherwise it is gray.
    """
    green, yellow, gray = set(), set(), set()

    for _, guess in combined_board(session):
        for letter, color in zip(guess.word.upper(), guess.colors):
            if color == GuessColor.GREEN:
                green.add(letter)
            elif color == GuessColor.YELLOW:
                yellow.add(letter)
            else:
                gray.add(letter)

    yellow -= green
    gray -= green | yellow
    return LetterStates(frozenset(green), frozenset(yellow), frozenset(gray))


def winner_of(session: GameSession) -> Optional[str]:
    """Id of the player who guessed the word, or None."""
    for player_id, guess in combined_board(session):
        if guess.word.upper() == session.word.upper():
            return player_id
    return None
