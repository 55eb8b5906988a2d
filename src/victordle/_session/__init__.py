# Area: Session
"""
Game session layer.

This package handles:
- Session creation, subscription and partial updates
- The turn submission protocol and turn timeouts
- Guess coloring and derived board views
"""

from .coloring import compute_guess_colors
from .board import LetterStates, combined_board, keyboard_letter_states, winner_of
from .game_manager import GameManager, GuessOutcome, GuessResult
from .turn_timer import TurnTimer
from .words import DEFAULT_WORDS, WORD_LENGTH, is_valid_word, normalize_word_list

__all__ = [
    "compute_guess_colors",
    "LetterStates",
    "combined_board",
    "keyboard_letter_states",
    "winner_of",
    "GameManager",
    "GuessOutcome",
    "GuessResult",
    "TurnTimer",
    "DEFAULT_WORDS",
    "WORD_LENGTH",
    "is_valid_word",
    "normalize_word_list",
]
