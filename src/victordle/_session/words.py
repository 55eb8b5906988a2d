# Area: Session
"""
victordle._session.words — Word source helpers
==============================================

The word list is supplied by the caller. A small default list ships
so demos and tests run without one.
"""

import random
import re
from typing import Iterable, Optional, Sequence, Tuple

WORD_LENGTH = 5

_WORD_RE = re.compile(r"^[A-Z]{%d}$" % WORD_LENGTH)

DEFAULT_WORDS: Tuple[str, ...] = (
    "CLASS", "REACT", "LOGIC", "DEBUG", "CHESS", "GHOST", "PLANT", "BRAVE",
    "CRANE", "FLAME", "GRAPE", "HOUSE", "LEMON", "MOUSE", "NIGHT", "OCEAN",
    "PIANO", "QUEEN", "RIVER", "SHINE", "TIGER", "ULTRA", "VIVID", "WATER",
    "YOUTH", "ZEBRA", "STACK", "QUERY", "ARRAY", "PIXEL",
)


def normalize_word(word: str) -> str:
    """Uppercase and strip a word."""
    return word.strip().upper()


def is_valid_word(word: str) -> bool:
    """True for exactly WORD_LENGTH letters A-Z (after normalizing)."""
    return bool(_WORD_RE.match(normalize_word(word)))


def normalize_word_list(words: Iterable[str]) -> Tuple[str, ...]:
    """
    Validate and normalize a word list.

    Raises:
        ValueError: If the list is empty or holds a malformed word
    """
    normalized = tuple(normalize_word(w) for w in words)
    if not normalized:
        raise ValueError("Word list is empty")
    bad = [w for w in normalized if not _WORD_RE.match(w)]
    if bad:
        raise ValueError(f"Words must be {WORD_LENGTH} letters A-Z: {bad[:5]}")
    return normalized


def choose_word(words: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """Pick a word uniformly at random."""
    return (rng or random).choice(words)
