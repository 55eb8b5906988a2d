# Area: Session
"""
victordle._session.coloring — Guess coloring
============================================

Computes per-letter feedback for a guess against the target word.

Two passes over a per-letter remaining-count table seeded from the
target:
1. exact position matches become GREEN and consume one occurrence
2. remaining positions whose letter still has occurrences left
   become YELLOW and consume one occurrence

Everything else is GRAY. Because greens consume first, a letter that
appears once in the target can never color two positions.
"""

from collections import Counter
from typing import List

from ..models import GuessColor


def compute_guess_colors(guess: str, target: str) -> List[GuessColor]:
    """
    Color each position of ``guess`` against ``target``.

    Args:
        guess: The guessed word (case-insensitive)
        target: The secret word (case-insensitive)

    Returns:
        One GuessColor per position

    Raises:
        ValueError: If the words differ in length
    """
    guess, target = guess.upper(), target.upper()
    if len(guess) != len(target):
        raise ValueError(f"Guess length {len(guess)} != target length {len(target)}")

    colors = [GuessColor.GRAY] * len(target)
    remaining = Counter(target)

    # First pass: exact matches
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            colors[i] = GuessColor.GREEN
            remaining[g] -= 1

    # Second pass: present elsewhere
    for i, g in enumerate(guess):
        if colors[i] is not GuessColor.GREEN and remaining[g] > 0:
            colors[i] = GuessColor.YELLOW
            remaining[g] -= 1

    return colors
