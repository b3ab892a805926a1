"""
Duplicate tag detection.

Tags are created freely by authors and by auto-tagging, so near-identical
names ("javascript", "java-script", "JavaScript ") accumulate over time. This
module scores every pair of tag names by normalized edit distance and reports
the pairs similar enough to be worth merging.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple, TypeVar

DEFAULT_THRESHOLD = 0.28
DEFAULT_LIMIT = 50

T = TypeVar("T")


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (unit cost insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def name_similarity(a: str, b: str) -> float:
    """Similarity in [0, 1] of two names, ignoring case."""
    left = (a or "").lower()
    right = (b or "").lower()
    if left == right:
        return 1.0
    longest = max(len(left), len(right))
    return 1 - levenshtein(left, right) / longest


def find_duplicate_pairs(
    items: Sequence[T],
    threshold: float = DEFAULT_THRESHOLD,
    limit: int = DEFAULT_LIMIT,
    name_of: Callable[[T], str] = lambda item: getattr(item, "name"),
) -> List[Tuple[T, T, float]]:
    """
    Find pairs of items whose names are likely duplicates.

    Every unordered pair is compared once in input order. Pairs scoring at or
    above ``threshold`` are kept with the score rounded to two decimals, then
    sorted by score (highest first, ties in comparison order) and cut to
    ``limit``.

    Args:
        items: Objects to compare, typically tag entities
        threshold: Minimum similarity in [0, 1]
        limit: Maximum number of pairs returned
        name_of: Accessor for the compared name

    Returns:
        ``(a, b, score)`` tuples

    Raises:
        ValueError: If ``threshold`` is outside [0, 1]
    """
    if not 0 <= threshold <= 1:
        raise ValueError(f"threshold must be between 0 and 1, got {threshold}")

    names = [name_of(item) for item in items]
    pairs: List[Tuple[T, T, float]] = []
    for i in range(len(items)):
        for j in range(i + 1, len(items)):
            score = name_similarity(names[i], names[j])
            if score >= threshold:
                pairs.append((items[i], items[j], round(score, 2)))

    pairs.sort(key=lambda pair: pair[2], reverse=True)
    return pairs[:limit]
