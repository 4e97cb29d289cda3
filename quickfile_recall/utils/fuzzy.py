"""Fuzzy matching for picker search."""

from __future__ import annotations

from typing import Iterable, Optional


def fuzzy_score(query: str, text: str) -> Optional[int]:
    """Score text against query as a case-insensitive subsequence match.

    Every non-space character of query must appear in text in order.
    Consecutive matches and matches at word starts score higher.

    Returns:
        The score, or None when text does not match. An empty query matches
        everything with score 0.
    """
    needle = "".join(query.lower().split())
    if not needle:
        return 0

    haystack = text.lower()
    score = 0
    position = 0
    previous = -2
    for char in needle:
        found = haystack.find(char, position)
        if found < 0:
            return None
        if found == previous + 1:
            score += 3
        if found == 0 or not haystack[found - 1].isalnum():
            score += 2
        score += 1
        previous = found
        position = found + 1
    return score


def fuzzy_match(query: str, fields: Iterable[str]) -> Optional[int]:
    """Best score of query over several fields, or None if none match"""
    scores = [score for score in (fuzzy_score(query, field) for field in fields) if score is not None]
    return max(scores) if scores else None
