from __future__ import annotations


def participant_pair(a: int, b: int) -> tuple[int, int]:
    """Canonical (low, high) key for an unordered pair of users.

    A conversation row stores its two participants in this order, so one
    pair of users always maps to exactly one row.
    """
    return (a, b) if a <= b else (b, a)
