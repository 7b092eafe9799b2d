"""Identifier lookups within an in-memory collection."""

from __future__ import annotations

from typing import Sequence

from .models import Problem


def find_by_id(problems: Sequence[Problem], problem_id: str) -> tuple[Problem | None, int]:
    """Return the first problem whose id equals ``problem_id`` and its index.

    Comparison is exact; callers normalize case beforehand if they need to.

    Args:
        problems: Collection to scan.
        problem_id: Identifier to look for.

    Returns:
        tuple[Problem | None, int]: The matching problem and its position, or ``(None, -1)``.
    """
    for index, problem in enumerate(problems):
        if problem.id == problem_id:
            return problem, index
    return None, -1


__all__ = ["find_by_id"]
