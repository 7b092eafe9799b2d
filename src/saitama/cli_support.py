"""Collection helpers shared by Saitama CLI commands."""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from saitama.store.models import Problem

DEFAULT_PICK_COUNT = 5


@dataclass(frozen=True)
class CollectionStats:
    """Summary numbers for `saitama stats`.

    Attributes:
        total: Number of problems.
        unique_tags: Number of distinct tags.
        average_tags: Mean tag count per problem.
    """

    total: int
    unique_tags: int
    average_tags: float


def parse_tags(raw: str | None) -> list[str]:
    """Split a comma-separated tag string into cleaned, lowercase tags.

    Args:
        raw: User-provided tag string.

    Returns:
        list[str]: Tags in input order with blanks dropped.
    """
    if not raw:
        return []
    return [tag.strip().lower() for tag in raw.split(",") if tag.strip()]


def merge_imported(
    current: Sequence[Problem],
    imported: Iterable[Problem],
) -> tuple[list[Problem], int]:
    """Append imported problems whose ids are not already present.

    Args:
        current: Problems already in the store.
        imported: Problems read from an import file.

    Returns:
        tuple[list[Problem], int]: The merged collection and the number of problems added.
    """
    seen = {problem.id for problem in current}
    merged = list(current)
    added = 0
    for problem in imported:
        if problem.id in seen:
            continue
        seen.add(problem.id)
        merged.append(problem)
        added += 1
    return merged, added


def pick_random(
    problems: Sequence[Problem],
    count: int = DEFAULT_PICK_COUNT,
    *,
    rng: random.Random | None = None,
) -> list[Problem]:
    """Return up to ``count`` distinct problems in random order."""
    if count <= 0:
        count = DEFAULT_PICK_COUNT
    chooser = rng or random.Random()
    return chooser.sample(list(problems), min(count, len(problems)))


def search_problems(problems: Iterable[Problem], query: str) -> list[Problem]:
    """Return problems whose name or any tag contains ``query``, ignoring case."""
    needle = query.lower()
    return [
        problem
        for problem in problems
        if needle in problem.name.lower() or any(needle in tag.lower() for tag in problem.tags)
    ]


def tag_counts(problems: Iterable[Problem]) -> list[tuple[str, int]]:
    """Count tag usage, most used first and alphabetical within ties."""
    counter = Counter(tag for problem in problems for tag in problem.tags)
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))


def collection_stats(problems: Sequence[Problem]) -> CollectionStats:
    """Summarize collection size and tag usage.

    Args:
        problems: Problems to summarize.

    Returns:
        CollectionStats: Totals, with an average of 0.0 for an empty collection.
    """
    total_tags = sum(len(problem.tags) for problem in problems)
    unique = {tag for problem in problems for tag in problem.tags}
    average = total_tags / len(problems) if problems else 0.0
    return CollectionStats(total=len(problems), unique_tags=len(unique), average_tags=average)


__all__ = [
    "CollectionStats",
    "DEFAULT_PICK_COUNT",
    "collection_stats",
    "merge_imported",
    "parse_tags",
    "pick_random",
    "search_problems",
    "tag_counts",
]
