"""Lookup helper tests."""

from __future__ import annotations

from saitama.store import Problem, find_by_id

PROBLEMS = [
    Problem(id="LC1", name="Two Sum"),
    Problem(id="lc1", name="Lowercase twin"),
    Problem(id="CF4A", name="Watermelon"),
    Problem(id="CF4A", name="Duplicate"),
]


def test_find_by_id_returns_problem_and_index() -> None:
    problem, index = find_by_id(PROBLEMS, "LC1")

    assert problem is PROBLEMS[0]
    assert index == 0


def test_find_by_id_is_case_sensitive() -> None:
    problem, index = find_by_id(PROBLEMS, "lc1")

    assert problem is PROBLEMS[1]
    assert index == 1


def test_find_by_id_returns_first_duplicate() -> None:
    problem, index = find_by_id(PROBLEMS, "CF4A")

    assert problem is not None
    assert problem.name == "Watermelon"
    assert index == 2


def test_find_by_id_missing() -> None:
    assert find_by_id(PROBLEMS, "LC999") == (None, -1)
    assert find_by_id([], "LC1") == (None, -1)
