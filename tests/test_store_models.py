"""Problem model serialization tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from saitama.store.models import Problem, parse_problems, problems_to_json


def test_payload_omits_zero_valued_optional_fields() -> None:
    problem = Problem(id="LC1", name="Two Sum", tags=[])

    assert problem.to_payload() == {"id": "LC1", "name": "Two Sum", "tags": []}


def test_payload_keeps_populated_fields_in_declared_order() -> None:
    added = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    problem = Problem(
        id="CF4A",
        name="Watermelon",
        tags=["math"],
        date_added=added,
        solve_count=2,
        platform="codeforces",
    )

    payload = problem.to_payload()

    assert list(payload) == ["id", "name", "tags", "date_added", "solve_count", "platform"]
    assert parse_problems(json.dumps([payload]))[0] == problem


def test_null_tags_read_as_empty_list() -> None:
    problems = parse_problems('[{"id": "LC1", "name": "Two Sum", "tags": null}]')

    assert problems[0].tags == []


def test_legacy_zero_timestamp_reads_as_absent() -> None:
    raw = json.dumps(
        [
            {
                "id": "LC1",
                "name": "Two Sum",
                "tags": ["array"],
                "date_added": "0001-01-01T00:00:00Z",
                "last_solved": "0001-01-01T00:00:00Z",
            }
        ]
    )

    problem = parse_problems(raw)[0]

    assert problem.date_added is None
    assert problem.last_solved is None


def test_unknown_keys_are_ignored() -> None:
    problem = parse_problems('[{"id": "LC1", "name": "Two Sum", "rating": 1200}]')[0]

    assert problem.to_payload() == {"id": "LC1", "name": "Two Sum", "tags": []}


def test_json_null_document_is_empty_collection() -> None:
    assert parse_problems("null") == []


def test_non_array_document_is_rejected() -> None:
    with pytest.raises(ValidationError):
        parse_problems('{"id": "LC1", "name": "Two Sum"}')


def test_problems_to_json_uses_two_space_indent() -> None:
    text = problems_to_json([Problem(id="LC1", name="Two Sum", tags=["array"])])

    assert text.startswith('[\n  {\n    "id": "LC1",')
