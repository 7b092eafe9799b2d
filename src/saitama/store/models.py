"""Problem records and their on-disk JSON representation."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, TypeAdapter, field_validator

# Keys written even when empty; every other field is omitted at its zero value.
ALWAYS_SERIALIZED = ("id", "name", "tags")


class Problem(BaseModel):
    """A tracked coding problem.

    Attributes:
        id: Identifier, unique within a collection by caller convention.
        name: Display name.
        tags: Lowercase tags in caller-determined order.
        date_added: When the problem was added; filled in on load if missing.
        last_solved: When the problem was last marked as solved.
        solve_count: Number of times the problem was solved.
        difficulty: Free-form difficulty label such as ``easy`` or ``hard``.
        platform: Source platform such as ``leetcode``.
        url: Link to the problem statement.
        notes: Free-text notes.
    """

    id: str = ""
    name: str = ""
    tags: List[str] = Field(default_factory=list)
    date_added: Optional[datetime] = None
    last_solved: Optional[datetime] = None
    solve_count: int = 0
    difficulty: str = ""
    platform: str = ""
    url: str = ""
    notes: str = ""

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("date_added", "last_solved")
    @classmethod
    def _legacy_zero_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Older data files carry 0001-01-01T00:00:00Z for "never set".
        if value is not None and value.year == 1:
            return None
        return value

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready mapping for this problem.

        Returns:
            dict[str, Any]: Serialized fields with zero-valued optional fields omitted.
        """
        data = self.model_dump(mode="json")
        return {
            key: value
            for key, value in data.items()
            if key in ALWAYS_SERIALIZED or value not in (None, "", 0)
        }


_PROBLEM_LIST = TypeAdapter(List[Problem])


def parse_problems(raw: str | bytes) -> list[Problem]:
    """Parse a JSON array of problems.

    Args:
        raw: Encoded JSON document.

    Returns:
        list[Problem]: Problems in document order.

    Raises:
        json.JSONDecodeError: If the document is not valid JSON.
        pydantic.ValidationError: If the document is not an array of problem objects.
    """
    data = json.loads(raw)
    if data is None:
        return []
    return _PROBLEM_LIST.validate_python(data)


def problems_to_json(problems: Iterable[Problem]) -> str:
    """Serialize problems as a two-space indented JSON array."""
    return json.dumps([problem.to_payload() for problem in problems], indent=2, ensure_ascii=False)


__all__ = ["ALWAYS_SERIALIZED", "Problem", "parse_problems", "problems_to_json"]
