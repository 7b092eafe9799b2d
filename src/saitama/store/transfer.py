"""Import and export problem collections at arbitrary paths."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from .errors import CorruptStoreError, ImportValidationError, StoreWriteError
from .models import Problem, parse_problems, problems_to_json

LOGGER = logging.getLogger(__name__)


def export_to(problems: Iterable[Problem], path: Path) -> None:
    """Write problems to ``path``, replacing any existing file.

    Export targets are not the canonical store, so no backup is taken.

    Args:
        problems: Problems to serialize.
        path: Destination file.

    Raises:
        StoreWriteError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.write_text(problems_to_json(problems), encoding="utf-8")
    except OSError as exc:
        raise StoreWriteError(f"Failed to write export file: {exc}") from exc
    LOGGER.info("Exported problems to %s", path)


def import_from(path: Path) -> list[Problem]:
    """Read and validate a collection of problems from ``path``.

    Every record must carry a non-empty id and name. The first offending
    record aborts the whole import so callers never see a partial list.
    Merging into the canonical store is left to the caller.

    Args:
        path: File to import.

    Returns:
        list[Problem]: Imported problems in file order.

    Raises:
        CorruptStoreError: If the file cannot be read or parsed.
        ImportValidationError: If a record lacks an id or name.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise CorruptStoreError(f"Failed to read import file: {exc}") from exc

    try:
        problems = parse_problems(raw)
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        raise CorruptStoreError(f"Failed to parse import file: {exc}") from exc

    for index, problem in enumerate(problems):
        if not problem.id or not problem.name:
            raise ImportValidationError(index)
    return problems


__all__ = ["export_to", "import_from"]
