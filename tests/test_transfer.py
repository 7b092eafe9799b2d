"""Import and export tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from saitama.store import (
    CorruptStoreError,
    ImportValidationError,
    Problem,
    ProblemStore,
    export_to,
    import_from,
)

ADDED = datetime(2024, 1, 15, 8, 0, 0, tzinfo=timezone.utc)


def _write(path: Path, records: list[dict]) -> Path:
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_export_overwrites_target_without_backup(tmp_path: Path) -> None:
    target = tmp_path / "export.json"
    target.write_text("stale", encoding="utf-8")
    problems = [Problem(id="LC1", name="Two Sum", tags=["array"], date_added=ADDED)]

    export_to(problems, target)

    assert json.loads(target.read_text(encoding="utf-8")) == [
        {"id": "LC1", "name": "Two Sum", "tags": ["array"], "date_added": "2024-01-15T08:00:00Z"}
    ]
    assert [path.name for path in tmp_path.iterdir()] == ["export.json"]


def test_export_then_import_preserves_problems(tmp_path: Path) -> None:
    problems = [
        Problem(id="LC1", name="Two Sum", tags=["array"], date_added=ADDED, solve_count=4),
        Problem(id="CF4A", name="Watermelon", tags=[], date_added=ADDED, notes="parity"),
    ]

    export_to(problems, tmp_path / "export.json")

    assert import_from(tmp_path / "export.json") == problems


def test_import_keeps_records_as_given(tmp_path: Path) -> None:
    path = _write(tmp_path / "in.json", [{"id": "lc1", "name": "Two Sum", "tags": ["Array"]}])

    imported = import_from(path)

    assert imported == [Problem(id="lc1", name="Two Sum", tags=["Array"])]
    assert imported[0].date_added is None


@pytest.mark.parametrize(
    ("records", "index"),
    [
        ([{"id": "LC1", "name": ""}], 0),
        ([{"id": "LC1", "name": "Two Sum"}, {"id": "", "name": "Nameless"}], 1),
        ([{"id": "LC1", "name": "Two Sum"}, {"id": "LC2", "name": "Ok"}, {"id": "LC3"}], 2),
    ],
)
def test_import_rejects_missing_id_or_name(
    tmp_path: Path, records: list[dict], index: int
) -> None:
    path = _write(tmp_path / "in.json", records)

    with pytest.raises(ImportValidationError) as excinfo:
        import_from(path)

    assert excinfo.value.index == index
    assert f"index {index}" in str(excinfo.value)


def test_failed_import_leaves_store_untouched(tmp_path: Path) -> None:
    store = ProblemStore(tmp_path / "data" / "problems.json")
    existing = [Problem(id="LC1", name="Two Sum", tags=[], date_added=ADDED)]
    store.save(existing)
    before = store.data_path.read_bytes()
    path = _write(
        tmp_path / "in.json",
        [{"id": "LC2", "name": "Add Two Numbers"}, {"id": "LC3", "name": ""}],
    )

    with pytest.raises(ImportValidationError):
        import_from(path)

    assert store.data_path.read_bytes() == before
    assert store.load() == existing


def test_import_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(CorruptStoreError):
        import_from(tmp_path / "absent.json")


def test_import_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "in.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(CorruptStoreError):
        import_from(path)


def test_import_non_utf8_bytes_raises_corrupt_store_error(tmp_path: Path) -> None:
    path = tmp_path / "in.json"
    path.write_bytes(b'[{"id":"LC1","name":"\xff\xfe"}]')

    with pytest.raises(CorruptStoreError):
        import_from(path)
