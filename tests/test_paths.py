"""Path resolution tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from saitama.store.errors import DirectoryUnavailableError
from saitama.store.paths import resolve_app_dir, resolve_backup_dir, resolve_data_path


def test_resolve_app_dir_creates_directory_under_root(tmp_path: Path) -> None:
    directory = resolve_app_dir(config_root=tmp_path / "config")

    assert directory == tmp_path / "config" / "saitama"
    assert directory.is_dir()


def test_data_path_and_backup_dir_share_the_app_directory(tmp_path: Path) -> None:
    data_path = resolve_data_path(config_root=tmp_path)
    backup_dir = resolve_backup_dir(config_root=tmp_path)

    assert data_path == tmp_path / "saitama" / "problems.json"
    assert backup_dir == tmp_path / "saitama" / ".saitama_backups"
    assert not data_path.exists()
    assert not backup_dir.exists()


@pytest.mark.skipif(sys.platform != "linux", reason="XDG lookup applies to Linux only")
def test_default_root_follows_xdg_config_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    assert resolve_data_path() == tmp_path / "xdg" / "saitama" / "problems.json"


def test_default_root_is_independent_of_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()

    monkeypatch.chdir(first)
    from_first = resolve_data_path()
    monkeypatch.chdir(second)
    from_second = resolve_data_path()

    assert from_first == from_second
    assert from_first.is_absolute()


def test_uncreatable_directory_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(DirectoryUnavailableError):
        resolve_app_dir(config_root=blocker)


def test_relative_root_is_rejected() -> None:
    with pytest.raises(DirectoryUnavailableError):
        resolve_app_dir(config_root=Path("relative-root"))
