"""Timestamped snapshots of the data file with bounded retention."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from .errors import BackupError

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_BACKUPS = 5
BACKUP_SUFFIX = ".json"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BackupManager:
    """Create snapshots of the data file and prune the oldest ones."""

    def __init__(
        self,
        backup_dir: Path,
        *,
        max_backups: int = DEFAULT_MAX_BACKUPS,
        prefix: str = "problems",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            backup_dir: Directory that receives snapshot files.
            max_backups: Number of snapshots retained after pruning.
            prefix: Filename prefix placed before the embedded timestamp.
            clock: Callable returning the current time; defaults to UTC now.
        """
        if max_backups < 1:
            raise ValueError("max_backups must be at least 1")
        self._backup_dir = Path(backup_dir)
        self._max_backups = max_backups
        self._prefix = prefix
        self._clock = clock or _utcnow
        self._pattern = re.compile(
            rf"^{re.escape(prefix)}_(\d{{8}}_\d{{6}})(?:_(\d+))?{re.escape(BACKUP_SUFFIX)}$"
        )

    @property
    def backup_dir(self) -> Path:
        """Return the directory holding snapshot files."""
        return self._backup_dir

    @property
    def max_backups(self) -> int:
        """Return the retention limit."""
        return self._max_backups

    def create_backup(self, data_path: Path) -> Path | None:
        """Copy the data file into the backup directory and prune old snapshots.

        Args:
            data_path: Canonical data file to snapshot.

        Returns:
            Path | None: Path of the new snapshot, or None when there was nothing to copy.

        Raises:
            BackupError: If the snapshot cannot be read, written, or the directory listed.
        """
        data_path = Path(data_path)
        if not data_path.exists():
            return None

        try:
            self._backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BackupError(f"Failed to create backup directory: {exc}") from exc

        try:
            data = data_path.read_bytes()
        except OSError as exc:
            raise BackupError(f"Failed to read original file for backup: {exc}") from exc

        try:
            target = self._next_snapshot_path()
            target.write_bytes(data)
        except OSError as exc:
            raise BackupError(f"Failed to write backup file: {exc}") from exc

        LOGGER.debug("Wrote backup %s", target)
        self.prune()
        return target

    def list_backups(self) -> list[Path]:
        """Return snapshot files ordered from oldest to newest.

        Ordering uses the timestamp embedded in each filename, never the
        order in which the filesystem lists directory entries.

        Raises:
            BackupError: If the backup directory cannot be listed.
        """
        if not self._backup_dir.exists():
            return []
        try:
            entries = list(self._backup_dir.iterdir())
        except OSError as exc:
            raise BackupError(f"Failed to list backup directory: {exc}") from exc

        snapshots = [
            entry for entry in entries if entry.suffix == BACKUP_SUFFIX and entry.is_file()
        ]
        return sorted(snapshots, key=self._sort_key)

    def prune(self) -> list[Path]:
        """Delete the oldest snapshots beyond the retention limit.

        Returns:
            list[Path]: Snapshots that were removed.
        """
        snapshots = self.list_backups()
        excess = len(snapshots) - self._max_backups
        if excess <= 0:
            return []

        removed: list[Path] = []
        for snapshot in snapshots[:excess]:
            try:
                snapshot.unlink()
            except OSError as exc:
                LOGGER.warning("Could not remove old backup %s: %s", snapshot.name, exc)
                continue
            removed.append(snapshot)
        if removed:
            LOGGER.debug("Pruned %d old backup(s)", len(removed))
        return removed

    def _next_snapshot_path(self) -> Path:
        stamp = self._clock().strftime(TIMESTAMP_FORMAT)
        # Same-second saves get the next sequence suffix so they sort after earlier ones.
        taken = [
            sequence
            for existing_stamp, sequence, _ in map(self._sort_key, self._backup_dir.iterdir())
            if existing_stamp == stamp
        ]
        if not taken:
            return self._backup_dir / f"{self._prefix}_{stamp}{BACKUP_SUFFIX}"
        return self._backup_dir / f"{self._prefix}_{stamp}_{max(taken) + 1:02d}{BACKUP_SUFFIX}"

    def _sort_key(self, path: Path) -> tuple[str, int, str]:
        match = self._pattern.match(path.name)
        if match is None:
            return ("", 0, path.name)
        return (match.group(1), int(match.group(2) or 0), path.name)


__all__ = ["BackupManager", "DEFAULT_MAX_BACKUPS", "TIMESTAMP_FORMAT"]
