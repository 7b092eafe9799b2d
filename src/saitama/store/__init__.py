"""Durable local storage for the problem collection."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from contextlib import suppress
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Sequence

from pydantic import ValidationError

from .backup import DEFAULT_MAX_BACKUPS, BackupManager
from .errors import (
    BackupError,
    CorruptStoreError,
    DirectoryUnavailableError,
    ImportValidationError,
    StoreError,
    StoreWriteError,
)
from .lookup import find_by_id
from .models import Problem, parse_problems, problems_to_json
from .paths import (
    DEFAULT_APP_NAME,
    DEFAULT_BACKUP_DIRNAME,
    DEFAULT_DATA_FILENAME,
    resolve_data_path,
)
from .transfer import export_to, import_from

if TYPE_CHECKING:
    from saitama.config.models import SaitamaConfig

LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProblemStore:
    """Load, migrate, and atomically persist the problem collection."""

    def __init__(
        self,
        data_path: Path | None = None,
        *,
        backup_dir: Path | None = None,
        max_backups: int = DEFAULT_MAX_BACKUPS,
        clock: Callable[[], datetime] | None = None,
        config_root: Path | None = None,
        app_name: str = DEFAULT_APP_NAME,
        data_filename: str = DEFAULT_DATA_FILENAME,
        backup_dirname: str = DEFAULT_BACKUP_DIRNAME,
    ) -> None:
        """Initialize the store.

        Locations are resolved lazily so a missing config directory surfaces
        as an error from the operation that needs it.

        Args:
            data_path: Explicit canonical data file; resolved from the user config dir if None.
            backup_dir: Explicit snapshot directory; defaults to a hidden sibling of the data file.
            max_backups: Number of snapshots retained after each save.
            clock: Callable returning the current time, used for migration and snapshot names.
            config_root: Directory to use instead of the platform config root.
            app_name: Application subdirectory under the config root.
            data_filename: Name of the canonical data file.
            backup_dirname: Name of the snapshot directory beside the data file.
        """
        self._explicit_data_path = Path(data_path) if data_path is not None else None
        self._explicit_backup_dir = Path(backup_dir) if backup_dir is not None else None
        self._max_backups = max_backups
        self._clock = clock or _utcnow
        self._config_root = config_root
        self._app_name = app_name
        self._data_filename = data_filename
        self._backup_dirname = backup_dirname
        self._data_path: Path | None = None
        self._backups: BackupManager | None = None

    @classmethod
    def from_config(
        cls,
        config: "SaitamaConfig",
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> "ProblemStore":
        """Build a store from the ``storage`` section of the configuration.

        Args:
            config: Resolved configuration.
            clock: Optional clock override.

        Returns:
            ProblemStore: Store configured with the user's storage settings.
        """
        storage = config.storage
        return cls(
            config_root=Path(storage.data_dir).expanduser() if storage.data_dir else None,
            data_filename=storage.data_filename,
            backup_dirname=storage.backup_dirname,
            max_backups=storage.max_backups,
            clock=clock,
        )

    @property
    def data_path(self) -> Path:
        """Return the canonical data file path, creating its directory if needed.

        Raises:
            DirectoryUnavailableError: If the directory cannot be determined or created.
        """
        if self._data_path is not None:
            return self._data_path

        if self._explicit_data_path is None:
            path = resolve_data_path(
                self._app_name,
                config_root=self._config_root,
                data_filename=self._data_filename,
            )
        else:
            path = self._explicit_data_path
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise DirectoryUnavailableError(
                    f"Could not create data directory {path.parent}: {exc}"
                ) from exc
        self._data_path = path
        return path

    @property
    def backup_dir(self) -> Path:
        """Return the snapshot directory."""
        if self._explicit_backup_dir is not None:
            return self._explicit_backup_dir
        return self.data_path.parent / self._backup_dirname

    @property
    def backups(self) -> BackupManager:
        """Return the backup manager bound to this store's snapshot directory."""
        if self._backups is None:
            self._backups = BackupManager(
                self.backup_dir,
                max_backups=self._max_backups,
                prefix=Path(self._data_filename).stem,
                clock=self._clock,
            )
        return self._backups

    def load(self) -> list[Problem]:
        """Load the collection, filling in missing ``date_added`` values.

        A missing or empty data file yields an empty collection. When any
        record had to be stamped the migrated collection is written back once;
        a failure to do so is logged and the in-memory result is still returned.

        Returns:
            list[Problem]: Problems in stored order.

        Raises:
            DirectoryUnavailableError: If the data directory is unavailable.
            StoreError: If the data file exists but cannot be read.
            CorruptStoreError: If the data file is not a JSON array of problems.
        """
        path = self.data_path
        if not path.exists():
            return []

        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise StoreError(f"Failed to read problems file: {exc}") from exc

        if not raw:
            return []

        try:
            problems = parse_problems(raw)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise CorruptStoreError(f"Failed to parse problems file {path}: {exc}") from exc

        now = self._clock()
        migrated = 0
        for problem in problems:
            if problem.date_added is None:
                problem.date_added = now
                migrated += 1

        if migrated:
            LOGGER.info("Stamped date_added on %d legacy problem(s)", migrated)
            try:
                self.save(problems)
            except StoreError as exc:
                LOGGER.warning("Could not persist migrated problems: %s", exc)

        return problems

    def save(self, problems: Sequence[Problem]) -> None:
        """Persist the collection atomically after snapshotting the current file.

        Args:
            problems: Full collection to write.

        Raises:
            DirectoryUnavailableError: If the data directory is unavailable.
            StoreWriteError: If the new file cannot be written or moved into place.
        """
        path = self.data_path

        try:
            self.backups.create_backup(path)
        except BackupError as exc:
            LOGGER.warning("Failed to create backup: %s", exc)

        self._write_atomic(path, problems_to_json(problems))
        LOGGER.debug("Saved %d problem(s) to %s", len(problems), path)

    def _write_atomic(self, path: Path, payload: str) -> None:
        # Same-directory temp file: the replace below is the atomicity boundary.
        try:
            fd, temp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise StoreWriteError(f"Failed to create temporary file: {exc}") from exc

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            if path.exists():
                # Keep the permissions of the file being replaced.
                os.chmod(temp_path, stat.S_IMODE(path.stat().st_mode))
        except OSError as exc:
            with suppress(OSError):
                temp_path.unlink()
            raise StoreWriteError(f"Failed to write temporary file: {exc}") from exc

        try:
            os.replace(temp_path, path)
        except OSError as exc:
            with suppress(OSError):
                temp_path.unlink()
            raise StoreWriteError(f"Failed to replace problems file: {exc}") from exc


__all__ = [
    "BackupError",
    "BackupManager",
    "CorruptStoreError",
    "DirectoryUnavailableError",
    "ImportValidationError",
    "Problem",
    "ProblemStore",
    "StoreError",
    "StoreWriteError",
    "export_to",
    "find_by_id",
    "import_from",
]
