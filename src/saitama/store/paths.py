"""Locate the per-user directory that holds the problem data file."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .errors import DirectoryUnavailableError

LOGGER = logging.getLogger(__name__)

DEFAULT_APP_NAME = "saitama"
DEFAULT_DATA_FILENAME = "problems.json"
DEFAULT_BACKUP_DIRNAME = ".saitama_backups"


def resolve_app_dir(app_name: str = DEFAULT_APP_NAME, *, config_root: Path | None = None) -> Path:
    """Return the application's configuration directory, creating it if needed.

    The default location comes from ``click.get_app_dir`` so data lands in the
    platform's per-user configuration area instead of the working directory.

    Args:
        app_name: Name of the application subdirectory.
        config_root: Optional directory to use instead of the platform default.

    Returns:
        Path: Absolute path to the application directory.

    Raises:
        DirectoryUnavailableError: If the directory cannot be determined or created.
    """
    if config_root is not None:
        directory = Path(config_root).expanduser() / app_name
    else:
        directory = Path(click.get_app_dir(app_name))

    if not directory.is_absolute():
        raise DirectoryUnavailableError(
            f"Could not determine user config directory (resolved to {directory})"
        )

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryUnavailableError(
            f"Could not create app config directory {directory}: {exc}"
        ) from exc

    LOGGER.debug("Using application directory %s", directory)
    return directory


def resolve_data_path(
    app_name: str = DEFAULT_APP_NAME,
    *,
    config_root: Path | None = None,
    data_filename: str = DEFAULT_DATA_FILENAME,
) -> Path:
    """Return the canonical data file path inside the application directory."""
    return resolve_app_dir(app_name, config_root=config_root) / data_filename


def resolve_backup_dir(
    app_name: str = DEFAULT_APP_NAME,
    *,
    config_root: Path | None = None,
    backup_dirname: str = DEFAULT_BACKUP_DIRNAME,
) -> Path:
    """Return the hidden snapshot directory that sits beside the data file.

    The directory itself is created lazily by the backup manager.
    """
    return resolve_app_dir(app_name, config_root=config_root) / backup_dirname


__all__ = [
    "DEFAULT_APP_NAME",
    "DEFAULT_BACKUP_DIRNAME",
    "DEFAULT_DATA_FILENAME",
    "resolve_app_dir",
    "resolve_backup_dir",
    "resolve_data_path",
]
