"""Configuration models describing Saitama settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SaitamaBaseModel(BaseModel):
    """Shared configuration for Saitama settings models."""

    model_config = ConfigDict(extra="forbid")


class StorageSettings(SaitamaBaseModel):
    """Where and how the problem collection is persisted.

    Attributes:
        data_dir: Optional directory used instead of the platform config root.
        data_filename: Name of the canonical data file.
        backup_dirname: Name of the hidden snapshot directory beside the data file.
        max_backups: Number of snapshots kept after each save.
    """

    data_dir: Optional[str] = None
    data_filename: str = "problems.json"
    backup_dirname: str = ".saitama_backups"
    max_backups: int = Field(default=5, ge=1)


class LoggingSettings(SaitamaBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(SaitamaBaseModel):
    """CLI behavior defaults.

    Attributes:
        pick_count: Number of problems `saitama pick` selects by default.
    """

    pick_count: int = Field(default=5, ge=1)


class SaitamaConfig(SaitamaBaseModel):
    """Top-level configuration struct for Saitama.

    Attributes:
        storage: Data file and backup settings.
        logging: Logging configuration.
        cli: CLI defaults.
    """

    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "SaitamaBaseModel",
    "StorageSettings",
    "LoggingSettings",
    "CLIOptions",
    "SaitamaConfig",
]
