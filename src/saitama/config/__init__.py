"""Configuration management for Saitama."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import click
import yaml

from .exceptions import ConfigError
from .models import SaitamaConfig
from .resolver import (
    ENV_PREFIX,
    parse_env_overrides,
    resolve_with_precedence,
    set_nested,
)

CONFIG_FILENAME = "config.yaml"
_CONFIG_HEADER = textwrap.dedent(
    """\
    # Saitama configuration file
    # Generated automatically; manage via `saitama config set KEY --value VALUE`.
    """
)


def default_config_path() -> Path:
    """Return the configuration file path inside the per-user app directory."""
    return Path(click.get_app_dir("saitama")) / CONFIG_FILENAME


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or default_config_path()).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> SaitamaConfig:
        """Load configuration data from disk, applying precedence rules.

        A missing file simply contributes no overrides.
        """
        env_data = None
        if include_env:
            env_data = parse_env_overrides(
                env_overrides if env_overrides is not None else self._env
            )

        return resolve_with_precedence(
            defaults=SaitamaConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_data or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: SaitamaConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, SaitamaConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            self._write_file(SaitamaConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")

        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
            self._config_path.write_text(
                _CONFIG_HEADER
                + f"# Last updated: {stamp}\n"
                + yaml.safe_dump(dict(data), sort_keys=False),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigError(f"Failed to write configuration file: {exc}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ConfigManager",
    "ENV_PREFIX",
    "SaitamaConfig",
    "default_config_path",
    "parse_env_overrides",
    "resolve_with_precedence",
    "set_nested",
]
