"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import SaitamaConfig

ENV_PREFIX = "SAITAMA__"


def resolve_with_precedence(
    *,
    defaults: SaitamaConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> SaitamaConfig:
    """Merge configuration sources: defaults < file < environment < CLI.

    Override keys may be nested mappings or dotted paths such as
    ``storage.max_backups``.

    Raises:
        ConfigError: If an override is malformed or the merged values fail validation.
    """
    merged = defaults.model_dump(mode="python")
    for source_name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is not None:
            merged = _deep_merge(merged, _expand_dotted(source, source_name))

    try:
        return SaitamaConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def parse_env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``SAITAMA__SECTION__KEY`` variables into a nested mapping.

    Values are parsed as YAML scalars so ``"7"`` becomes an integer.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        segments = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not segments:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        set_nested(overrides, segments, value)
    return overrides


def set_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at ``path`` inside ``target``, creating mappings as needed.

    Raises:
        ConfigError: If an intermediate segment already holds a non-mapping value.
    """
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot assign {'.'.join(path)}; {segment} is not a section.")
        node = child
    node[path[-1]] = value


def _expand_dotted(source: Mapping[str, Any], source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _expand_dotted(value, source_name)
        nested: dict[str, Any] = {}
        set_nested(nested, key.split("."), value)
        expanded = _deep_merge(expanded, nested)
    return expanded


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, MappingABC) and isinstance(merged.get(key), MappingABC):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = [
    "ENV_PREFIX",
    "parse_env_overrides",
    "resolve_with_precedence",
    "set_nested",
]
