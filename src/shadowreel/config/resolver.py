"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import ShadowreelConfig

ENV_PREFIX = "SHADOWREEL__"


def resolve_with_precedence(
    *,
    defaults: ShadowreelConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> ShadowreelConfig:
    """Layer overrides onto ``defaults``: file, then environment, then CLI.

    Keys may be nested mappings or dotted paths (``shadows.resolution``).

    Raises:
        ConfigError: If an override source is malformed or the merged values
            fail validation.
    """
    merged = defaults.model_dump(mode="python")
    layers = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for name, source in layers:
        if source is not None:
            merged = _deep_merge(merged, expand_dotted(source, source_name=name))

    try:
        return ShadowreelConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def env_overrides_from(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``SHADOWREEL__SECTION__KEY`` variables into a nested mapping.

    Values are parsed as YAML literals so ``"180"`` becomes an integer and
    ``"[.mov]"`` a list; unparsable values are kept verbatim.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        segments = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if not segments:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        assign_nested(overrides, segments, value, source_name="environment")
    return overrides


def flatten_for_env(config: ShadowreelConfig) -> Dict[str, str]:
    """Flatten the config into ``SHADOWREEL__SECTION__KEY`` environment mappings."""
    flat: Dict[str, str] = {}

    def _walk(prefix: list[str], value: Any) -> None:
        if isinstance(value, dict):
            for key, child in value.items():
                _walk(prefix + [str(key)], child)
            return
        env_key = ENV_PREFIX + "__".join(part.upper() for part in prefix)
        if isinstance(value, list):
            flat[env_key] = yaml.safe_dump(value, default_flow_style=True).strip()
        else:
            flat[env_key] = "null" if value is None else str(value)

    _walk([], config.model_dump(mode="python"))
    return flat


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Return ``source`` with dotted keys expanded into nested dictionaries."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = expand_dotted(value, source_name=source_name)
        assign_nested(result, key.split("."), value, source_name=source_name)
    return result


def assign_nested(
    target: dict[str, Any],
    path: Iterable[str],
    value: Any,
    *,
    source_name: str = "config",
) -> None:
    """Assign ``value`` at ``path`` inside ``target``, creating parents as needed.

    Raises:
        ConfigError: If a non-mapping value sits where a parent mapping is expected.
    """
    segments = list(path)
    node = target
    for segment in segments[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = node[segment] = {}
        elif not isinstance(existing, dict):
            joined = ".".join(segments)
            raise ConfigError(
                f"{source_name.capitalize()} override for {joined} conflicts with existing value."
            )
        node = existing
    leaf = segments[-1]
    current = node.get(leaf)
    if isinstance(value, MappingABC) and isinstance(current, MappingABC):
        node[leaf] = _deep_merge(current, value)
    else:
        node[leaf] = value


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
    "assign_nested",
    "env_overrides_from",
    "expand_dotted",
    "flatten_for_env",
    "resolve_with_precedence",
]
