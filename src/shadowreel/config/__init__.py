"""Configuration management for Shadowreel."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import (
    VALID_SHADOW_RESOLUTIONS,
    CLIOptions,
    LayoutSettings,
    LoggingSettings,
    ProjectSettings,
    ShadowreelConfig,
    ShadowSettings,
    ToolSettings,
)
from .resolver import (
    assign_nested,
    env_overrides_from,
    flatten_for_env,
    resolve_with_precedence,
)

DEFAULT_CONFIG_PATH = Path("~/.shadowreel/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # Shadowreel configuration file
    # Manage with `shadowreel config set KEY --value VALUE` or `shadowreel config edit`.
    # Environment variables named SHADOWREEL__SECTION__KEY override these values.
    """
)


class ConfigManager:
    """Read and write the YAML configuration file and resolve overrides."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
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
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> ShadowreelConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted-key overrides with the highest precedence.
            include_env: Whether ``SHADOWREEL__*`` variables are applied.
            ensure_file: Create a default file when none exists.
            env_overrides: Environment mapping to use instead of ``os.environ``.

        Raises:
            ConfigError: If the file or any override is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_data = None
        if include_env:
            env_data = env_overrides_from(env_overrides if env_overrides is not None else self._env)

        return resolve_with_precedence(
            defaults=ShadowreelConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_data or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: ShadowreelConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, ShadowreelConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            self._write_file(ShadowreelConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

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
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )


__all__ = [
    "CLIOptions",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "LayoutSettings",
    "LoggingSettings",
    "ProjectSettings",
    "ShadowSettings",
    "ShadowreelConfig",
    "ToolSettings",
    "VALID_SHADOW_RESOLUTIONS",
    "assign_nested",
    "flatten_for_env",
    "resolve_with_precedence",
]
