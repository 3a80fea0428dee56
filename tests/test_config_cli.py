"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from shadowreel.cli import cli
from shadowreel.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".shadowreel" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "view", "--no-env"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "shadows:" in result.output
    assert _config_path(tmp_path).exists()


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "shadows.resolution", "--value", "160"], env=env)

    assert result.exit_code == 0
    assert "160" in result.output
    assert "Updated shadows.resolution" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.shadows.resolution == 160


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", "shadows.resolution", "--value", "1080"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output


def test_config_edit_applies_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    manager = ConfigManager(config_path=_config_path(tmp_path))
    manager.ensure_exists()

    def _mock_edit(text: str, **_: Any) -> str:
        return text.replace("crf: 28", "crf: 23")

    monkeypatch.setattr("shadowreel.cli.click.edit", _mock_edit)

    result = runner.invoke(cli, ["config", "edit"], env=env)

    assert result.exit_code == 0
    assert "updated" in result.output.lower()
    assert manager.load(include_env=False).shadows.crf == 23
