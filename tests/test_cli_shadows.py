"""CLI tests for shadow commands."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner
from helpers import FakeRunner, touch

from shadowreel.cli import cli
from shadowreel.shadows import ProjectPaths


def _env_with_home(tmp_path: Path) -> dict[str, str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("SHADOWREEL__")}
    env["HOME"] = str(tmp_path / "home")
    return env


@pytest.fixture
def installed_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr("shadowreel.shadows.transcoder.SubprocessRunner", lambda: runner)
    return runner


def test_status_reports_counts_as_json(tmp_path: Path, project: ProjectPaths) -> None:
    touch(project.masters_active / "01-1-intro.mov")
    touch(project.masters_archived / "00-1-old.mov")
    touch(project.shadows_archived / "00-1-old.mp4")

    result = CliRunner().invoke(
        cli, ["status", str(project.root), "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["counts"] == {"masters": 2, "shadows": 1, "missing": 1}


def test_status_renders_table(tmp_path: Path, project: ProjectPaths) -> None:
    touch(project.masters_active / "01-1-intro.mov")

    result = CliRunner().invoke(cli, ["status", str(project.root)], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "Masters" in result.output
    assert "Missing" in result.output


def test_generate_creates_shadows_and_prints_summary(
    tmp_path: Path, project: ProjectPaths, installed_runner: FakeRunner
) -> None:
    touch(project.masters_active / "01-1-intro.mov")

    result = CliRunner().invoke(cli, ["generate", str(project.root)], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "[1/1]" in result.output
    for metric in ("created=1", "skipped=0", "errors=0"):
        assert metric in result.output
    assert (project.shadows_active / "01-1-intro.mp4").exists()


def test_generate_json_is_idempotent(
    tmp_path: Path, project: ProjectPaths, installed_runner: FakeRunner
) -> None:
    touch(project.masters_active / "01-1-intro.mov")
    env = _env_with_home(tmp_path)
    runner = CliRunner()

    runner.invoke(cli, ["generate", str(project.root), "--json"], env=env)
    result = runner.invoke(cli, ["generate", str(project.root), "--json"], env=env)

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert (payload["created"], payload["skipped"], payload["errors"]) == (0, 1, [])


def test_generate_rejects_json_with_quiet(tmp_path: Path, project: ProjectPaths) -> None:
    result = CliRunner().invoke(
        cli, ["generate", str(project.root), "--json", "--quiet"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0
    assert "--json cannot be combined with --quiet" in result.output


def test_generate_all_requires_root(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["generate-all", "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "missing_root"


def test_generate_all_uses_configured_root(tmp_path: Path, installed_runner: FakeRunner) -> None:
    root = tmp_path / "projects"
    touch(ProjectPaths.from_root(root / "alpha").masters_active / "a.mov")
    env = _env_with_home(tmp_path)
    env["SHADOWREEL__PROJECTS__ROOT"] = str(root)

    result = CliRunner().invoke(cli, ["generate-all", "--summary"], env=env)

    assert result.exit_code == 0
    assert "projects=1" in result.output
    assert "created=1" in result.output
    assert (root / "alpha" / "shadows" / "active" / "a.mp4").exists()


def test_move_then_missing_rename_is_not_an_error(tmp_path: Path, project: ProjectPaths) -> None:
    touch(project.shadows_active / "clip.mp4")
    env = _env_with_home(tmp_path)
    runner = CliRunner()

    moved = runner.invoke(
        cli, ["move", str(project.root), "clip", "--from", "active", "--to", "archived"], env=env
    )
    renamed = runner.invoke(cli, ["rename", str(project.root), "clip", "clip-v2"], env=env)

    assert moved.exit_code == 0
    assert "Moved shadow for clip" in moved.output
    assert (project.shadows_archived / "clip.mp4").exists()
    assert renamed.exit_code == 0
    assert "nothing to do" in renamed.output


def test_delete_reports_json_result(tmp_path: Path, project: ProjectPaths) -> None:
    touch(project.shadows_archived / "clip.mp4")

    result = CliRunner().invoke(
        cli,
        ["delete", str(project.root), "clip", "--tier", "archived", "--json"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["success"] is True
    assert payload["action"] == "delete"
    assert not (project.shadows_archived / "clip.mp4").exists()


def test_index_lists_recordings_as_json(tmp_path: Path, project: ProjectPaths) -> None:
    touch(project.masters_active / "a.mov")
    touch(project.shadows_active / "a.mp4")
    touch(project.shadows_active / "b.mp4")

    result = CliRunner().invoke(
        cli,
        ["index", str(project.root), "--tier", "active", "--json"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert [(entry["base_name"], entry["kind"]) for entry in payload["active"]] == [
        ("a", "real"),
        ("b", "shadow"),
    ]
    assert "archived" not in payload
