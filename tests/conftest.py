"""Shared fixtures for Shadowreel tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from helpers import FakeRunner

from shadowreel.shadows import ProjectPaths


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def project(tmp_path: Path) -> ProjectPaths:
    """Project rooted in a temporary directory with all four tier directories."""
    paths = ProjectPaths.from_root(tmp_path / "project")
    for directory in (
        paths.masters_active,
        paths.masters_archived,
        paths.shadows_active,
        paths.shadows_archived,
    ):
        directory.mkdir(parents=True)
    return paths
