"""Tests for duration probing."""

from pathlib import Path

import pytest
from helpers import FakeRunner

from shadowreel.shadows.probe import probe_args, probe_duration


def test_probe_duration_parses_seconds(tmp_path: Path) -> None:
    runner = FakeRunner(duration="83.456")

    assert probe_duration(tmp_path / "clip.mov", runner=runner) == pytest.approx(83.456)
    assert runner.calls[0][0] == "ffprobe"
    assert runner.calls[0][-1] == str(tmp_path / "clip.mov")


@pytest.mark.parametrize("output", ["N/A", "", "nan", "-3"])
def test_probe_duration_unparsable_output_is_unknown(tmp_path: Path, output: str) -> None:
    assert probe_duration(tmp_path / "clip.mov", runner=FakeRunner(duration=output)) is None


def test_probe_duration_non_zero_exit_is_unknown(tmp_path: Path) -> None:
    runner = FakeRunner(duration="12.0", probe_code=1)

    assert probe_duration(tmp_path / "clip.mov", runner=runner) is None


def test_probe_duration_missing_executable_is_unknown(tmp_path: Path) -> None:
    missing = str(tmp_path / "no-such-ffprobe")

    assert probe_duration(tmp_path / "clip.mov", ffprobe=missing) is None


def test_probe_args_request_only_container_duration() -> None:
    args = probe_args(Path("/media/clip.mov"), ffprobe="/opt/bin/ffprobe")

    assert args[0] == "/opt/bin/ffprobe"
    assert "format=duration" in args
    assert "default=noprint_wrappers=1:nokey=1" in args
