"""Transcode master recordings into low-resolution shadow files."""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path
from typing import Callable, Optional

from shadowreel.config.models import ShadowSettings, ToolSettings

from .errors import FailureReason, SpawnError
from .layout import base_name, find_media
from .models import ShadowResult
from .probe import probe_duration
from .runner import ProcessRunner, SubprocessRunner

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

_TIME_RE = re.compile(r"time=(\d+):(\d{2}):(\d{2}(?:\.\d+)?)")


def parse_progress_time(line: str) -> Optional[float]:
    """Return the elapsed seconds from an ffmpeg ``time=HH:MM:SS.frac`` token."""
    match = _TIME_RE.search(line)
    if match is None:
        return None
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def progress_percent(elapsed: float, duration: float) -> int:
    """Convert elapsed encode time into a percentage held within 0..99."""
    if duration <= 0:
        return 0
    return max(0, min(99, round(elapsed / duration * 100)))


class ShadowTranscoder:
    """Create shadow files with fixed encoder parameters."""

    def __init__(
        self,
        settings: ShadowSettings | None = None,
        tools: ToolSettings | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.settings = settings or ShadowSettings()
        self.tools = tools or ToolSettings()
        self.runner = runner or SubprocessRunner()

    def shadow_path_for(self, master_path: Path, shadow_dir: Path) -> Path:
        """Return where the shadow of ``master_path`` lives inside ``shadow_dir``."""
        name = base_name(master_path.name, self.settings.master_extensions)
        return shadow_dir / f"{name}{self.settings.shadow_extension}"

    def encode_args(self, master_path: Path, shadow_path: Path) -> list[str]:
        settings = self.settings
        return [
            self.tools.ffmpeg,
            "-i",
            str(master_path),
            "-vf",
            f"scale=-2:{settings.resolution}",
            "-c:v",
            settings.video_codec,
            "-preset",
            settings.preset,
            "-crf",
            str(settings.crf),
            "-c:a",
            settings.audio_codec,
            "-b:a",
            settings.audio_bitrate,
            "-y",
            str(shadow_path),
        ]

    def create(
        self,
        master_path: Path,
        shadow_dir: Path,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ShadowResult:
        """Transcode ``master_path`` into ``shadow_dir``.

        An existing shadow is never overwritten, whatever the case of its
        extension. Partial output is removed when the encode fails or is
        interrupted.

        Args:
            master_path: Master recording to transcode.
            shadow_dir: Directory receiving the shadow; created when absent.
            on_progress: Receives percentages while encoding and ``100`` on
                success. Intermediate updates are skipped when the duration
                cannot be probed.

        Returns:
            ShadowResult: ``created`` on success, otherwise a failure carrying
            ``already_exists``, ``source_not_found``, ``encode_failure`` or
            ``spawn_failure``.
        """
        master_path = Path(master_path)
        shadow_dir = Path(shadow_dir)
        shadow_path = self.shadow_path_for(master_path, shadow_dir)

        if shadow_path.exists() or self._has_shadow(master_path, shadow_dir):
            return ShadowResult.failed(FailureReason.ALREADY_EXISTS, "Shadow file already exists")

        try:
            master_path.stat()
        except OSError:
            return ShadowResult.failed(FailureReason.SOURCE_NOT_FOUND, "Master file not found")

        duration = probe_duration(master_path, runner=self.runner, ffprobe=self.tools.ffprobe)
        shadow_dir.mkdir(parents=True, exist_ok=True)

        def _on_line(line: str) -> None:
            if on_progress is None or not duration:
                return
            elapsed = parse_progress_time(line)
            if elapsed is not None:
                on_progress(progress_percent(elapsed, duration))

        args = self.encode_args(master_path, shadow_path)
        LOGGER.debug("Encoding shadow: %s", shlex.join(args))
        try:
            outcome = self.runner.run(args, on_stderr_line=_on_line)
        except SpawnError as exc:
            self._discard(shadow_path)
            LOGGER.warning("Could not start %s for %s: %s", self.tools.ffmpeg, master_path, exc)
            return ShadowResult.failed(
                FailureReason.SPAWN_FAILURE, f"{self.tools.ffmpeg} could not be started: {exc}"
            )
        except BaseException:
            self._discard(shadow_path)
            raise

        if outcome.returncode != 0:
            self._discard(shadow_path)
            LOGGER.warning(
                "Shadow encode failed for %s (exit code %s)", master_path, outcome.returncode
            )
            return ShadowResult.failed(
                FailureReason.ENCODE_FAILURE,
                f"{self.tools.ffmpeg} exited with code {outcome.returncode}",
                exit_code=outcome.returncode,
            )

        if on_progress is not None:
            on_progress(100)
        LOGGER.info("Created shadow %s", shadow_path)
        return ShadowResult.created(shadow_path)

    def _has_shadow(self, master_path: Path, shadow_dir: Path) -> bool:
        name = base_name(master_path.name, self.settings.master_extensions)
        try:
            return find_media(shadow_dir, name, [self.settings.shadow_extension]) is not None
        except OSError:
            return False

    def _discard(self, shadow_path: Path) -> None:
        try:
            shadow_path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.debug("Could not remove partial shadow %s: %s", shadow_path, exc)


def create_shadow(
    master_path: Path,
    shadow_dir: Path,
    on_progress: Optional[ProgressCallback] = None,
    *,
    settings: ShadowSettings | None = None,
    tools: ToolSettings | None = None,
    runner: ProcessRunner | None = None,
) -> ShadowResult:
    """Create one shadow with a transcoder built from the given settings."""
    transcoder = ShadowTranscoder(settings=settings, tools=tools, runner=runner)
    return transcoder.create(master_path, shadow_dir, on_progress)


__all__ = [
    "ProgressCallback",
    "ShadowTranscoder",
    "create_shadow",
    "parse_progress_time",
    "progress_percent",
]
