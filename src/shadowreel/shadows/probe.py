"""Best-effort media duration probing."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional

from .errors import SpawnError
from .runner import ProcessRunner, SubprocessRunner

LOGGER = logging.getLogger(__name__)


def probe_args(path: Path, ffprobe: str = "ffprobe") -> list[str]:
    """Build an ffprobe command that prints only the container duration."""
    return [
        ffprobe,
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]


def probe_duration(
    path: Path,
    *,
    runner: Optional[ProcessRunner] = None,
    ffprobe: str = "ffprobe",
) -> Optional[float]:
    """Return the duration of ``path`` in seconds, or ``None`` when unknown.

    Never raises: a missing executable, a non-zero exit, or output that is
    not a finite number all yield ``None``.
    """
    runner = runner or SubprocessRunner()
    try:
        outcome = runner.run(probe_args(path, ffprobe))
    except (SpawnError, OSError) as exc:
        LOGGER.debug("Duration probe could not start for %s: %s", path, exc)
        return None

    if outcome.returncode != 0:
        LOGGER.debug("Duration probe exited with %s for %s", outcome.returncode, path)
        return None

    text = outcome.stdout.strip().splitlines()
    try:
        duration = float(text[0]) if text else math.nan
    except ValueError:
        duration = math.nan
    if not math.isfinite(duration) or duration < 0:
        LOGGER.debug("Unparsable duration %r for %s", outcome.stdout, path)
        return None
    return duration


__all__ = ["probe_args", "probe_duration"]
