"""Test doubles and filesystem helpers shared across the suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from shadowreel.shadows.errors import SpawnError
from shadowreel.shadows.runner import ProcessOutcome


class FakeRunner:
    """Stand-in for ffprobe/ffmpeg that records calls and fakes their output.

    Args:
        duration: Text ffprobe prints on stdout.
        probe_code: Exit code of ffprobe.
        progress: Diagnostic lines ffmpeg emits while "encoding".
        encode_code: Exit code of ffmpeg.
        failing: Master filenames for which ffmpeg exits with code 1.
        spawn_error: Raise :class:`SpawnError` instead of running ffmpeg.
    """

    def __init__(
        self,
        *,
        duration: str = "10.0",
        probe_code: int = 0,
        progress: Iterable[str] = ("frame=10 time=00:00:05.00 bitrate=100kbits/s",),
        encode_code: int = 0,
        failing: Iterable[str] = (),
        spawn_error: bool = False,
    ) -> None:
        self.duration = duration
        self.probe_code = probe_code
        self.progress = list(progress)
        self.encode_code = encode_code
        self.failing = set(failing)
        self.spawn_error = spawn_error
        self.calls: list[list[str]] = []

    @property
    def encode_calls(self) -> list[list[str]]:
        return [call for call in self.calls if not call[0].endswith("ffprobe")]

    def run(
        self,
        args: Sequence[str],
        on_stderr_line: Optional[Callable[[str], None]] = None,
    ) -> ProcessOutcome:
        command = [str(arg) for arg in args]
        self.calls.append(command)
        if command[0].endswith("ffprobe"):
            return ProcessOutcome(returncode=self.probe_code, stdout=f"{self.duration}\n")

        if self.spawn_error:
            raise SpawnError(f"{command[0]}: No such file or directory")

        source = Path(command[command.index("-i") + 1])
        output = Path(command[-1])
        output.write_bytes(b"shadow of " + source.name.encode("utf-8"))
        for line in self.progress:
            if on_stderr_line is not None:
                on_stderr_line(line)

        code = 1 if source.name in self.failing else self.encode_code
        return ProcessOutcome(returncode=code, stderr="\n".join(self.progress))


def touch(path: Path, content: bytes = b"master") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path
