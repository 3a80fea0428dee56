"""Process runners used to invoke ffprobe and ffmpeg."""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from .errors import SpawnError

LOGGER = logging.getLogger(__name__)

LineCallback = Callable[[str], None]


@dataclass(slots=True)
class ProcessOutcome:
    """Exit status and captured output of a finished process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""


class ProcessRunner(Protocol):
    """Run an external utility to completion."""

    def run(
        self,
        args: Sequence[str],
        on_stderr_line: Optional[LineCallback] = None,
    ) -> ProcessOutcome:
        """Run ``args`` and return its outcome.

        ``on_stderr_line`` receives each diagnostic line as it arrives.

        Raises:
            SpawnError: If the executable cannot be started.
        """
        ...


class SubprocessRunner:
    """Runner backed by :mod:`subprocess`.

    Standard error is read line by line with universal newlines, so the
    carriage-return separated progress lines ffmpeg writes are delivered one
    at a time. Standard output is drained on a helper thread to keep either
    pipe from filling up.
    """

    def run(
        self,
        args: Sequence[str],
        on_stderr_line: Optional[LineCallback] = None,
    ) -> ProcessOutcome:
        command = [str(arg) for arg in args]
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as exc:
            raise SpawnError(f"{command[0]}: {exc}") from exc

        stdout_chunks: list[str] = []
        reader = threading.Thread(
            target=lambda: stdout_chunks.append(process.stdout.read()),  # type: ignore[union-attr]
            daemon=True,
        )
        reader.start()

        stderr_lines: list[str] = []
        assert process.stderr is not None
        try:
            for line in process.stderr:
                line = line.rstrip("\n")
                stderr_lines.append(line)
                if on_stderr_line is not None and line:
                    on_stderr_line(line)
            returncode = process.wait()
        except BaseException:
            process.kill()
            process.wait()
            reader.join()
            raise
        reader.join()
        LOGGER.debug("%s exited with %s", command[0], returncode)
        return ProcessOutcome(
            returncode=returncode,
            stdout="".join(stdout_chunks),
            stderr="\n".join(stderr_lines),
        )


__all__ = ["LineCallback", "ProcessOutcome", "ProcessRunner", "SubprocessRunner"]
