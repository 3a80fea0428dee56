"""Invoke tasks for building, testing, and linting Shadowreel.

Every task shells out to the `uv` CLI so local runs match CI.
"""

from __future__ import annotations

import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"
EXTERNAL_TOOLS = ("ffmpeg", "ffprobe")


def _run_uv(ctx: Context, args: Sequence[str], *, echo: bool = True) -> None:
    """Run `uv` with ``args`` quoted for the shell.

    Args:
        ctx: Invoke execution context.
        args: Arguments following the `uv` executable.
        echo: Whether to echo the command before running it.
    """
    ctx.run(shlex.join(("uv", *args)), echo=echo, pty=True)


@task
def sync(ctx: Context, dev: bool = True) -> None:
    """Synchronize the virtual environment, including the dev extra by default."""
    args = ["sync"]
    if dev:
        args.extend(["--extra", "dev"])
    _run_uv(ctx, args)


@task(help={"clean": "Remove existing artifacts from dist/ before building."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build source and wheel distributions into `dist/`."""
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _run_uv(ctx, ["build"])


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "path": "Path or module to test (defaults to tests/).",
        "options": "Additional CLI flags forwarded verbatim to pytest.",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests", options: str = "") -> None:
    """Run the pytest suite."""
    args: list[str] = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    if options:
        args.extend(shlex.split(options))
    args.append(path)
    _run_uv(ctx, args)


@task(help={"fix": "Apply auto-fixes where possible (ruff --fix)."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _run_uv(ctx, ["run", "ruff", "format", "--check", "src", "tests"])
    args = ["run", "ruff", "check", "src", "tests"]
    if fix:
        args.append("--fix")
    _run_uv(ctx, args)


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _run_uv(ctx, ["run", "mypy", "src"])


@task
def tools(ctx: Context) -> None:
    """Report whether ffmpeg and ffprobe are available on PATH."""
    missing = [name for name in EXTERNAL_TOOLS if shutil.which(name) is None]
    for name in EXTERNAL_TOOLS:
        location = shutil.which(name) or "not found"
        print(f"{name}: {location}")
    if missing:
        raise SystemExit(f"Missing external tools: {', '.join(missing)}")


@task(pre=[lint, mypy, tests])
def ci(ctx: Context) -> None:
    """Replicate the CI workflow locally."""


namespace = Collection(sync, build, tests, lint, mypy, tools, ci)
