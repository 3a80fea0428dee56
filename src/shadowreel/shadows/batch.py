"""Batch generation of missing shadow files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Iterator, Optional

from shadowreel.config.models import LayoutSettings

from .errors import FailureReason
from .layout import ProjectPaths, iter_media, list_directory
from .models import GenerationReport, MultiProjectReport, Tier
from .transcoder import ShadowTranscoder

LOGGER = logging.getLogger(__name__)

BatchProgressCallback = Callable[[int, int, str], None]


@dataclass(slots=True)
class WorkItem:
    """One master recording queued for shadow generation."""

    master_path: Path
    shadow_dir: Path
    label: str


def plan_work(paths: ProjectPaths, transcoder: ShadowTranscoder) -> list[WorkItem]:
    """List every master, active tier first, each paired with its shadow directory.

    Archived items are labelled with the tier directory name so they can be
    told apart from active items of the same name.
    """
    extensions = transcoder.settings.master_extensions
    items: list[WorkItem] = []
    for tier in Tier:
        prefix = "" if tier is Tier.ACTIVE else f"{paths.masters_archived.name}/"
        for _, master_path in iter_media(paths.masters_dir(tier), extensions):
            items.append(
                WorkItem(
                    master_path=master_path,
                    shadow_dir=paths.shadows_dir(tier),
                    label=f"{prefix}{master_path.name}",
                )
            )
    return items


def generate_project_shadows(
    paths: ProjectPaths,
    on_progress: Optional[BatchProgressCallback] = None,
    *,
    transcoder: ShadowTranscoder | None = None,
) -> GenerationReport:
    """Create a shadow for every master in ``paths`` that lacks one.

    Items are transcoded one at a time. Existing shadows are counted as
    skipped; any other failure is recorded as ``"<label>: <error>"`` and the
    sweep moves on to the next item.

    Args:
        paths: Project directories to sweep.
        on_progress: Called with ``(index, total, label)`` before each attempt,
            where ``index`` starts at 1.
        transcoder: Transcoder to use; defaults to one with default settings.

    Returns:
        GenerationReport: Created, skipped, and error totals for the sweep.
    """
    transcoder = transcoder or ShadowTranscoder()
    report = GenerationReport()
    items = plan_work(paths, transcoder)
    total = len(items)

    for position, item in enumerate(items, start=1):
        if on_progress is not None:
            on_progress(position, total, item.label)
        try:
            result = transcoder.create(item.master_path, item.shadow_dir)
        except OSError as exc:
            report.errors.append(f"{item.label}: {exc}")
            continue

        if result.success:
            report.created += 1
        elif result.reason is FailureReason.ALREADY_EXISTS:
            report.skipped += 1
        else:
            report.errors.append(f"{item.label}: {result.error}")

    LOGGER.info("Shadow sweep of %s: %s", paths.root, report.summary())
    return report


def iter_projects(projects_root: Path) -> Iterator[Path]:
    """Yield non-hidden project directories below ``projects_root`` in name order."""
    for name in sorted(list_directory(projects_root)):
        candidate = projects_root / name
        if not name.startswith(".") and candidate.is_dir():
            yield candidate


def generate_all_projects(
    projects_root: Path,
    on_progress: Optional[Callable[[str, int, int, str], None]] = None,
    *,
    transcoder: ShadowTranscoder | None = None,
    layout: LayoutSettings | None = None,
) -> MultiProjectReport:
    """Run :func:`generate_project_shadows` for each project, one after another.

    Errors are prefixed with the project directory name. ``on_progress``
    receives the project name followed by the per-project progress arguments.
    """
    transcoder = transcoder or ShadowTranscoder()
    report = MultiProjectReport()

    for project_dir in iter_projects(Path(projects_root).expanduser()):
        project = project_dir.name
        callback = partial(on_progress, project) if on_progress is not None else None
        result = generate_project_shadows(
            ProjectPaths.from_root(project_dir, layout),
            callback,
            transcoder=transcoder,
        )
        report.projects += 1
        report.created += result.created
        report.skipped += result.skipped
        report.errors.extend(f"{project}: {error}" for error in result.errors)

    return report


__all__ = [
    "BatchProgressCallback",
    "WorkItem",
    "generate_all_projects",
    "generate_project_shadows",
    "iter_projects",
    "plan_work",
]
