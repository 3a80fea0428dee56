"""Shadow coverage counts across both tiers of a project."""

from __future__ import annotations

from pathlib import Path

from shadowreel.config.models import ShadowSettings

from .layout import ProjectPaths, collect_base_names
from .models import ShadowCounts


def get_counts(
    masters_active: Path,
    masters_archived: Path,
    shadows_active: Path,
    shadows_archived: Path,
    settings: ShadowSettings | None = None,
) -> ShadowCounts:
    """Count masters, shadows, and masters with no shadow in either tier.

    A shadow sitting in the other tier still counts as present.
    """
    settings = settings or ShadowSettings()
    master_total, master_names = collect_base_names(
        [Path(masters_active), Path(masters_archived)], settings.master_extensions
    )
    shadow_total, shadow_names = collect_base_names(
        [Path(shadows_active), Path(shadows_archived)], [settings.shadow_extension]
    )
    return ShadowCounts(
        masters=master_total,
        shadows=shadow_total,
        missing=len(master_names - shadow_names),
    )


def project_counts(paths: ProjectPaths, settings: ShadowSettings | None = None) -> ShadowCounts:
    return get_counts(
        paths.masters_active,
        paths.masters_archived,
        paths.shadows_active,
        paths.shadows_archived,
        settings,
    )


__all__ = ["get_counts", "project_counts"]
