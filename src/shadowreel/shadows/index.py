"""Unified view of master and shadow recordings."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

from shadowreel.config.models import ShadowSettings

from .layout import ProjectPaths, iter_media
from .models import RecordingKind, Tier, UnifiedRecording


def build_index(
    masters_dir: Path,
    shadows_dir: Path,
    settings: ShadowSettings | None = None,
) -> Dict[str, UnifiedRecording]:
    """Merge one tier's masters and shadows into entries keyed by base name.

    Shadows are indexed first; masters then replace or upgrade those entries
    to ``real`` while keeping any recorded ``shadow_path``. A shadow with no
    master stays a ``shadow`` entry.
    """
    settings = settings or ShadowSettings()
    unified: Dict[str, UnifiedRecording] = {}

    for name, path in iter_media(Path(shadows_dir), [settings.shadow_extension]):
        unified[name] = UnifiedRecording(base_name=name, kind=RecordingKind.SHADOW, shadow_path=path)

    for name, path in iter_media(Path(masters_dir), settings.master_extensions):
        existing = unified.get(name)
        unified[name] = UnifiedRecording(
            base_name=name,
            kind=RecordingKind.REAL,
            master_path=path,
            shadow_path=existing.shadow_path if existing else None,
        )

    return unified


def build_project_index(
    paths: ProjectPaths,
    settings: ShadowSettings | None = None,
) -> Dict[Tier, Dict[str, UnifiedRecording]]:
    """Build the unified index for each tier of a project."""
    return {
        tier: build_index(paths.masters_dir(tier), paths.shadows_dir(tier), settings)
        for tier in Tier
    }


__all__ = ["build_index", "build_project_index"]
