"""Keep shadow files in step with renamed, moved, or deleted masters.

Each operation is meant to be called right after the master changed, without
checking first whether a shadow exists: a ``not found`` result simply means
there was nothing to do.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from shadowreel.config.models import ShadowSettings

from .layout import find_media
from .models import SyncResult

LOGGER = logging.getLogger(__name__)


def _locate(shadow_dir: Path, base_name: str, settings: ShadowSettings) -> Path | None:
    try:
        return find_media(Path(shadow_dir), base_name, [settings.shadow_extension])
    except OSError as exc:
        LOGGER.debug("Could not list %s: %s", shadow_dir, exc)
        return None


def _relocate(source: Path | None, destination: Path) -> SyncResult:
    if source is None:
        LOGGER.debug("No shadow for %s", destination.name)
        return SyncResult.missing()
    if source.parent == destination.parent and source.name.lower() == destination.name.lower():
        return SyncResult.ok()
    try:
        if destination.exists():
            return SyncResult.failed(f"Destination already exists: {destination}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
    except OSError as exc:
        LOGGER.warning("Could not move shadow %s to %s: %s", source, destination, exc)
        return SyncResult.failed(str(exc))
    LOGGER.info("Moved shadow %s -> %s", source, destination)
    return SyncResult.ok()


def rename_shadow(
    old_base_name: str,
    new_base_name: str,
    shadow_dir: Path,
    *,
    settings: ShadowSettings | None = None,
) -> SyncResult:
    """Rename the shadow for ``old_base_name`` to ``new_base_name`` in place."""
    settings = settings or ShadowSettings()
    return _relocate(
        _locate(shadow_dir, old_base_name, settings),
        Path(shadow_dir) / f"{new_base_name}{settings.shadow_extension}",
    )


def move_shadow(
    base_name: str,
    from_dir: Path,
    to_dir: Path,
    *,
    settings: ShadowSettings | None = None,
) -> SyncResult:
    """Move the shadow for ``base_name`` between tier directories, creating ``to_dir``."""
    settings = settings or ShadowSettings()
    return _relocate(
        _locate(from_dir, base_name, settings),
        Path(to_dir) / f"{base_name}{settings.shadow_extension}",
    )


def delete_shadow(
    base_name: str,
    shadow_dir: Path,
    *,
    settings: ShadowSettings | None = None,
) -> SyncResult:
    """Remove the shadow for ``base_name`` if there is one."""
    target = _locate(shadow_dir, base_name, settings or ShadowSettings())
    if target is None:
        LOGGER.debug("No shadow for %s in %s", base_name, shadow_dir)
        return SyncResult.missing()
    try:
        target.unlink()
    except FileNotFoundError:
        return SyncResult.missing()
    except OSError as exc:
        LOGGER.warning("Could not delete shadow %s: %s", target, exc)
        return SyncResult.failed(str(exc))
    LOGGER.info("Deleted shadow %s", target)
    return SyncResult.ok()


__all__ = ["delete_shadow", "move_shadow", "rename_shadow"]
