"""Project directory layout and media file discovery."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Sequence, Tuple

from pydantic import BaseModel

from shadowreel.config.models import LayoutSettings

from .models import Tier


class ProjectPaths(BaseModel):
    """The four physical directories of one project.

    Attributes:
        root: Project root directory.
        masters_active: Active-tier master recordings.
        masters_archived: Archived-tier master recordings.
        shadows_active: Active-tier shadow recordings.
        shadows_archived: Archived-tier shadow recordings.
    """

    root: Path
    masters_active: Path
    masters_archived: Path
    shadows_active: Path
    shadows_archived: Path

    @classmethod
    def from_root(cls, root: Path, layout: LayoutSettings | None = None) -> "ProjectPaths":
        """Derive the tier directories for ``root`` from the layout settings."""
        layout = layout or LayoutSettings()
        root = Path(root).expanduser()
        masters = root / layout.masters_dirname
        shadows = root / layout.shadows_dirname
        return cls(
            root=root,
            masters_active=masters / layout.active_dirname,
            masters_archived=masters / layout.archived_dirname,
            shadows_active=shadows / layout.active_dirname,
            shadows_archived=shadows / layout.archived_dirname,
        )

    def masters_dir(self, tier: Tier) -> Path:
        return self.masters_active if tier is Tier.ACTIVE else self.masters_archived

    def shadows_dir(self, tier: Tier) -> Path:
        return self.shadows_active if tier is Tier.ACTIVE else self.shadows_archived


def list_directory(directory: Path) -> list[str]:
    """Return entry names in listing order; a missing directory is empty.

    Raises:
        OSError: For failures other than the directory not existing.
    """
    try:
        return [entry.name for entry in directory.iterdir()]
    except (FileNotFoundError, NotADirectoryError):
        return []


def matching_extension(filename: str, extensions: Sequence[str]) -> str | None:
    """Return the extension in ``extensions`` that ``filename`` ends with, if any."""
    lowered = filename.lower()
    for extension in extensions:
        if lowered.endswith(extension) and len(filename) > len(extension):
            return extension
    return None


def has_extension(filename: str, extensions: Sequence[str]) -> bool:
    return matching_extension(filename, extensions) is not None


def base_name(filename: str, extensions: Sequence[str]) -> str:
    """Strip a recognized extension; names without one are returned unchanged."""
    extension = matching_extension(filename, extensions)
    if extension is None:
        return filename
    return filename[: -len(extension)]


def iter_media(directory: Path, extensions: Sequence[str]) -> Iterator[Tuple[str, Path]]:
    """Yield ``(base_name, path)`` for recognized files in ``directory``.

    Subdirectories are ignored even when their names carry a media extension.
    """
    for name in list_directory(directory):
        if not has_extension(name, extensions):
            continue
        path = directory / name
        if path.is_dir():
            continue
        yield base_name(name, extensions), path


def find_media(directory: Path, name: str, extensions: Sequence[str]) -> Path | None:
    """Return the file in ``directory`` whose base name is ``name``, if any.

    Extensions match the same way :func:`iter_media` matches them.
    """
    for candidate, path in iter_media(directory, extensions):
        if candidate == name:
            return path
    return None


def collect_base_names(directories: Iterable[Path], extensions: Sequence[str]) -> Tuple[int, set[str]]:
    """Return the file count and distinct base names across ``directories``."""
    count = 0
    names: set[str] = set()
    for directory in directories:
        for name, _ in iter_media(directory, extensions):
            count += 1
            names.add(name)
    return count, names


__all__ = [
    "ProjectPaths",
    "base_name",
    "collect_base_names",
    "find_media",
    "has_extension",
    "iter_media",
    "list_directory",
    "matching_extension",
]
