"""Tests for shadow coverage counts."""

from pathlib import Path

from helpers import touch

from shadowreel.shadows import ProjectPaths, ShadowCounts, get_counts, project_counts


def test_single_master_without_shadow_is_missing(project: ProjectPaths) -> None:
    touch(project.masters_active / "01-1-intro.mov")

    assert project_counts(project) == ShadowCounts(masters=1, shadows=0, missing=1)


def test_shadow_in_other_tier_still_counts_as_present(project: ProjectPaths) -> None:
    touch(project.masters_active / "a.mov")
    touch(project.shadows_archived / "a.mp4")
    touch(project.masters_archived / "b.mov")

    counts = get_counts(
        project.masters_active,
        project.masters_archived,
        project.shadows_active,
        project.shadows_archived,
    )

    assert counts == ShadowCounts(masters=2, shadows=1, missing=1)


def test_placeholder_shadows_do_not_affect_missing(project: ProjectPaths) -> None:
    touch(project.masters_active / "a.mov")
    touch(project.shadows_active / "a.mp4")
    touch(project.shadows_active / "only-shadow.mp4")
    touch(project.shadows_active / "readme.txt")

    assert project_counts(project) == ShadowCounts(masters=1, shadows=2, missing=0)


def test_missing_is_counted_by_base_name(project: ProjectPaths) -> None:
    touch(project.masters_active / "take.mov")
    touch(project.masters_archived / "take.mp4")

    counts = project_counts(project)

    assert counts.masters == 2
    assert counts.missing == 1


def test_missing_project_directories_count_as_empty(tmp_path: Path) -> None:
    paths = ProjectPaths.from_root(tmp_path / "empty")

    assert project_counts(paths) == ShadowCounts()
