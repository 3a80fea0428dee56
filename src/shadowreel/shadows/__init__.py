"""Shadow recordings: low-resolution mirrors of master video files."""

from .batch import generate_all_projects, generate_project_shadows
from .counts import get_counts, project_counts
from .errors import FailureReason, ShadowError, SpawnError
from .index import build_index, build_project_index
from .layout import ProjectPaths
from .lifecycle import delete_shadow, move_shadow, rename_shadow
from .models import (
    GenerationReport,
    MultiProjectReport,
    RecordingKind,
    ShadowCounts,
    ShadowResult,
    SyncResult,
    Tier,
    UnifiedRecording,
)
from .probe import probe_duration
from .runner import ProcessOutcome, ProcessRunner, SubprocessRunner
from .transcoder import ShadowTranscoder, create_shadow

__all__ = [
    "FailureReason",
    "GenerationReport",
    "MultiProjectReport",
    "ProcessOutcome",
    "ProcessRunner",
    "ProjectPaths",
    "RecordingKind",
    "ShadowCounts",
    "ShadowError",
    "ShadowResult",
    "ShadowTranscoder",
    "SpawnError",
    "SubprocessRunner",
    "SyncResult",
    "Tier",
    "UnifiedRecording",
    "build_index",
    "build_project_index",
    "create_shadow",
    "delete_shadow",
    "generate_all_projects",
    "generate_project_shadows",
    "get_counts",
    "move_shadow",
    "probe_duration",
    "project_counts",
    "rename_shadow",
]
