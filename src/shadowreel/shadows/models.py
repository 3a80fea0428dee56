"""Data models for shadow recordings."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from .errors import FailureReason

NOT_FOUND_MESSAGE = "not found"


class Tier(str, Enum):
    """Lifecycle bucket a recording currently lives in."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class RecordingKind(str, Enum):
    """Whether a base name is backed by a master file or only by its shadow."""

    REAL = "real"
    SHADOW = "shadow"


class UnifiedRecording(BaseModel):
    """Merged view of one base name across the masters and shadows directories.

    Attributes:
        base_name: Filename without extension; the master/shadow join key.
        kind: ``real`` when a master exists, otherwise ``shadow``.
        master_path: Master file location, set only for ``real`` entries.
        shadow_path: Shadow file location whenever a shadow exists.
    """

    base_name: str
    kind: RecordingKind
    master_path: Optional[Path] = None
    shadow_path: Optional[Path] = None

    @property
    def has_shadow(self) -> bool:
        return self.shadow_path is not None


class ShadowCounts(BaseModel):
    """Coverage totals for a project across both tiers."""

    masters: int = 0
    shadows: int = 0
    missing: int = 0


class ShadowResult(BaseModel):
    """Outcome of transcoding one master into a shadow.

    Attributes:
        success: Whether a new shadow file was written.
        shadow_path: Destination of the shadow file on success.
        reason: Failure classification when ``success`` is false.
        error: Human-readable failure description.
        exit_code: Transcoder exit status for encode failures.
    """

    success: bool
    shadow_path: Optional[Path] = None
    reason: Optional[FailureReason] = None
    error: Optional[str] = None
    exit_code: Optional[int] = None

    @classmethod
    def created(cls, shadow_path: Path) -> "ShadowResult":
        return cls(success=True, shadow_path=shadow_path)

    @classmethod
    def failed(
        cls,
        reason: FailureReason,
        error: str,
        *,
        exit_code: Optional[int] = None,
    ) -> "ShadowResult":
        return cls(success=False, reason=reason, error=error, exit_code=exit_code)


class SyncResult(BaseModel):
    """Outcome of a rename, move, or delete applied to a shadow file.

    A ``not found`` error means there was no shadow to act on; callers treat
    it as "nothing to do".
    """

    success: bool
    error: Optional[str] = None
    reason: Optional[FailureReason] = None

    @property
    def not_found(self) -> bool:
        return self.reason is FailureReason.NOT_FOUND

    @classmethod
    def ok(cls) -> "SyncResult":
        return cls(success=True)

    @classmethod
    def missing(cls) -> "SyncResult":
        return cls(success=False, error=NOT_FOUND_MESSAGE, reason=FailureReason.NOT_FOUND)

    @classmethod
    def failed(cls, error: str) -> "SyncResult":
        return cls(success=False, error=error)


class GenerationReport(BaseModel):
    """Summary of a batch sweep, suitable for showing to an end user."""

    created: int = 0
    skipped: int = 0
    errors: List[str] = Field(default_factory=list)

    def summary(self) -> str:
        return f"created {self.created}, skipped {self.skipped}, {len(self.errors)} errors"


class MultiProjectReport(GenerationReport):
    """Aggregate of batch sweeps over every project below a root directory."""

    projects: int = 0


__all__ = [
    "NOT_FOUND_MESSAGE",
    "Tier",
    "RecordingKind",
    "UnifiedRecording",
    "ShadowCounts",
    "ShadowResult",
    "SyncResult",
    "GenerationReport",
    "MultiProjectReport",
]
