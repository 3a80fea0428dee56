"""Configuration models describing Shadowreel settings."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

VALID_SHADOW_RESOLUTIONS = (240, 180, 160)


class ShadowreelBaseModel(BaseModel):
    """Shared configuration for Shadowreel Pydantic models."""

    model_config = ConfigDict(extra="forbid")


def _normalize_extension(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise ValueError("Extensions must not be empty.")
    return value if value.startswith(".") else f".{value}"


class ShadowSettings(ShadowreelBaseModel):
    """Encoder parameters and file extensions for shadow recordings.

    Attributes:
        resolution: Output height in pixels; width follows the aspect ratio.
        video_codec: Encoder passed to ``-c:v``.
        preset: Encode speed preset.
        crf: Constant-quality factor (lower is better quality).
        audio_codec: Encoder passed to ``-c:a``.
        audio_bitrate: Audio bitrate, high enough for speech-to-text.
        master_extensions: Extensions recognized as master recordings.
        shadow_extension: Extension written for every shadow file.
    """

    resolution: Literal[240, 180, 160] = 240
    video_codec: str = "libx264"
    preset: str = "fast"
    crf: int = Field(default=28, ge=0, le=51)
    audio_codec: str = "aac"
    audio_bitrate: str = "128k"
    master_extensions: List[str] = Field(default_factory=lambda: [".mov", ".mp4"])
    shadow_extension: str = ".mp4"

    @field_validator("master_extensions")
    @classmethod
    def _check_master_extensions(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one master extension is required.")
        return [_normalize_extension(item) for item in value]

    @field_validator("shadow_extension")
    @classmethod
    def _check_shadow_extension(cls, value: str) -> str:
        return _normalize_extension(value)


class ToolSettings(ShadowreelBaseModel):
    """External executables used for probing and transcoding.

    Attributes:
        ffmpeg: Transcoder executable name or path.
        ffprobe: Duration probe executable name or path.
    """

    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"


class LayoutSettings(ShadowreelBaseModel):
    """Directory names forming a project's master/shadow tree.

    Attributes:
        masters_dirname: Directory holding master recordings.
        shadows_dirname: Directory holding shadow recordings.
        active_dirname: Active tier below each root; empty keeps files at the root.
        archived_dirname: Archived tier below each root.
    """

    masters_dirname: str = "masters"
    shadows_dirname: str = "shadows"
    active_dirname: str = "active"
    archived_dirname: str = "archived"


class ProjectSettings(ShadowreelBaseModel):
    """Settings for multi-project sweeps.

    Attributes:
        root: Directory whose subdirectories are individual projects.
    """

    root: Optional[str] = None


class LoggingSettings(ShadowreelBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; rotation applies when set.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 100
    backup_count: int = 5


class CLIOptions(ShadowreelBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class ShadowreelConfig(ShadowreelBaseModel):
    """Top-level configuration struct for Shadowreel.

    Attributes:
        shadows: Shadow encoding settings.
        tools: External tool locations.
        layout: Project directory layout.
        projects: Multi-project settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    shadows: ShadowSettings = Field(default_factory=ShadowSettings)
    tools: ToolSettings = Field(default_factory=ToolSettings)
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    projects: ProjectSettings = Field(default_factory=ProjectSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "VALID_SHADOW_RESOLUTIONS",
    "ShadowreelBaseModel",
    "ShadowSettings",
    "ToolSettings",
    "LayoutSettings",
    "ProjectSettings",
    "LoggingSettings",
    "CLIOptions",
    "ShadowreelConfig",
]
