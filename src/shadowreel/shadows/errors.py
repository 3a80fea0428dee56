"""Errors and failure reasons for shadow operations."""

from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    """Why a shadow operation did not succeed."""

    ALREADY_EXISTS = "already_exists"
    SOURCE_NOT_FOUND = "source_not_found"
    ENCODE_FAILURE = "encode_failure"
    SPAWN_FAILURE = "spawn_failure"
    NOT_FOUND = "not_found"


class ShadowError(Exception):
    """Base exception for shadow recording operations."""


class SpawnError(ShadowError):
    """Raised when an external utility cannot be started."""


__all__ = ["FailureReason", "ShadowError", "SpawnError"]
