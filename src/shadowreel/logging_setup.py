"""Logging configuration for the Shadowreel CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from shadowreel.config.models import LoggingSettings

FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_HANDLER_MARKER = "_shadowreel_handler"


def configure_logging(settings: LoggingSettings, *, console: Console | None = None) -> None:
    """Install console and optional rotating file handlers on the package logger.

    Handlers installed by an earlier call are replaced, so the function can be
    invoked once per CLI command.

    Args:
        settings: Logging section of the loaded configuration.
        console: Console used by the rich handler; defaults to stderr.
    """
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger("shadowreel")
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(level)
    _install(logger, rich_handler)

    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max(1, settings.max_size_mb) * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.setLevel(level)
        _install(logger, file_handler)

    logger.setLevel(level)


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)


__all__ = ["configure_logging"]
