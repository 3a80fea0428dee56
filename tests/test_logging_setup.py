"""Tests for logging configuration."""

import logging
from pathlib import Path

from shadowreel.config.models import LoggingSettings
from shadowreel.logging_setup import configure_logging


def _installed(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if getattr(handler, "_shadowreel_handler", False)]


def test_configure_logging_writes_to_rotating_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "shadowreel.log"
    configure_logging(LoggingSettings(level="INFO", file=str(log_file)))

    logging.getLogger("shadowreel.shadows.batch").info("sweep finished")
    for handler in _installed(logging.getLogger("shadowreel")):
        handler.flush()

    assert "sweep finished" in log_file.read_text(encoding="utf-8")


def test_configure_logging_replaces_previous_handlers() -> None:
    configure_logging(LoggingSettings(level="DEBUG"))
    configure_logging(LoggingSettings(level="ERROR"))

    logger = logging.getLogger("shadowreel")
    handlers = _installed(logger)

    assert len(handlers) == 1
    assert logger.level == logging.ERROR


def test_unknown_level_falls_back_to_warning() -> None:
    configure_logging(LoggingSettings(level="chatty"))

    assert logging.getLogger("shadowreel").level == logging.WARNING
