"""Shared utility functions for the CardSense statement service."""

import logging
from datetime import UTC, datetime
from pathlib import Path

import colorlog

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER = "cardsense"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a colorized format for the project.

    Handlers live on the ``cardsense`` logger; ``cardsense.*`` loggers propagate to it.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            f"%(log_color)s{LOG_FORMAT}",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.propagate = False
    return logging.getLogger(name)


def setup_logging(log_dir: str | Path, level: str = "INFO") -> logging.Logger:
    """Configure the service logger with a colorized console and a plain file handler."""
    ensure_dir(log_dir)
    logger = get_logger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    # File handler for persistent logs (not colorized)
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(Path(log_dir) / "cardsense.log")
        file_handler.setLevel(level.upper())
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
    return logger


def ensure_dir(path: str | Path) -> None:
    """Ensure a directory exists (like mkdir -p)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def truncate(value: str, limit: int) -> str | None:
    """Cut a string to ``limit`` characters, returning None for empty results."""
    return value[:limit] or None


def utcnow() -> datetime:
    """Get the current UTC time."""
    return datetime.now(UTC)
