"""Logging configuration for the orchestrator.

Every module obtains its logger through :func:`get_logger`. The CLI calls
:func:`setup_logging` once per run, which attaches a colored console handler
and, when a log file is given, an append-only file handler that writes one
timestamped line per event.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from sdwan_deploy.lib.ui.colors import ANSIColors, colorize

PACKAGE_LOGGER = "sdwan_deploy"

# Sits between INFO and WARNING.
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_TAGS: dict[int, tuple[str, str]] = {
    logging.DEBUG: ("[DEBUG]", ANSIColors.CYAN),
    logging.INFO: ("[INFO]", ANSIColors.BLUE),
    SUCCESS: ("[✓]", ANSIColors.GREEN),
    logging.WARNING: ("[⚠]", ANSIColors.YELLOW),
    logging.ERROR: ("[✗]", ANSIColors.RED),
    logging.CRITICAL: ("[✗]", ANSIColors.RED),
}


class ConsoleHandler(logging.Handler):
    """Render records as ``[TAG] message`` lines through click."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tag, color = _LEVEL_TAGS.get(record.levelno, ("[INFO]", ANSIColors.BLUE))
            click.echo(f"{colorize(tag, color)} {record.getMessage()}")
        except Exception:
            self.handleError(record)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for a module of this package."""
    return logging.getLogger(name)


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the package logger for a CLI run.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        verbose: Show DEBUG records on the console
        quiet: Only show warnings and errors on the console
        log_file: Append every record (DEBUG included) to this file

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)

    console = ConsoleHandler()
    if quiet:
        console.setLevel(logging.WARNING)
    elif verbose:
        console.setLevel(logging.DEBUG)
    else:
        console.setLevel(logging.INFO)
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT)
        )
        logger.addHandler(file_handler)

    return logger


def flush_handlers() -> None:
    """Flush package handlers before a subprocess appends to the same file."""
    for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
        handler.flush()
