"""Logging setup for applications using promiseutil."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from promiseutil.core.config.models import LoggingConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = "promiseutil.log"


def setup_logging(
    level: str = "INFO",
    directory: str | Path | None = None,
    max_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """Replace the root handlers with console output and, optionally, a rotating file.

    Args:
        level: Logging level name, case-insensitive.
        directory: Where to write promiseutil.log. Console only when None.
        max_size_mb: Size in MB at which the log file rotates.
        backup_count: Rotated files to keep.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if directory is not None:
        Path(directory).mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                Path(directory) / LOG_FILE,
                maxBytes=max_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    logging.getLogger(__name__).debug(f"Logging to {len(handlers)} handler(s) at {level.upper()}")


def setup_logging_from_config(config: LoggingConfig) -> None:
    """Apply a loaded LoggingConfig."""
    setup_logging(config.level, config.directory, config.max_size_mb, config.backup_count)
