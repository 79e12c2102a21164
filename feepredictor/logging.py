"""Centralized logging configuration for the fee predictor."""

import logging
import logging.handlers
from pathlib import Path
from .constants import DEFAULT_LOG_MAX_BYTES, DEFAULT_LOG_BACKUP_COUNT

FILE_FORMAT = '%(asctime)s [%(levelname)-8s] [%(name)s] %(message)s'
CONSOLE_FORMAT = '[%(levelname)-8s] [%(name)s] %(message)s'


def _main_handler(log_dir: Path, rotation: dict) -> logging.Handler:
    """Daily rotation into ``archive/`` when ``when`` is midnight, size-based otherwise."""
    path = log_dir / "feepredictor.log"
    backup_count = rotation.get("backup_count", DEFAULT_LOG_BACKUP_COUNT)
    if rotation.get("when") != "midnight":
        return logging.handlers.RotatingFileHandler(
            path,
            maxBytes=rotation.get("max_bytes", DEFAULT_LOG_MAX_BYTES),
            backupCount=backup_count,
            encoding="utf-8",
        )

    archive_dir = log_dir / "archive"
    archive_dir.mkdir(exist_ok=True)
    handler = logging.handlers.TimedRotatingFileHandler(
        path, when="midnight", backupCount=backup_count, encoding="utf-8"
    )
    handler.namer = lambda name: str(archive_dir / Path(name).name)
    return handler


def setup_logging(config) -> None:
    """
    Route all loggers to a rotating log file, an error-only file and stderr.

    Args:
        config: Configuration instance with logging settings
    """
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    rotation = config.log_rotation

    file_level = getattr(logging, config.log_level.upper(), logging.INFO)
    console_level = getattr(logging, config.console_level.upper(), logging.INFO)
    file_formatter = logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    main_handler = _main_handler(log_dir, rotation)
    main_handler.setLevel(file_level)

    error_handler = logging.handlers.RotatingFileHandler(
        log_dir / "feepredictor-error.log",
        maxBytes=rotation.get("max_bytes", DEFAULT_LOG_MAX_BYTES),
        backupCount=rotation.get("backup_count", DEFAULT_LOG_BACKUP_COUNT),
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)

    for handler in (main_handler, error_handler):
        handler.setFormatter(file_formatter)

    # stderr, so JSON on stdout stays clean
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, console_level))
    root_logger.handlers.clear()
    for handler in (main_handler, error_handler, console_handler):
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
