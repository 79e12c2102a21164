"""Tests for logging setup."""

import logging
import logging.handlers
import pytest
import yaml
from feepredictor.config import Config
from feepredictor.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)


def make_config(tmp_path, rotation):
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.dump({"logging": {
            "log_dir": str(tmp_path / "logs"),
            "level": "DEBUG",
            "console_level": "WARNING",
            "rotation": rotation,
        }}, f)
    return Config(str(path))


def test_midnight_rotation_archives(tmp_path):
    setup_logging(make_config(tmp_path, {"when": "midnight", "backup_count": 3}))

    handlers = logging.getLogger().handlers
    main_handler = handlers[0]
    assert isinstance(main_handler, logging.handlers.TimedRotatingFileHandler)
    assert main_handler.backupCount == 3
    assert (tmp_path / "logs" / "archive").is_dir()
    assert main_handler.namer("feepredictor.log.2026-01-01") == str(
        tmp_path / "logs" / "archive" / "feepredictor.log.2026-01-01"
    )


def test_size_rotation_and_levels(tmp_path):
    setup_logging(make_config(tmp_path, {"when": "size", "max_bytes": 2048}))

    root_logger = logging.getLogger()
    main_handler, error_handler, console_handler = root_logger.handlers
    assert type(main_handler) is logging.handlers.RotatingFileHandler
    assert main_handler.maxBytes == 2048
    assert main_handler.level == logging.DEBUG
    assert error_handler.level == logging.ERROR
    assert console_handler.level == logging.WARNING
    assert root_logger.level == logging.DEBUG
    assert not (tmp_path / "logs" / "archive").exists()

    logging.getLogger("feepredictor.test").error("store failed")
    for handler in (main_handler, error_handler):
        handler.flush()
    assert "store failed" in (tmp_path / "logs" / "feepredictor.log").read_text()
    assert "store failed" in (tmp_path / "logs" / "feepredictor-error.log").read_text()
