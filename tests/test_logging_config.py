"""
Tests for logging configuration.
"""

import logging

import pytest

from mechmodel import setup_logging


@pytest.fixture
def restore_logger():
    """Restore the package logger after each test."""
    logger = logging.getLogger("mechmodel")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_sets_level_and_console_handler(self, restore_logger):
        logger = setup_logging(logging.DEBUG)
        assert logger is restore_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_does_not_duplicate(self, restore_logger):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_file_handler(self, restore_logger, tmp_path):
        log_file = tmp_path / "mechmodel.log"
        logger = setup_logging(logging.INFO, log_file=str(log_file))
        assert len(logger.handlers) == 2

        logging.getLogger("mechmodel.models.pendulum").info("hello from pendulum")
        for handler in logger.handlers:
            handler.flush()

        assert "hello from pendulum" in log_file.read_text(encoding="utf-8")
