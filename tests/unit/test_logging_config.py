"""Unit tests for logging setup."""

import logging

import pytest

from aerospace_layout_manager.logging_config import (
    DETAILED_FORMAT,
    LOGGER_NAME,
    QUIET_FORMAT,
    LevelColorFormatter,
    log_timing,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    """Test log levels and formats per CLI flag."""

    @pytest.mark.parametrize("verbose, debug, level, log_format", [
        (False, False, logging.WARNING, QUIET_FORMAT),
        (True, False, logging.INFO, DETAILED_FORMAT),
        (False, True, logging.DEBUG, DETAILED_FORMAT),
        (True, True, logging.DEBUG, DETAILED_FORMAT),
    ])
    def test_flags_select_level_and_format(self, verbose, debug, level, log_format):
        logger = setup_logging(verbose=verbose, debug=debug)

        assert logger.name == LOGGER_NAME
        assert logger.level == level
        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt == log_format

    def test_repeated_setup_replaces_handler(self):
        setup_logging()
        logger = setup_logging(verbose=True)

        assert len(logger.handlers) == 1


class TestLevelColorFormatter:
    """Test colored output."""

    def _record(self, level: int) -> logging.LogRecord:
        return logging.LogRecord(LOGGER_NAME, level, __file__, 1, "window %s placed", (7,), None)

    def test_line_wrapped_in_level_color(self):
        line = LevelColorFormatter(QUIET_FORMAT).format(self._record(logging.WARNING))

        assert line == "\033[33mWARNING: window 7 placed\033[0m"

    def test_record_not_modified(self):
        record = self._record(logging.ERROR)

        LevelColorFormatter(QUIET_FORMAT).format(record)

        assert record.levelname == "ERROR"


class TestLogTiming:
    """Test timing context manager."""

    def test_logs_start_and_completion(self, caplog):
        logger = logging.getLogger(f"{LOGGER_NAME}.tests")

        with caplog.at_level(logging.INFO, logger=logger.name):
            with log_timing("Stash pass", logger):
                pass

        messages = [record.getMessage() for record in caplog.records]
        assert messages[0] == "Starting: Stash pass"
        assert messages[1].startswith("Stash pass completed in ")
