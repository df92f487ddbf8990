"""Logging configuration for the layout manager.

Quiet runs print warnings and errors as one short line each. With -v or
--debug, lines carry a timestamp and logger name so the five layout passes
and the aerospace commands they issue can be followed in order.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, List


LOGGER_NAME = "aerospace_layout_manager"

QUIET_FORMAT = "%(levelname)s: %(message)s"
DETAILED_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
}
RESET = "\033[0m"


class LevelColorFormatter(logging.Formatter):
    """Wraps each formatted line in its level's terminal color.

    The record itself is left untouched so other handlers see plain text.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, LEVEL_COLORS[logging.ERROR])
        return f"{color}{line}{RESET}"


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Configure the package logger for one CLI invocation.

    Args:
        verbose: Log pass progress and placements (INFO)
        debug: Also log every subprocess call (DEBUG)

    Returns:
        Configured package logger
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    log_format = DETAILED_FORMAT if level < logging.WARNING else QUIET_FORMAT
    formatter_class = LevelColorFormatter if sys.stderr.isatty() else logging.Formatter
    handler.setFormatter(formatter_class(log_format))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)

    return logger


def log_subprocess_call(cmd: List[str], result: Any, logger: logging.Logger) -> None:
    """Log subprocess call with result.

    Args:
        cmd: Command list
        result: Object with returncode, stdout and stderr attributes
        logger: Logger instance
    """
    logger.debug(f"Subprocess call: {' '.join(cmd)}")
    logger.debug(f"  Return code: {result.returncode}")

    if result.stdout:
        logger.debug(f"  stdout: {result.stdout[:200]}...")  # First 200 chars

    if result.stderr:
        logger.debug(f"  stderr: {result.stderr[:200]}...")


@contextmanager
def log_timing(operation: str, logger: logging.Logger):
    """Context manager for logging operation timing.

    Examples:
        >>> with log_timing("Stash pass", logger):
        ...     await engine.stash(layout)
        INFO: Stash pass completed in 15.32ms
    """
    start = time.perf_counter()
    logger.info(f"Starting: {operation}")

    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{operation} completed in {elapsed_ms:.2f}ms")
