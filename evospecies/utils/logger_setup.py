"""
Logging setup for evospecies.

Library modules only emit records through loguru's `logger`. An application
calls `setup_logger` once to route them to the console and, optionally, to a
rotating file.
"""

from datetime import datetime, timezone
import os
import sys

from loguru import logger

_LOCATION = "{name}:{function}:{line}"

PLAIN_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | " + _LOCATION + " | {message}"
)

COLOR_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>" + _LOCATION + "</cyan> | "
    "<level>{message}</level>"
)


def _log_file_path(log_dir: str) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return os.path.join(log_dir, f"speciation_{stamp}.log")


def setup_logger(
    log_dir: str | None = None,
    level: str = "INFO",
    rotation: str = "50 MB",
    retention: str = "30 days",
    enable_colors: bool = True,
) -> str | None:
    """
    Replace all loguru sinks with a stderr sink and an optional file sink.

    Args:
        log_dir: Directory for the log file; None logs to stderr only
        level: Minimum level for both sinks
        rotation: loguru rotation policy of the file sink
        retention: loguru retention policy of the file sink
        enable_colors: Colorize stderr when it is a terminal

    Returns:
        Path of the log file, or None without `log_dir`
    """
    logger.remove()

    colorize = enable_colors and sys.stderr.isatty()
    logger.add(
        sys.stderr,
        level=level,
        format=COLOR_FORMAT if colorize else PLAIN_FORMAT,
        colorize=colorize,
    )

    if log_dir is None:
        logger.debug("Logging to stderr only (level={})", level)
        return None

    os.makedirs(log_dir, exist_ok=True)
    log_file = _log_file_path(log_dir)
    logger.add(
        log_file,
        level=level,
        format=PLAIN_FORMAT,
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
        backtrace=True,
        diagnose=True,
    )

    logger.info("Logger initialized. Logging to stderr and {}", log_file)
    return log_file
