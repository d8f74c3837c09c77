"""
Core logging utilities

All calldist modules log through the "calldist" logger. Console output goes
to stderr so that reports written to stdout stay machine readable. At most
one log file is attached at a time.
"""

import datetime
import logging
import sys
from typing import Optional

# 配置默认日志器
logger = logging.getLogger("calldist")
logger.setLevel(logging.INFO)

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PLAIN_FORMAT = "%(levelname)s: %(message)s"

# 控制台处理器
console_handler = logging.StreamHandler(sys.stderr)
console_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
logger.addHandler(console_handler)

# 当前写入的日志文件（如果有）
_file_handler: Optional[logging.FileHandler] = None


def get_timestamp() -> str:
    """Return the current formatted timestamp"""
    return datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def get_logger(name: str = "calldist") -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Child names such as "calldist.analysis.searcher" share the handlers of
    the package logger.
    """
    return logging.getLogger(name)


def resolve_level(level: int, verbose: bool = False, debug: bool = False) -> int:
    """Apply the --debug/--verbose flags on top of a base level."""
    if debug:
        return logging.DEBUG
    if verbose:
        return min(level, logging.INFO)
    return level


def close_file_logging() -> None:
    """Detach and close the current log file handler, if one is attached."""
    global _file_handler
    if _file_handler is None:
        return
    logger.removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None


def configure_logger(
    level: int = logging.INFO,
    log_format: str = DETAILED_FORMAT,
    log_file: Optional[str] = None,
    verbose: bool = False,
    debug: bool = False,
) -> None:
    """
    Configure the calldist logger.

    Every call replaces the log file of the previous one: the old file
    handler is closed, and a new one is attached only if ``log_file`` is given.

    Args:
        level: Base log level (default: INFO)
        log_format: Format applied to every handler
        log_file: Log file path (default: None, console only)
        verbose: Lower the level to at least INFO
        debug: Set the level to DEBUG
    """
    global _file_handler

    logger.setLevel(resolve_level(level, verbose, debug))
    formatter = logging.Formatter(log_format)
    console_handler.setFormatter(formatter)

    close_file_logging()
    if log_file:
        _file_handler = logging.FileHandler(log_file, encoding="utf-8")
        _file_handler.setFormatter(formatter)
        logger.addHandler(_file_handler)


def debug(message: str, *args, **kwargs) -> None:
    """Log a debug message."""
    logger.debug(message, *args, **kwargs)


def info(message: str, *args, **kwargs) -> None:
    """Log an info message."""
    logger.info(message, *args, **kwargs)


def warning(message: str, *args, **kwargs) -> None:
    """Log a warning message."""
    logger.warning(message, *args, **kwargs)


def error(message: str, *args, **kwargs) -> None:
    """Log an error message."""
    logger.error(message, *args, **kwargs)


def critical(message: str, *args, **kwargs) -> None:
    """Log a critical error message."""
    logger.critical(message, *args, **kwargs)
