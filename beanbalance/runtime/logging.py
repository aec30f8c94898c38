"""Centralized logging configuration for beanbalance.

Usage:
    from beanbalance.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Validated %d transaction(s)", count)
    logger.warning("Parser reported errors")

Environment variables:
    BEANBALANCE_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: WARNING
"""

import logging
import os
import sys

# The library stays quiet unless asked otherwise
DEFAULT_LOG_LEVEL = logging.WARNING

LOG_NAMESPACE = "beanbalance"

# Format for log messages
LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Track if logging has been configured
_logging_configured = False


def _level_from_env() -> int:
    env_level = os.environ.get("BEANBALANCE_LOG_LEVEL", "").upper()
    return _LEVEL_MAP.get(env_level, DEFAULT_LOG_LEVEL)


def configure_logging(level: int | None = None) -> None:
    """Configure the beanbalance logger namespace.

    Args:
        level: Log level to use. If None, reads from BEANBALANCE_LOG_LEVEL env var
               or uses DEFAULT_LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        level = _level_from_env()

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format))

    root_logger = logging.getLogger(LOG_NAMESPACE)
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Module name, typically __name__

    Returns:
        Configured logger instance
    """
    configure_logging()

    # Module names already inside the package keep their dotted path
    if name == LOG_NAMESPACE or name.startswith(f"{LOG_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOG_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the log level at runtime.

    Args:
        level: New log level (e.g., logging.DEBUG)
    """
    logger = logging.getLogger(LOG_NAMESPACE)
    logger.setLevel(level)

    # Update format if switching to/from DEBUG
    for handler in logger.handlers:
        if level == logging.DEBUG:
            handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG))
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
