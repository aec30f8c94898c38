"""Runtime infrastructure for beanbalance.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Settings via get_settings(), load_settings(), Settings

Usage:
    from beanbalance.runtime import get_logger, get_settings

    logger = get_logger(__name__)
    settings = get_settings()
    print(settings.trading_account)
"""

from beanbalance.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from beanbalance.runtime.settings import (
    CONFIG_ENV_VAR,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
    set_settings,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "Settings",
    "get_settings",
    "load_settings",
    "set_settings",
    "reset_settings",
    "CONFIG_ENV_VAR",
]
