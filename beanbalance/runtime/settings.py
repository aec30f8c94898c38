"""Centralized settings for beanbalance.

Settings are plain data: account classification prefixes, the trading
account used for currency gains and losses, and rounding defaults. They can
be overridden from a TOML file:

    [beanbalance]
    main_currency = "CAD"
    decimal_places = 2
    trading_account = "Trading:Exchange"
    asset_prefixes = ["Assets"]
    income_prefixes = ["Income"]
    expense_prefixes = ["Expenses"]

Environment variables:
    BEANBALANCE_CONFIG: Path to a TOML settings file read by get_settings().
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

CONFIG_ENV_VAR = "BEANBALANCE_CONFIG"


def _prefix_matcher(prefixes: tuple[str, ...]) -> Callable[[str], bool]:
    def matches(account: str) -> bool:
        return any(account == prefix or account.startswith(f"{prefix}:") for prefix in prefixes)

    return matches


@dataclass(frozen=True)
class Settings:
    """Container for library-wide defaults."""

    main_currency: str | None = None
    decimal_places: int = 2
    trading_account: str = "Trading:Exchange"
    asset_prefixes: tuple[str, ...] = ("Assets",)
    income_prefixes: tuple[str, ...] = ("Income",)
    expense_prefixes: tuple[str, ...] = ("Expenses",)

    def is_asset_account(self, account: str) -> bool:
        return _prefix_matcher(self.asset_prefixes)(account)

    def is_income_account(self, account: str) -> bool:
        return _prefix_matcher(self.income_prefixes)(account)

    def is_expense_account(self, account: str) -> bool:
        return _prefix_matcher(self.expense_prefixes)(account)

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> Settings:
        """Build settings from a parsed TOML table, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in raw.items():
            if key not in known:
                continue
            if key.endswith("_prefixes"):
                if isinstance(value, str):
                    value = (value,)
                value = tuple(str(v) for v in value)
            elif key == "decimal_places":
                value = int(value)
            values[key] = value
        return cls(**values)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """
    Load settings from a TOML file.

    Args:
        config_path: Optional TOML path. If None, uses BEANBALANCE_CONFIG; when
            neither is set or the file does not exist, defaults are returned.

    Returns:
        Settings read from the ``[beanbalance]`` table (or the top level).
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR) or None
    if config_path is None:
        return Settings()

    path = Path(config_path)
    if not path.exists():
        return Settings()

    with open(path, "rb") as f:
        config = tomllib.load(f)

    table = config.get("beanbalance", config)
    return Settings.from_mapping(table)


# Module-level singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the singleton Settings instance.

    Returns:
        The global Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the global settings."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
