"""Shared pytest fixtures for beanbalance tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from beanbalance.runtime import CONFIG_ENV_VAR, reset_settings


@pytest.fixture(autouse=True)
def _reset_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_settings()
    yield
    reset_settings()
