"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from loguru import logger

from scalarenforce.options import ENV_OVERRIDES


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from SCALARENFORCE_* variables in the developer's shell."""
    for env_key in ENV_OVERRIDES:
        monkeypatch.delenv(env_key, raising=False)


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]], None, None]:
    """Capture loguru records emitted during the test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
