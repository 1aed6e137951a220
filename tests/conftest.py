import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from loguru import logger

from erroneous.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test without ambient ERRONEOUS_* env vars or a stray .env file."""
    for name in list(os.environ):
        if name.startswith("ERRONEOUS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(str(tmp_path))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_records() -> Iterator[list[dict]]:
    """Collect loguru records emitted while the test runs."""
    records: list[dict] = []

    def sink(message) -> None:
        records.append(message.record)

    sink_id = logger.add(sink, level="TRACE")
    yield records
    logger.remove(sink_id)


@pytest.fixture
def set_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Set ERRONEOUS_* variables and drop cached settings."""

    def apply(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(f"ERRONEOUS_{key.upper()}", value)
        get_settings.cache_clear()

    return apply
