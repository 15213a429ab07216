"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

MADRID = ZoneInfo("Europe/Madrid")


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)

    def set(self, now: datetime) -> None:
        self.now = now


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_auth_log(fixtures_dir: Path) -> Path:
    return fixtures_dir / "auth.log"


@pytest.fixture
def config_yaml_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "config.yaml"


@pytest.fixture
def tz() -> ZoneInfo:
    return MADRID


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 4, 4, 10, 0, 0, tzinfo=MADRID))
