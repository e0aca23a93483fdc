from datetime import datetime, timedelta, timezone

import pytest

from revisor.application.service import RevisionService
from revisor.infrastructure.storage import MemoryStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta) -> datetime:
        self.current += timedelta(**delta)
        return self.current


@pytest.fixture
def t0():
    return datetime(2025, 3, 3, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(t0):
    return FakeClock(t0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def service(store, clock):
    return RevisionService(store, clock=clock)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears REVISOR_* settings."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data files
    monkeypatch.setenv("HOME", str(home))
    for key in ("DATA_FILE", "STORAGE_KEY", "DEFAULT_INTERVALS", "RETENTION_DAYS", "VERBOSE"):
        monkeypatch.delenv(f"REVISOR_{key}", raising=False)
    return home
