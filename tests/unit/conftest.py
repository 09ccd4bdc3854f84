import random
import itertools
from datetime import datetime, timedelta, UTC

import pytest
from pytest import MonkeyPatch

from urlshortener.dao.memory import ShortURLMemoryDAO
from urlshortener.utils.config import RegistrySettings
from urlshortener.utils.registry import reset_registry


class FakeClock:
    """Manually driven clock: returns `now` until advanced."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def start_time() -> datetime:
    return datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock(start_time) -> FakeClock:
    return FakeClock(start_time)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f'id-{next(counter)}'


@pytest.fixture
def settings() -> RegistrySettings:
    return RegistrySettings()


@pytest.fixture
def dao(settings, clock, rng, id_factory) -> ShortURLMemoryDAO:
    """In-memory registry driven by a fake clock and seeded randomness."""
    return ShortURLMemoryDAO(settings=settings, clock=clock, rng=rng, id_factory=id_factory)


@pytest.fixture(autouse=True)
def _app_env(monkeypatch: MonkeyPatch) -> None:
    """Run every test as a deployed (non-local) environment unless it says otherwise."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)


@pytest.fixture(autouse=True)
def _fresh_registry():
    reset_registry()
    yield
    reset_registry()
