"""Shared fixtures: a file-backed store in tmp_path and managers on top of it."""

from datetime import UTC, datetime, timedelta
import itertools

import pytest

from devspace.config import Settings
from devspace.managers import ConnectionManager, RosterManager, TaskManager, default_presets
from devspace.store import JsonFileStore
from tests.mocks.github import MockGitHubClient

TOKEN = "ghp_test_token"  # noqa: S105


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 11, 22, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path / "data", _env_file=None)


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


@pytest.fixture
def tasks(store, clock, ids):
    return TaskManager(store, clock=clock, id_factory=ids)


@pytest.fixture
def roster(store, tasks, settings, clock, ids):
    return RosterManager(
        store, tasks, presets=default_presets(settings), clock=clock, id_factory=ids
    )


@pytest.fixture
def mock_github():
    return MockGitHubClient()


@pytest.fixture
def connection(mock_github, store):
    return ConnectionManager(mock_github, store)
