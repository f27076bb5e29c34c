"""
Pytest fixtures for the dashboard data service tests.

Provides a temporary local store, a controllable clock, and in-process fakes
for the webhook clients so no test touches the network.
"""

import sys
from pathlib import Path

import pytest

_PROJECT_ROOT = str(Path(__file__).resolve().parent.parent)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from dashboard.cache_store import CacheStore  # noqa: E402
from dashboard.errors import InvalidCredentialsError, MissingCredentialsError  # noqa: E402
from dashboard.sections import Section, parse_section  # noqa: E402
from utils.storage import LocalStore  # noqa: E402


class FakeClock:
    """Wall clock in seconds that only moves when told to."""

    def __init__(self, start: float = 1_767_225_600.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetchClient:
    """Stands in for SectionFetchClient.

    ``responses`` maps a section to a payload, or to an exception instance
    that is raised instead. Every call is recorded in ``calls``.
    """

    def __init__(self, responses=None):
        self.responses = {parse_section(k): v for k, v in (responses or {}).items()}
        self.calls: list[Section] = []
        self.update_calls = 0
        self.update_response = {"ok": True}
        self.closed = False

    def fetch_section(self, section):
        section = parse_section(section)
        self.calls.append(section)
        result = self.responses.get(section, {})
        if isinstance(result, Exception):
            raise result
        return result

    def trigger_general_update(self):
        self.update_calls += 1
        if isinstance(self.update_response, Exception):
            raise self.update_response
        return self.update_response

    def close(self):
        self.closed = True

    def count(self, section) -> int:
        return self.calls.count(parse_section(section))


class FakeAuthClient:
    """Accepts exactly one username/password pair."""

    def __init__(self, username="admin", password="secret"):
        self.username = username
        self.password = password
        self.attempts = 0

    def login(self, username, password):
        if not username or not password:
            raise MissingCredentialsError()
        self.attempts += 1
        if (username, password) != (self.username, self.password):
            raise InvalidCredentialsError()

    def close(self):
        pass


@pytest.fixture()
def store(tmp_path):
    return LocalStore(tmp_path / "store")


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache_store(store, clock):
    return CacheStore(store, clock=clock)


@pytest.fixture()
def fake_client():
    return FakeFetchClient()


@pytest.fixture()
def make_client():
    """Factory for FakeFetchClient with preset responses."""
    return FakeFetchClient


@pytest.fixture()
def fake_auth():
    return FakeAuthClient()
