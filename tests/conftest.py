"""Shared fixtures: an in-memory EditClient and an isolated config."""

import threading
import time

import pytest

from autolist.config import AutoListConfig
from autolist.models import Statement

# Env vars that pydantic-settings reads -- cleaned so tests see defaults
CONFIG_ENV_VARS = [
    "AUTOLIST_WIDAR_URL", "AUTOLIST_WIKIDATA_API_URL", "AUTOLIST_TOOL_HASHTAG",
    "AUTOLIST_REQUEST_TIMEOUT", "AUTOLIST_WIKI", "AUTOLIST_BOT_MODE",
    "AUTOLIST_CONCURRENCY", "AUTOLIST_THROTTLE_MS", "AUTOLIST_POLL_INTERVAL_MS",
    "AUTOLIST_DRY_RUN", "AUTOLIST_VERBOSE", "AUTOLIST_LOG_LEVEL", "AUTOLIST_LOG_DIR",
]


class FakeClient:
    """Thread-safe in-memory EditClient that records every call.

    ``statements`` maps (item, property) to the statements read back.
    ``errors`` maps a method name to an exception raised on each call.
    ``hooks`` maps a method name to a callable run (with the call args)
    before the call returns, e.g. to block on an Event.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls: list[tuple] = []
        self.call_times: list[float] = []
        self.statements: dict[tuple[str, str], list[Statement]] = {}
        self.errors: dict[str, Exception] = {}
        self.hooks: dict = {}
        self._next_id = 100
        self._lock = threading.Lock()

    def _record(self, name: str, *args) -> None:
        with self._lock:
            self.calls.append((name, *args))
            self.call_times.append(time.monotonic())
        if name in self.hooks:
            self.hooks[name](*args)
        if self.delay:
            time.sleep(self.delay)
        if name in self.errors:
            raise self.errors[name]

    def calls_to(self, name: str) -> list[tuple]:
        with self._lock:
            return [c[1:] for c in self.calls if c[0] == name]

    def create_entity(self, site=None, page=None) -> str:
        self._record("create_entity", site, page)
        with self._lock:
            self._next_id += 1
            return f"Q{self._next_id}"

    def set_label(self, entity_id, language, text) -> None:
        self._record("set_label", entity_id, language, text)

    def set_statement(self, entity_id, prop, value) -> None:
        self._record("set_statement", entity_id, prop, value)

    def read_statements(self, entity_id, prop) -> list[Statement]:
        self._record("read_statements", entity_id, prop)
        return list(self.statements.get((entity_id, prop), []))

    def remove_statement(self, statement_id) -> None:
        self._record("remove_statement", statement_id)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def config(tmp_path):
    """Fast scheduler config: no throttle, 5 ms poll interval."""
    return AutoListConfig(
        _env_file=None,
        throttle_ms=0,
        poll_interval_ms=5,
        log_dir=tmp_path / "logs",
    )
