"""Pytest configuration and fixtures."""
from __future__ import annotations

from typing import Iterable

import pytest

from config import settings
from models import Outcome, Site
from services.notifier import Notifier


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch) -> None:
    """Set up test environment variables"""
    monkeypatch.setenv('BOT_TOKEN', 'test_token_123456')
    monkeypatch.setenv('ADMIN_CHAT_IDS', '123456789,987654321')
    monkeypatch.setenv('REQUEST_TIMEOUT', '10')
    monkeypatch.setenv('MINUTES_INTERVAL_SECONDS', '60')
    monkeypatch.setenv('SECONDS_INTERVAL_SECONDS', '1')
    monkeypatch.delenv('MONITOR_SITES', raising=False)
    settings.reload()


class FakeChecker:
    """Health checker double returning canned outcomes per URL."""

    def __init__(self, outcomes: dict[str, Outcome] | None = None) -> None:
        self.outcomes = dict(outcomes or {})
        self.calls: list[str] = []
        self.closed = False

    async def check(self, site: Site) -> Outcome:
        self.calls.append(site.url)
        return self.outcomes.get(site.url, Outcome.up())

    def calls_for(self, url: str) -> int:
        return self.calls.count(url)

    async def close(self) -> None:
        self.closed = True


class EventRecorder:
    """Collects every event emitted by a notifier."""

    def __init__(self, notifier: Notifier) -> None:
        self.refreshes = 0
        self.statuses = []
        self.errors = []
        notifier.subscribe_refresh(self._on_refresh)
        notifier.subscribe_status(self.statuses.append)
        notifier.subscribe_error(self.errors.append)

    def _on_refresh(self, event) -> None:
        self.refreshes += 1

    def names(self, events: Iterable) -> list[str]:
        return [event.site_name for event in events]


@pytest.fixture
def fake_checker() -> FakeChecker:
    return FakeChecker()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def recorder(notifier: Notifier) -> EventRecorder:
    return EventRecorder(notifier)
