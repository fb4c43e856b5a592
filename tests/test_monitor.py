from __future__ import annotations

import asyncio

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import SiteSeed
from conftest import FakeChecker
from models import IntervalUnit, Outcome, SiteStatus
from services.errors import DuplicateTargetError, NotFoundError
from services.monitor import Monitor
from services.registry import SiteRegistry


def _make_monitor(notifier, checker: FakeChecker) -> Monitor:
    return Monitor(checker=checker, notifier=notifier, scheduler=AsyncIOScheduler())


@pytest.mark.asyncio
async def test_monitor_scenario_add_add_remove(notifier, recorder):
    checker = FakeChecker(
        {"https://nonexistent.invalid": Outcome.down("Cannot connect to host nonexistent.invalid")}
    )
    monitor = _make_monitor(notifier, checker)

    example = await monitor.add_site("Example", "https://example.com", IntervalUnit.MINUTES)

    assert len(monitor.list_sites()) == 1
    assert checker.calls == ["https://example.com"]
    assert example.status is SiteStatus.ONLINE
    assert recorder.statuses[-1].online is True

    bad = await monitor.add_site("Bad", "https://nonexistent.invalid", IntervalUnit.SECONDS)

    assert len(monitor.list_sites()) == 2
    assert checker.calls_for(bad.url) == 0
    assert bad.status is SiteStatus.UNKNOWN
    assert monitor.scheduler.interval_for(bad.interval_unit) == 1

    # a tick of Bad's own timer
    await monitor.scheduler.run_check(bad.url)
    assert bad.status is SiteStatus.OFFLINE
    assert recorder.names(recorder.errors) == ["Bad"]

    removed = await monitor.remove_site("https://example.com")

    assert removed is example
    assert len(monitor.list_sites()) == 1
    assert monitor.active_timers() == 1
    assert not monitor.scheduler.is_scheduled("https://example.com")

    await monitor.scheduler.run_check("https://example.com")
    assert checker.calls_for("https://example.com") == 1


@pytest.mark.asyncio
async def test_monitor_first_add_checks_immediately_only_once(notifier, recorder):
    checker = FakeChecker()
    monitor = _make_monitor(notifier, checker)

    await monitor.add_site("First", "https://first.example")
    await monitor.add_site("Second", "https://second.example", "seconds")

    assert checker.calls == ["https://first.example"]
    assert len(recorder.statuses) == 1
    # one refresh per add plus one for the immediate check
    assert recorder.refreshes == 3


@pytest.mark.asyncio
async def test_monitor_first_add_after_emptying_checks_again(notifier):
    checker = FakeChecker()
    monitor = _make_monitor(notifier, checker)

    await monitor.add_site("First", "https://first.example")
    await monitor.remove_site("https://first.example")
    await monitor.add_site("Again", "https://again.example")

    assert checker.calls == ["https://first.example", "https://again.example"]


@pytest.mark.asyncio
async def test_monitor_rejects_duplicate_without_second_timer(notifier, recorder):
    checker = FakeChecker()
    monitor = _make_monitor(notifier, checker)
    await monitor.add_site("Example", "https://example.com")
    refreshes = recorder.refreshes

    with pytest.raises(DuplicateTargetError):
        await monitor.add_site("Copy", "https://example.com", IntervalUnit.SECONDS)

    assert monitor.active_timers() == 1
    assert len(monitor.list_sites()) == 1
    assert monitor.list_sites()[0].name == "Example"
    assert recorder.refreshes == refreshes


@pytest.mark.asyncio
async def test_monitor_rejects_unknown_interval_unit(notifier):
    monitor = _make_monitor(notifier, FakeChecker())

    with pytest.raises(ValueError):
        await monitor.add_site("Example", "https://example.com", "hours")

    assert monitor.list_sites() == []
    assert monitor.active_timers() == 0


@pytest.mark.asyncio
async def test_monitor_remove_unknown_raises_not_found(notifier, recorder):
    monitor = _make_monitor(notifier, FakeChecker())

    with pytest.raises(NotFoundError):
        await monitor.remove_site("https://missing.example")
    with pytest.raises(NotFoundError):
        await monitor.check_now("https://missing.example")

    assert recorder.refreshes == 0


@pytest.mark.asyncio
async def test_monitor_stop_monitoring_removes_site(notifier, recorder):
    monitor = _make_monitor(notifier, FakeChecker())
    await monitor.add_site("Example", "https://example.com")

    site = await monitor.stop_monitoring("https://example.com")

    assert site.url == "https://example.com"
    assert monitor.list_sites() == []
    assert monitor.active_timers() == 0


@pytest.mark.asyncio
async def test_monitor_check_now_bypasses_timer(notifier, recorder):
    checker = FakeChecker()
    monitor = _make_monitor(notifier, checker)
    await monitor.add_site("First", "https://first.example")
    second = await monitor.add_site("Second", "https://second.example")
    checker.outcomes[second.url] = Outcome.down("HTTP 503", status_code=503)

    site = await monitor.check_now(second.url)

    assert site is second
    assert second.status is SiteStatus.OFFLINE
    assert recorder.statuses[-1].online is False
    assert recorder.statuses[-1].site_name == "Second"


@pytest.mark.asyncio
async def test_monitor_add_sites_skips_rejected_seeds(notifier):
    monitor = _make_monitor(notifier, FakeChecker())

    added = await monitor.add_sites(
        [
            SiteSeed("Example", "https://example.com"),
            SiteSeed("Duplicate", "https://example.com", IntervalUnit.SECONDS),
            SiteSeed("Other", "https://other.example", IntervalUnit.SECONDS),
        ]
    )

    assert [site.name for site in added] == ["Example", "Other"]
    assert monitor.active_timers() == 2


@pytest.mark.asyncio
async def test_monitor_shutdown_clears_timers_and_closes_checker(notifier):
    checker = FakeChecker()
    monitor = _make_monitor(notifier, checker)
    monitor.start()
    await monitor.add_site("Example", "https://example.com")
    await monitor.add_site("Other", "https://other.example", IntervalUnit.SECONDS)

    await monitor.shutdown()
    await asyncio.sleep(0)

    assert monitor.active_timers() == 0
    assert checker.closed is True


@pytest.mark.asyncio
async def test_monitor_uses_injected_empty_registry(notifier):
    registry = SiteRegistry()
    monitor = Monitor(checker=FakeChecker(), notifier=notifier, registry=registry, scheduler=AsyncIOScheduler())

    await monitor.add_site("Example", "https://example.com")

    assert monitor.registry is registry
    assert monitor.scheduler.registry is registry
    assert monitor.notifier is notifier
    assert [site.url for site in registry.list()] == ["https://example.com"]
