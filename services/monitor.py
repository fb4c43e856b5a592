"""Monitoring service accepting add/remove/check requests."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import SiteSeed
from models import IntervalUnit, Site
from services.checker import HealthChecker
from services.errors import NotFoundError, SiteMonitorError
from services.notifier import Notifier
from services.registry import SiteRegistry
from services.scheduler import SiteScheduler

logger = logging.getLogger(__name__)


class Monitor:
    """Monitor for checking whether registered sites are reachable.

    Wires the registry, scheduler and notifier together. Every public request
    that changes the site list ends with a refresh signal.
    """

    def __init__(
        self,
        checker: Optional[HealthChecker] = None,
        notifier: Optional[Notifier] = None,
        registry: Optional[SiteRegistry] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
        intervals: Optional[Mapping[IntervalUnit, float]] = None,
    ) -> None:
        self.registry = registry if registry is not None else SiteRegistry()
        self.notifier = notifier if notifier is not None else Notifier()
        self.checker = checker if checker is not None else HealthChecker()
        self.scheduler = SiteScheduler(
            self.registry,
            self.checker,
            self.notifier,
            scheduler=scheduler,
            intervals=intervals,
        )

    def start(self) -> None:
        self.scheduler.launch()

    async def add_site(
        self,
        name: str,
        url: str,
        interval_unit: IntervalUnit | str = IntervalUnit.MINUTES,
    ) -> Site:
        """Register a site and start its recurring check.

        The first site added to an empty monitor is checked right away instead
        of waiting for its first tick.
        """
        if isinstance(interval_unit, str) and not isinstance(interval_unit, IntervalUnit):
            interval_unit = IntervalUnit.parse(interval_unit)

        site = self.registry.add(name, url, interval_unit)
        try:
            self.scheduler.start(site)
        except Exception:
            self.registry.remove(site.url)
            raise

        logger.info("Added site %s (%s), checking every %s", site.name, site.url, site.interval_unit.value)
        await self.notifier.request_refresh()

        if len(self.registry) == 1:
            await self.scheduler.run_check(site.url)
        return site

    async def remove_site(self, url: str) -> Site:
        url = (url or "").strip()
        if url not in self.registry:
            raise NotFoundError(url)

        self.scheduler.stop(url)
        site = self.registry.remove(url)
        logger.info("Removed site %s (%s)", site.name, site.url)
        await self.notifier.request_refresh()
        return site

    async def stop_monitoring(self, url: str) -> Site:
        """Stopping a site removes it; there is no paused state."""
        return await self.remove_site(url)

    async def check_now(self, url: str) -> Site:
        url = (url or "").strip()
        site = self.registry.get(url)
        await self.scheduler.run_check(url)
        return site

    async def add_sites(self, seeds: Iterable[SiteSeed]) -> list[Site]:
        """Register configured sites, skipping the ones that are rejected."""
        added = []
        for seed in seeds:
            try:
                added.append(await self.add_site(seed.name, seed.url, seed.interval_unit))
            except (SiteMonitorError, ValueError) as exc:
                logger.warning("Skipping configured site %s: %s", seed.url, exc)
        return added

    def list_sites(self) -> list[Site]:
        return self.registry.list()

    def active_timers(self) -> int:
        return self.scheduler.active_count()

    async def shutdown(self) -> None:
        """Cancel every timer and release the HTTP session."""
        self.scheduler.shutdown()
        await self.checker.close()
        logger.info("Monitor stopped with %d site(s) registered", len(self.registry))
