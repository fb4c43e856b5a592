"""Per-site recurring checks on top of APScheduler."""
from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Mapping, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config import settings
from models import IntervalUnit, Outcome, Site
from services.checker import HealthChecker
from services.errors import AlreadyScheduledError
from services.notifier import Notifier
from services.registry import SiteRegistry

logger = logging.getLogger(__name__)


class SiteScheduler:
    """Owns exactly one interval job per monitored site.

    Jobs are kept in a ``url -> Job`` mapping separate from the site entity,
    so the number of live timers can be audited with :meth:`active_count`.
    """

    def __init__(
        self,
        registry: SiteRegistry,
        checker: HealthChecker,
        notifier: Notifier,
        scheduler: Optional[AsyncIOScheduler] = None,
        intervals: Optional[Mapping[IntervalUnit, float]] = None,
    ) -> None:
        self.registry = registry
        self.checker = checker
        self.notifier = notifier
        self._scheduler = scheduler if scheduler is not None else AsyncIOScheduler()
        self._intervals = dict(intervals) if intervals else {}
        self._jobs: dict[str, Job] = {}

    def interval_for(self, unit: IntervalUnit) -> float:
        if unit in self._intervals:
            return self._intervals[unit]
        return settings.interval_seconds(unit)

    def launch(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Scheduler started")

    def start(self, site: Site) -> Job:
        if site.url in self._jobs:
            raise AlreadyScheduledError(site.url)

        seconds = self.interval_for(site.interval_unit)
        job = self._scheduler.add_job(
            self.run_check,
            trigger=IntervalTrigger(seconds=seconds),
            args=(site.url,),
            id=site.url,
            name=f"check {site.name}",
            coalesce=True,
            max_instances=1,
        )
        self._jobs[site.url] = job
        logger.info("Scheduled %s (%s) every %gs", site.name, site.url, seconds)
        return job

    def stop(self, url: str) -> bool:
        """Cancel the job for ``url``. Returns False when nothing was scheduled."""
        job = self._jobs.pop(url, None)
        if job is None:
            return False
        try:
            self._scheduler.remove_job(job.id)
        except JobLookupError:
            logger.debug("Job for %s already gone from scheduler", url)
        logger.info("Stopped checks for %s", url)
        return True

    def is_scheduled(self, url: str) -> bool:
        return url in self._jobs

    def active_count(self) -> int:
        return len(self._jobs)

    def scheduled_urls(self) -> list[str]:
        return list(self._jobs)

    def shutdown(self) -> None:
        for url in list(self._jobs):
            self.stop(url)
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    async def run_check(self, url: str) -> Outcome | None:
        """One tick: check the site, apply the outcome, notify observers."""
        if self.registry.is_empty():
            logger.debug("No sites registered, skipping check for %s", url)
            return None

        site = self.registry.find(url)
        if site is None:
            logger.debug("Site %s is no longer registered, skipping check", url)
            return None

        logger.info("Checking site status: %s", site.name)
        try:
            outcome = await self.checker.check(site)
        except asyncio.CancelledError:
            logger.info("Check cancelled for %s (shutdown)", url)
            raise
        except Exception as exc:
            logger.exception("Unexpected error checking %s", url)
            outcome = Outcome.down(str(exc) or type(exc).__name__)

        if self.registry.find(url) is not site:
            logger.info("Site %s was removed during its check, discarding result", url)
            return None

        site.status = outcome.status
        site.last_reason = outcome.reason
        site.last_checked_at = datetime.now(UTC)

        if outcome.online or outcome.responded:
            await self.notifier.notify_status(site)
        else:
            await self.notifier.notify_error(site, outcome.reason or "unknown error")
        await self.notifier.request_refresh()
        return outcome
