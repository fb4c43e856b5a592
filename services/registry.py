"""In-memory registry of monitored sites."""
from __future__ import annotations

from models import IntervalUnit, Site
from services.errors import DuplicateTargetError, NotFoundError


class SiteRegistry:
    """Sites keyed by URL, iterated in insertion order.

    The registry never touches timers; callers stop a site's job before
    removing it.
    """

    def __init__(self) -> None:
        self._sites: dict[str, Site] = {}

    def add(self, name: str, url: str, interval_unit: IntervalUnit = IntervalUnit.MINUTES) -> Site:
        name = (name or "").strip()
        url = (url or "").strip()
        if not name:
            raise ValueError("Site name cannot be empty")
        if not url:
            raise ValueError("Site URL cannot be empty")
        if url in self._sites:
            raise DuplicateTargetError(url)

        site = Site(name=name, url=url, interval_unit=IntervalUnit(interval_unit))
        self._sites[url] = site
        return site

    def remove(self, url: str) -> Site:
        try:
            return self._sites.pop(url)
        except KeyError:
            raise NotFoundError(url) from None

    def get(self, url: str) -> Site:
        site = self._sites.get(url)
        if site is None:
            raise NotFoundError(url)
        return site

    def find(self, url: str) -> Site | None:
        return self._sites.get(url)

    def list(self) -> list[Site]:
        return list(self._sites.values())

    def is_empty(self) -> bool:
        return not self._sites

    def __len__(self) -> int:
        return len(self._sites)

    def __contains__(self, url: object) -> bool:
        return url in self._sites
