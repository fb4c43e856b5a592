"""Data model for a monitored site."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SiteStatus(str, Enum):
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


class IntervalUnit(str, Enum):
    """Cadence of the recurring check, chosen when the site is added."""

    MINUTES = "minutes"
    SECONDS = "seconds"

    @classmethod
    def parse(cls, value: str) -> "IntervalUnit":
        normalized = (value or "").strip().lower()
        aliases = {"m": cls.MINUTES, "min": cls.MINUTES, "s": cls.SECONDS, "sec": cls.SECONDS}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unknown interval unit: {value!r} (use minutes or seconds)") from exc


@dataclass(slots=True)
class Site:
    """Represents a site tracked by the monitoring service."""

    name: str
    url: str
    interval_unit: IntervalUnit = IntervalUnit.MINUTES
    status: SiteStatus = SiteStatus.UNKNOWN
    last_reason: str | None = None
    last_checked_at: datetime | None = None

    @property
    def is_online(self) -> bool:
        return self.status is SiteStatus.ONLINE
