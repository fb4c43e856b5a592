"""Errors raised by the monitoring core."""
from __future__ import annotations


class SiteMonitorError(Exception):
    """Base class for request errors surfaced to the caller."""


class DuplicateTargetError(SiteMonitorError, ValueError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Site {url} is already being monitored")
        self.url = url


class NotFoundError(SiteMonitorError, KeyError):
    def __init__(self, url: str) -> None:
        super().__init__(url)
        self.url = url

    def __str__(self) -> str:
        return f"Site {self.url} is not being monitored"


class AlreadyScheduledError(SiteMonitorError, RuntimeError):
    def __init__(self, url: str) -> None:
        super().__init__(f"A check is already scheduled for {url}")
        self.url = url


__all__ = [
    "AlreadyScheduledError",
    "DuplicateTargetError",
    "NotFoundError",
    "SiteMonitorError",
]
