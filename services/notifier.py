"""Status notifications and refresh signals for external observers."""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from models import Site

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TargetListChanged:
    """The site list or a site's displayed state is stale."""


@dataclass(frozen=True, slots=True)
class StatusMessage:
    site_name: str
    online: bool
    text: str


@dataclass(frozen=True, slots=True)
class ErrorMessage:
    site_name: str
    reason: str
    text: str


Event = Union[TargetListChanged, StatusMessage, ErrorMessage]
Callback = Callable[[Any], Union[None, Awaitable[None]]]


def format_status(site: Site) -> str:
    state = "online" if site.is_online else "offline"
    return f"Site {site.name} is {state}."


def format_error(site: Site, reason: str) -> str:
    return f"Error checking site {site.name}: {reason}"


class Notifier:
    """Observer registry for status, error and refresh events.

    Subscribers may be plain callables or coroutine functions. A subscriber
    that raises is logged and skipped; the remaining subscribers still run.
    """

    def __init__(self) -> None:
        self._refresh: list[Callback] = []
        self._status: list[Callback] = []
        self._error: list[Callback] = []

    def subscribe_refresh(self, callback: Callback) -> Callable[[], None]:
        return self._subscribe(self._refresh, callback)

    def subscribe_status(self, callback: Callback) -> Callable[[], None]:
        return self._subscribe(self._status, callback)

    def subscribe_error(self, callback: Callback) -> Callable[[], None]:
        return self._subscribe(self._error, callback)

    @staticmethod
    def _subscribe(listeners: list[Callback], callback: Callback) -> Callable[[], None]:
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    async def notify_status(self, site: Site) -> StatusMessage:
        message = StatusMessage(site_name=site.name, online=site.is_online, text=format_status(site))
        logger.info(message.text)
        await self._dispatch(self._status, message)
        return message

    async def notify_error(self, site: Site, reason: str) -> ErrorMessage:
        message = ErrorMessage(site_name=site.name, reason=reason, text=format_error(site, reason))
        logger.warning(message.text)
        await self._dispatch(self._error, message)
        return message

    async def request_refresh(self) -> None:
        logger.debug("Site list changed, requesting refresh")
        await self._dispatch(self._refresh, TargetListChanged())

    async def _dispatch(self, listeners: list[Callback], event: Event) -> None:
        for callback in tuple(listeners):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Notification subscriber %r failed for %s", callback, event)
