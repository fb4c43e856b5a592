"""Health checker performing a single reachability probe per call."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from config import settings
from models import Outcome, Site

logger = logging.getLogger(__name__)


class HealthChecker:
    """Performs one HTTP GET against a site and classifies the result."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float | None = None,
    ) -> None:
        self.session = session
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self.session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    async def check(self, site: Site) -> Outcome:
        """Probe ``site.url``. Failures come back as offline outcomes, never raised."""
        try:
            session = await self._get_session()
            async with session.get(
                site.url, timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                if response.status == 200:
                    return Outcome.up(response.status)
                logger.info("Site %s answered with HTTP %s", site.url, response.status)
                return Outcome.down(f"HTTP {response.status}", status_code=response.status)
        except asyncio.TimeoutError:
            logger.warning("Timeout checking site %s after %ss", site.url, self.timeout)
            return Outcome.down(f"timed out after {self.timeout:g}s")
        except aiohttp.ClientConnectionError as exc:
            logger.warning("Connection error checking site %s: %s", site.url, exc)
            logger.debug("Connection error details", exc_info=True)
            return Outcome.down(str(exc) or type(exc).__name__)
        except aiohttp.ClientError as exc:
            logger.warning("Error checking site %s: %s", site.url, exc)
            logger.debug("Unhandled request exception", exc_info=True)
            return Outcome.down(str(exc) or type(exc).__name__)
        except ValueError as exc:
            logger.warning("Invalid URL for site %s: %s", site.url, exc)
            return Outcome.down(str(exc) or "invalid URL")
