"""Result of a single health check."""
from __future__ import annotations

from dataclasses import dataclass

from .site import SiteStatus


@dataclass(frozen=True, slots=True)
class Outcome:
    """Online, or Offline with a human-readable reason.

    ``status_code`` is set whenever the endpoint answered, so callers can tell
    a non-200 response apart from a network failure.
    """

    online: bool
    reason: str | None = None
    status_code: int | None = None

    @classmethod
    def up(cls, status_code: int = 200) -> "Outcome":
        return cls(online=True, status_code=status_code)

    @classmethod
    def down(cls, reason: str, status_code: int | None = None) -> "Outcome":
        return cls(online=False, reason=reason, status_code=status_code)

    @property
    def status(self) -> SiteStatus:
        return SiteStatus.ONLINE if self.online else SiteStatus.OFFLINE

    @property
    def responded(self) -> bool:
        return self.status_code is not None
