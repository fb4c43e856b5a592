"""Services package initialization"""
from .alerts import AdminAlertHandler, AdminNotificationSink
from .checker import HealthChecker
from .errors import AlreadyScheduledError, DuplicateTargetError, NotFoundError, SiteMonitorError
from .monitor import Monitor
from .notifier import Notifier
from .registry import SiteRegistry
from .scheduler import SiteScheduler

__all__ = [
    "AdminAlertHandler",
    "AdminNotificationSink",
    "AlreadyScheduledError",
    "DuplicateTargetError",
    "HealthChecker",
    "Monitor",
    "NotFoundError",
    "Notifier",
    "SiteMonitorError",
    "SiteRegistry",
    "SiteScheduler",
]
