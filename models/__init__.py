"""Models package initialization"""
from .outcome import Outcome
from .site import IntervalUnit, Site, SiteStatus

__all__ = ['IntervalUnit', 'Outcome', 'Site', 'SiteStatus']
