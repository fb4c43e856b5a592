"""Config package initialization"""
from .settings import Settings, SiteSeed, settings

__all__ = ['Settings', 'SiteSeed', 'settings']
