"""Configuration helpers for environment-driven settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

from models import IntervalUnit

if os.getenv("PYTEST_CURRENT_TEST") is None:
    load_dotenv()


def _split_csv(value: str, separator: str = ",") -> Tuple[str, ...]:
    return tuple(entry.strip() for entry in value.split(separator) if entry.strip())


def _positive_float(name: str, default: str) -> float:
    try:
        value = float(os.getenv(name, default))
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


@dataclass(frozen=True, slots=True)
class SiteSeed:
    """Site registered at start-up from MONITOR_SITES."""

    name: str
    url: str
    interval_unit: IntervalUnit = IntervalUnit.MINUTES


def _parse_sites(value: str) -> Tuple[SiteSeed, ...]:
    seeds = []
    for entry in _split_csv(value, ";"):
        parts = [part.strip() for part in entry.split("|")]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise ValueError(
                f"MONITOR_SITES entry {entry!r} must look like name|url|minutes"
            )
        unit = IntervalUnit.parse(parts[2]) if len(parts) > 2 and parts[2] else IntervalUnit.MINUTES
        seeds.append(SiteSeed(name=parts[0], url=parts[1], interval_unit=unit))
    return tuple(seeds)


@dataclass(slots=True)
class Settings:
    """Runtime application settings sourced from environment variables."""

    BOT_TOKEN: str = field(init=False)
    ADMIN_CHAT_IDS: Tuple[int, ...] = field(init=False)
    REQUEST_TIMEOUT: float = field(init=False)
    MINUTES_INTERVAL_SECONDS: float = field(init=False)
    SECONDS_INTERVAL_SECONDS: float = field(init=False)
    MONITOR_SITES: Tuple[SiteSeed, ...] = field(init=False)
    LOG_DIR: Path = field(init=False)

    def __post_init__(self) -> None:
        self.reload()

    def reload(self) -> None:
        self.BOT_TOKEN = os.getenv("BOT_TOKEN", "").strip()

        try:
            self.ADMIN_CHAT_IDS = tuple(
                int(chat_id)
                for chat_id in _split_csv(os.getenv("ADMIN_CHAT_IDS", ""))
            )
        except ValueError as exc:
            raise ValueError("ADMIN_CHAT_IDS must be a comma separated list of integers") from exc

        self.REQUEST_TIMEOUT = _positive_float("REQUEST_TIMEOUT", "10")
        self.MINUTES_INTERVAL_SECONDS = _positive_float("MINUTES_INTERVAL_SECONDS", "60")
        self.SECONDS_INTERVAL_SECONDS = _positive_float("SECONDS_INTERVAL_SECONDS", "1")

        self.MONITOR_SITES = _parse_sites(os.getenv("MONITOR_SITES", ""))

        log_dir = Path(os.getenv("LOG_DIR", "logs").strip() or "logs")
        if not log_dir.is_absolute():
            log_dir = Path.cwd() / log_dir
        self.LOG_DIR = log_dir

    def interval_seconds(self, unit: IntervalUnit) -> float:
        if unit is IntervalUnit.SECONDS:
            return self.SECONDS_INTERVAL_SECONDS
        return self.MINUTES_INTERVAL_SECONDS

    def validate(self) -> None:
        if not self.BOT_TOKEN:
            raise ValueError("BOT_TOKEN is required in .env file")
        if not self.ADMIN_CHAT_IDS:
            raise ValueError("ADMIN_CHAT_IDS is required in .env file")

settings = Settings()
