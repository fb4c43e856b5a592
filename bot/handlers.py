"""Telegram command handlers for the bot."""
from __future__ import annotations

import html
import logging
from typing import Callable, Sequence

from aiogram import Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message

from bot.filters import IsAdmin
from config import settings
from models import IntervalUnit, Site, SiteStatus
from services.errors import SiteMonitorError
from services.monitor import Monitor

logger = logging.getLogger(__name__)
router = Router()

EMPTY_LIST_TEXT = "No sites are being monitored."

STATUS_ICONS = {
    SiteStatus.ONLINE: "🟢",
    SiteStatus.OFFLINE: "🔴",
    SiteStatus.UNKNOWN: "⚪",
}

HELP_TEXT = (
    "📋 <b>Available commands</b>\n"
    "/add Name | https://example.com | minutes - Start monitoring a site\n"
    "/remove URL - Stop monitoring and forget a site\n"
    "/stop URL - Same as /remove\n"
    "/check URL - Check a site right now\n"
    "/list - Show monitored sites\n"
    "/help - Show this help"
)


def _extract_user_id(message: Message) -> int | None:
    return message.from_user.id if message.from_user else None


def _format_interval(seconds: float) -> str:
    if seconds % 60 == 0:
        minutes = int(seconds // 60)
        return "every minute" if minutes == 1 else f"every {minutes} minutes"
    return "every second" if seconds == 1 else f"every {seconds:g} seconds"


def _parse_add_payload(payload: str) -> tuple[str, str, IntervalUnit]:
    if not payload:
        raise ValueError("Usage: /add Name | URL | minutes or seconds")

    parts = [part.strip() for part in payload.split("|")]
    if len(parts) < 2:
        raise ValueError("Separate the name and the URL with |")

    name, url = parts[0], parts[1]
    if not name:
        raise ValueError("Enter a name for the site")
    if not url:
        raise ValueError("Enter the site URL")

    unit = IntervalUnit.parse(parts[2]) if len(parts) > 2 and parts[2] else IntervalUnit.MINUTES
    return name, url, unit


def _parse_url(payload: str | None) -> str:
    url = (payload or "").strip()
    if not url:
        raise ValueError("Enter the site URL")
    return url


def _compose_site_list(sites: Sequence[Site], interval_for: Callable[[IntervalUnit], float]) -> str:
    if not sites:
        return EMPTY_LIST_TEXT

    lines = [f"📊 <b>Monitored sites</b> ({len(sites)})", ""]
    for site in sites:
        icon = STATUS_ICONS[site.status]
        lines.append(f"{icon} <b>{html.escape(site.name)}</b> - {site.status.value}")
        lines.append(f"    <code>{html.escape(site.url)}</code> ({_format_interval(interval_for(site.interval_unit))})")
        if site.status is SiteStatus.OFFLINE and site.last_reason:
            lines.append(f"    <i>{html.escape(site.last_reason)}</i>")
    return "\n".join(lines)


async def _answer_error(message: Message, exc: Exception) -> None:
    await message.answer(
        f"❌ <b>Error:</b> {html.escape(str(exc))}",
        parse_mode='HTML'
    )


@router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    user_id = _extract_user_id(message)
    logger.info("User %s started the bot", user_id)

    is_admin = user_id in settings.ADMIN_CHAT_IDS if user_id else False

    if is_admin:
        await message.answer(
            "✅ <b>Site monitor is running.</b>\n\n" + HELP_TEXT,
            parse_mode='HTML'
        )
    else:
        await message.answer("👋 Hi! This bot is for administrators only.")


@router.message(Command("help"), IsAdmin())
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT, parse_mode='HTML')


@router.message(Command("add"), IsAdmin())
async def cmd_add(message: Message, command: CommandObject, monitor: Monitor) -> None:
    """Handle ``/add Name | URL | minutes``."""
    try:
        name, url, unit = _parse_add_payload(command.args or "")
        site = await monitor.add_site(name, url, unit)
    except (SiteMonitorError, ValueError) as exc:
        await _answer_error(message, exc)
        return

    logger.info("Admin %s added %s", _extract_user_id(message), site.url)
    cadence = _format_interval(monitor.scheduler.interval_for(site.interval_unit))
    await message.answer(
        f"➕ Monitoring <b>{html.escape(site.name)}</b> {cadence}.",
        parse_mode='HTML'
    )


@router.message(Command("remove", "stop"), IsAdmin())
async def cmd_remove(message: Message, command: CommandObject, monitor: Monitor) -> None:
    try:
        site = await monitor.stop_monitoring(_parse_url(command.args))
    except (SiteMonitorError, ValueError) as exc:
        await _answer_error(message, exc)
        return

    logger.info("Admin %s removed %s", _extract_user_id(message), site.url)
    await message.answer(f"🗑 Removed <b>{html.escape(site.name)}</b>.", parse_mode='HTML')


@router.message(Command("check"), IsAdmin())
async def cmd_check(message: Message, command: CommandObject, monitor: Monitor) -> None:
    # the outcome itself reaches admins through the notification sink
    try:
        await monitor.check_now(_parse_url(command.args))
    except (SiteMonitorError, ValueError) as exc:
        await _answer_error(message, exc)


@router.message(Command("list", "status"), IsAdmin())
async def cmd_list(message: Message, monitor: Monitor) -> None:
    await message.answer(_compose_site_list(monitor.list_sites(), monitor.scheduler.interval_for), parse_mode='HTML')
