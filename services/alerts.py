"""Utilities for delivering status messages and errors to administrators."""
from __future__ import annotations

import asyncio
import html
import logging
import sys
import traceback
from datetime import UTC, datetime
from typing import Callable, Sequence

from aiogram import Bot

from services.notifier import ErrorMessage, Notifier, StatusMessage


MAX_ALERT_LENGTH = 3500


async def send_admin_message(bot: Bot, admin_chat_ids: Sequence[int], message: str) -> None:
    """Send a message to every admin chat, best effort.

    Args:
        bot: Telegram bot instance
        admin_chat_ids: List of admin chat IDs
        message: HTML formatted text to send
    """
    if not admin_chat_ids:
        return

    for chat_id in admin_chat_ids:
        try:
            await bot.send_message(chat_id, message, parse_mode="HTML")
        except Exception as exc:
            sys.stderr.write(f"Failed to send message to {chat_id}: {exc!r}\n")


class AdminNotificationSink:
    """Forwards status and error events from a :class:`Notifier` to admin chats."""

    def __init__(self, bot: Bot, admin_chat_ids: Sequence[int]) -> None:
        self._bot = bot
        self._admin_chat_ids = tuple(admin_chat_ids)
        self._unsubscribers: list[Callable[[], None]] = []

    def attach(self, notifier: Notifier) -> None:
        self._unsubscribers.append(notifier.subscribe_status(self.on_status))
        self._unsubscribers.append(notifier.subscribe_error(self.on_error))

    def detach(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    async def on_status(self, message: StatusMessage) -> None:
        icon = "🟢" if message.online else "🔴"
        await send_admin_message(self._bot, self._admin_chat_ids, f"{icon} {html.escape(message.text)}")

    async def on_error(self, message: ErrorMessage) -> None:
        await send_admin_message(self._bot, self._admin_chat_ids, f"⚠️ {html.escape(message.text)}")


class AdminAlertHandler(logging.Handler):
    """Logging handler that forwards error messages to Telegram admins."""

    def __init__(
        self,
        bot: Bot,
        admin_chat_ids: Sequence[int],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        super().__init__(level=logging.ERROR)
        self._bot = bot
        self._admin_chat_ids = tuple(admin_chat_ids)
        self._loop = loop
        self.setFormatter(logging.Formatter("%(message)s"))

    async def _notify(self, message: str) -> None:
        if not self._admin_chat_ids:
            return

        for chat_id in self._admin_chat_ids:
            try:
                await self._bot.send_message(chat_id, message, parse_mode="HTML")
            except Exception as exc:  # pragma: no cover - best-effort logging
                sys.stderr.write(
                    f"Failed to notify admin {chat_id}: {exc!r}\n"
                )

    def _build_message(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S %Z")
        location = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            details = "".join(traceback.format_exception(*record.exc_info))
        elif record.stack_info:
            details = record.stack_info
        else:
            details = self.format(record)

        details = details[-MAX_ALERT_LENGTH:]
        header = (
            f"⚠️ <b>{record.levelname} in site monitor</b>\n"
            f"Time: {timestamp}\n"
            f"Logger: <code>{html.escape(record.name)}</code>\n"
            f"Source: <code>{html.escape(location)}</code>\n\n"
        )
        # sent with parse_mode="HTML", so log text must be escaped
        return f"{header}<pre>{html.escape(details)}</pre>"

    def emit(self, record: logging.LogRecord) -> None:
        if not self._admin_chat_ids or record.levelno < logging.ERROR:
            return

        message = self._build_message(record)
        coroutine = self._notify(message)

        loop = self._loop
        if loop is None or loop.is_closed():
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None

        if loop and loop.is_running():
            try:
                current_loop = asyncio.get_running_loop()
            except RuntimeError:
                current_loop = None

            if current_loop is loop:
                loop.call_soon(asyncio.create_task, coroutine)
            else:
                loop.call_soon_threadsafe(asyncio.create_task, coroutine)
        else:
            asyncio.run(coroutine)


__all__ = ["AdminAlertHandler", "AdminNotificationSink", "MAX_ALERT_LENGTH", "send_admin_message"]
