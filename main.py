import asyncio
import logging
from logging.handlers import RotatingFileHandler

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from bot import router
from config import settings
from services import AdminAlertHandler, AdminNotificationSink, Monitor

logger = logging.getLogger("sitemonitor")


# ensure logs are recorded both to stdout and to a rotating file
def configure_logging() -> None:
    log_dir = settings.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "sitemonitor.log"

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        handlers=[
            logging.StreamHandler(),
            RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            ),
        ],
        force=True,
    )
    # APScheduler logs every job execution at INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


async def main() -> None:
    settings.validate()

    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    logging.getLogger().addHandler(
        AdminAlertHandler(bot, settings.ADMIN_CHAT_IDS, loop=asyncio.get_running_loop())
    )

    monitor = Monitor()
    sink = AdminNotificationSink(bot, settings.ADMIN_CHAT_IDS)
    sink.attach(monitor.notifier)

    dispatcher = Dispatcher(monitor=monitor)
    dispatcher.include_router(router)

    monitor.start()
    await monitor.add_sites(settings.MONITOR_SITES)

    logger.info(
        "Bot started. Monitoring %s site(s), minutes cadence %gs, seconds cadence %gs",
        len(monitor.list_sites()),
        settings.MINUTES_INTERVAL_SECONDS,
        settings.SECONDS_INTERVAL_SECONDS,
    )

    try:
        await dispatcher.start_polling(bot)
    finally:
        sink.detach()
        await monitor.shutdown()
        await bot.session.close()


def run() -> None:
    configure_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception:
        logger.exception("Fatal error")


if __name__ == "__main__":
    run()
