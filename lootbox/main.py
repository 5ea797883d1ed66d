# lootbox/main.py
import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from lootbox.config import Settings
from lootbox.database import Database
from lootbox.handlers import router as handlers_router
from lootbox.scheduler import setup_scheduler
from lootbox.services.catalog import CatalogService
from lootbox.services.entitlement import EntitlementLedger
from lootbox.services.lootbox import LootboxService
from lootbox.utils.middleware import DbSessionMiddleware


def setup_logging(is_dev: bool) -> None:
    """
    - app logs: INFO (or DEBUG in dev)
    - SQLAlchemy logs: WARNING+ (no query/pool spam)
    """
    app_level = logging.DEBUG if is_dev else logging.INFO

    logging.basicConfig(
        level=app_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    for name in (
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "aiosqlite",
        "apscheduler",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)
    log = logging.getLogger("lootbox")

    db = Database.from_settings(settings)
    await db.init_models()
    log.info("DB initialized")

    # cached scores may predate the current formula
    async with db.session() as session:
        await CatalogService.refresh_quality_scores(session)

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )

    ledger = EntitlementLedger(settings.default_timezone)
    lootbox_service = LootboxService(ledger)

    dp = Dispatcher()

    # Inject workflow data
    dp.workflow_data["settings"] = settings
    dp.workflow_data["db"] = db
    dp.workflow_data["lootbox_service"] = lootbox_service

    # DB session per update
    dp.update.middleware(DbSessionMiddleware(db))

    dp.include_router(handlers_router)

    scheduler = setup_scheduler(db=db, settings=settings)
    log.info("Scheduler started")

    try:
        await dp.start_polling(bot)
    except (asyncio.CancelledError, KeyboardInterrupt):
        pass
    except Exception:
        log.exception("Bot crashed")
        raise
    finally:
        try:
            scheduler.shutdown(wait=False)
        except Exception:
            log.exception("Failed to shutdown scheduler")

        try:
            await db.close()
        except Exception:
            log.exception("Failed to close DB")

        try:
            await bot.session.close()
        except Exception:
            log.exception("Failed to close bot session")


if __name__ == "__main__":
    asyncio.run(main())
