# lootbox/scheduler/jobs.py
from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from lootbox.config.settings import Settings
from lootbox.database.session import Database
from lootbox.services.catalog import CatalogService

log = logging.getLogger(__name__)


async def refresh_quality_scores_job(db: Database) -> None:
    """Nightly rewrite of cached quality scores with the current formula."""
    try:
        async with db.session() as session:
            await CatalogService.refresh_quality_scores(session)
    except Exception:
        log.exception("Quality score refresh failed")


def build_scheduler(db: Database, settings: Settings) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(timezone=settings.default_timezone)

    scheduler.add_job(
        refresh_quality_scores_job,
        trigger=CronTrigger(hour=settings.rescore_hour, minute=0),
        kwargs={"db": db},
        id="refresh_quality_scores",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    return scheduler
