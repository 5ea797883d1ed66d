# lootbox/services/dashboard.py
"""Admin-side numbers across every user: dashboard counters and the spin activity log."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import Content, ContentType, RarityTier, User, UserSpin
from lootbox.database.repo import content_repo, unlock_repo
from lootbox.database.repo import users as users_repo
from lootbox.services.collection import Page, page_args
from lootbox.utils.dates import utc_now

ACTIVE_USER_WINDOW = timedelta(days=7)
TYPE_BREAKDOWN_WINDOW = timedelta(days=30)


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total_users: int
    active_users: int  # spun in the last 7 days
    total_content: int
    movies: int
    series: int
    spins_today: int  # since 00:00 UTC
    total_unlocks: int
    unlocks_by_tier: dict[RarityTier, int]
    spins_by_type: dict[ContentType, int]  # last 30 days


@dataclass(frozen=True, slots=True)
class ActivityEntry:
    spin: UserSpin
    user: User
    content: Content


class DashboardService:
    MAX_PAGE_SIZE = 100

    @staticmethod
    async def stats(session: AsyncSession, *, now: datetime | None = None) -> DashboardStats:
        now = (now or utc_now()).astimezone(timezone.utc).replace(tzinfo=None)
        day_start = datetime.combine(now.date(), time.min)

        by_type = await content_repo.count_content_by_type(session)
        return DashboardStats(
            total_users=await users_repo.count_users(session),
            active_users=await unlock_repo.count_spinning_users(session, now - ACTIVE_USER_WINDOW),
            total_content=sum(by_type.values()),
            movies=by_type.get(ContentType.MOVIE, 0),
            series=by_type.get(ContentType.SERIES, 0),
            spins_today=await unlock_repo.count_all_spins(session, since=day_start),
            total_unlocks=await unlock_repo.count_all_unlocks(session),
            unlocks_by_tier=await unlock_repo.all_unlocks_by_tier(session),
            spins_by_type=await unlock_repo.all_spins_by_type(session, now - TYPE_BREAKDOWN_WINDOW),
        )

    @staticmethod
    async def activity(session: AsyncSession, *, page: int = 1, limit: int = 20) -> Page[ActivityEntry]:
        page, limit, offset = page_args(page, limit, DashboardService.MAX_PAGE_SIZE)
        rows, total = await unlock_repo.list_recent_activity(session, limit=limit, offset=offset)
        items = [ActivityEntry(spin=s, user=u, content=c) for s, u, c in rows]
        return Page(items=items, page=page, limit=limit, total=total)
