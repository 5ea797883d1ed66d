# lootbox/services/entitlement.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import User
from lootbox.database.repo import users as users_repo
from lootbox.services.errors import DailyLimitReached, InvalidGrantAmount, UserNotFound
from lootbox.utils.dates import local_today, next_local_midnight, resolve_zone, utc_now

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entitlement:
    user_id: int
    used: int
    remaining: int
    daily_limit: int
    admin_override: int
    reset_date: date
    next_reset_at: datetime


class EntitlementLedger:
    """
    Per-user daily spin budget.

    State lives on the users row (daily_spins_used, daily_spins_reset_date,
    admin_override_spins). "Today" is the user's own calendar day; users
    without a timezone use `default_timezone`.

    Banked override spins are spent before the daily allowance.
    """

    def __init__(
        self,
        default_timezone: str = "UTC",
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.default_timezone = default_timezone
        self.clock = clock

    # ----------------------------
    # time
    # ----------------------------
    def today_in(self, tz_name: str | None) -> date:
        return local_today(resolve_zone(tz_name, self.default_timezone), self.clock())

    def next_reset_in(self, tz_name: str | None) -> datetime:
        return next_local_midnight(resolve_zone(tz_name, self.default_timezone), self.clock())

    def today_for(self, user: User) -> date:
        return self.today_in(user.timezone)

    def next_reset_at(self, user: User) -> datetime:
        return self.next_reset_in(user.timezone)

    # ----------------------------
    # projections
    # ----------------------------
    @staticmethod
    def remaining_spins(used: int, daily_limit: int, admin_override: int) -> int:
        return max(0, daily_limit - used) + admin_override

    def snapshot(self, user: User, daily_limit: int) -> Entitlement:
        """Read-only view; a stale counter reads as 0 without being written."""
        today = self.today_for(user)
        used = int(user.daily_spins_used or 0) if user.daily_spins_reset_date == today else 0
        override = int(user.admin_override_spins or 0)
        return Entitlement(
            user_id=user.id,
            used=used,
            remaining=self.remaining_spins(used, daily_limit, override),
            daily_limit=daily_limit,
            admin_override=override,
            reset_date=today,
            next_reset_at=self.next_reset_at(user),
        )

    # ----------------------------
    # transitions
    # ----------------------------
    async def check_and_reserve(self, session: AsyncSession, *, user_id: int, daily_limit: int) -> User:
        """
        Roll the daily counter over if the user's day changed (committed right
        away, whatever happens to the spin), then check there is a spin to
        spend. Consumption itself happens in `commit`.
        """
        user = await users_repo.get_user(session, user_id)
        if user is None:
            raise UserNotFound(user_id)

        today = self.today_for(user)
        if user.daily_spins_reset_date != today:
            if await users_repo.apply_daily_reset(session, user_id, today):
                log.debug("Daily spins reset: user=%s day=%s", user_id, today)
            await session.commit()
            user = await users_repo.get_user(session, user_id)

        if user.daily_spins_used >= daily_limit and user.admin_override_spins <= 0:
            log.info("Daily limit reached: user=%s used=%s limit=%s", user_id, user.daily_spins_used, daily_limit)
            raise DailyLimitReached(reset_at=self.next_reset_at(user), daily_limit=daily_limit)

        return user

    async def commit(
        self,
        session: AsyncSession,
        *,
        user_id: int,
        tz_name: str | None,
        daily_limit: int,
    ) -> None:
        """
        Spend one spin inside the caller's transaction.
        The guarded UPDATE refuses if another writer took the last spin first.
        """
        if not await users_repo.consume_spin(session, user_id, daily_limit):
            raise DailyLimitReached(reset_at=self.next_reset_in(tz_name), daily_limit=daily_limit)

    async def grant_override_spins(self, session: AsyncSession, *, user_id: int, amount: int) -> int:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidGrantAmount(amount)

        if not await users_repo.add_override_spins(session, user_id, amount):
            raise UserNotFound(user_id)
        await session.commit()

        user = await users_repo.get_user(session, user_id)
        log.info("Granted %s override spins: user=%s total=%s", amount, user_id, user.admin_override_spins)
        return int(user.admin_override_spins)
