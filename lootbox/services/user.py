# lootbox/services/user.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import User
from lootbox.database.repo import users as users_repo
from lootbox.services.errors import InvalidTimezone
from lootbox.utils.dates import is_valid_timezone

log = logging.getLogger(__name__)


class UserService:
    @staticmethod
    async def set_timezone(session: AsyncSession, user: User, tz_name: str | None) -> str | None:
        """
        Store an IANA timezone for the user; empty clears it (back to the
        default). Takes effect at the user's next spin.
        """
        name = (tz_name or "").strip() or None
        if name is not None and not is_valid_timezone(name):
            raise InvalidTimezone(name)

        await users_repo.set_timezone(session, user.id, name)
        await session.commit()
        user.timezone = name
        log.info("Timezone set: user=%s tz=%s", user.id, name)
        return name
