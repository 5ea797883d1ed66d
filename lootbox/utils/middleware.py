# lootbox/utils/middleware.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.repo.users import upsert_user_from_event
from lootbox.database.session import Database

log = logging.getLogger(__name__)


class DbSessionMiddleware(BaseMiddleware):
    """
    One AsyncSession per update, injected as `session`.

    The sender's users row is upserted and committed before the handler runs,
    so a spin that rolls back never takes the user row with it. The row is
    injected as `db_user` when the update has a sender.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        async with self.db.session() as session:
            data["session"] = session
            await self._touch_user(session, event, data)

            try:
                result = await handler(event, data)
            except Exception:
                await session.rollback()
                raise
            await session.commit()
            return result

    @staticmethod
    async def _touch_user(session: AsyncSession, event: TelegramObject, data: Dict[str, Any]) -> None:
        user = await upsert_user_from_event(session, event)
        if user is None:
            return
        await session.commit()
        data["db_user"] = user
        log.debug("Update from user=%s", user.id)
