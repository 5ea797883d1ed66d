# lootbox/handlers/admin/roles.py
from __future__ import annotations

import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.config import Settings
from lootbox.database.repo.users import find_user_by_ref, set_admin
from lootbox.handlers.admin.guard import root_user

log = logging.getLogger(__name__)
router = Router()


async def _set_role(message: Message, ref: str, session: AsyncSession, settings: Settings, flag: bool) -> None:
    root = await root_user(session, settings, message)
    if root is None:
        return

    ref = ref.strip()
    if not ref:
        await message.answer(f"Usage: /{'promote' if flag else 'demote'} <telegram_id|@username>")
        return

    target = await find_user_by_ref(session, ref)
    if target is None:
        await message.answer(f"❌ No user {ref} (they need to /start the bot first).")
        return

    await set_admin(session, target.id, flag)
    await session.commit()

    log.info("Root %s set is_admin=%s for user %s", root.id, flag, target.id)
    if flag:
        await message.answer(f"✅ {ref} is now an admin.")
    else:
        await message.answer(f"✅ {ref} is no longer an admin.")


@router.message(Command("promote"))
async def promote_cmd(message: Message, command: CommandObject, session: AsyncSession, settings: Settings) -> None:
    await _set_role(message, command.args or "", session, settings, True)


@router.message(Command("demote"))
async def demote_cmd(message: Message, command: CommandObject, session: AsyncSession, settings: Settings) -> None:
    await _set_role(message, command.args or "", session, settings, False)
