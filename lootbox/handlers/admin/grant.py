# lootbox/handlers/admin/grant.py
from __future__ import annotations

import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.config import Settings
from lootbox.database.repo.users import find_user_by_ref
from lootbox.handlers.admin.guard import admin_user
from lootbox.services.errors import InvalidGrantAmount, UserNotFound
from lootbox.services.lootbox import LootboxService

log = logging.getLogger(__name__)
router = Router()

USAGE = "Usage: /grant <telegram_id|@username> <amount>"


@router.message(Command("grant"))
async def grant_cmd(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    settings: Settings,
    lootbox_service: LootboxService,
) -> None:
    admin = await admin_user(session, settings, message)
    if admin is None:
        return

    parts = (command.args or "").split()
    if len(parts) != 2:
        await message.answer(USAGE)
        return

    ref, amount_raw = parts
    try:
        amount = int(amount_raw)
    except ValueError:
        await message.answer(USAGE)
        return

    target = await find_user_by_ref(session, ref)
    if target is None:
        await message.answer(f"❌ No user {ref} (they need to /start the bot first).")
        return

    try:
        total = await lootbox_service.grant_override_spins(session, user_id=target.id, amount=amount)
    except InvalidGrantAmount:
        await message.answer("❌ Amount must be a positive number.")
        return
    except UserNotFound:
        await message.answer(f"❌ No user {ref}.")
        return

    log.info("Admin %s granted %s spins to user %s", admin.id, amount, target.id)
    await message.answer(f"✅ Granted {amount} bonus spins to {ref}. They now have {total}.")
