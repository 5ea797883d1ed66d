# lootbox/handlers/admin/dashboard.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.config import Settings
from lootbox.handlers.admin.guard import admin_user
from lootbox.services.dashboard import DashboardService
from lootbox.utils import texts

router = Router()


@router.message(Command("adminstats"))
async def adminstats_cmd(message: Message, session: AsyncSession, settings: Settings) -> None:
    if await admin_user(session, settings, message) is None:
        return

    stats = await DashboardService.stats(session)
    await message.answer(texts.dashboard_stats(stats), parse_mode="HTML")


@router.message(Command("activity"))
async def activity_cmd(message: Message, command: CommandObject, session: AsyncSession, settings: Settings) -> None:
    if await admin_user(session, settings, message) is None:
        return

    arg = (command.args or "").strip()
    page = int(arg) if arg.isdecimal() else 1

    result = await DashboardService.activity(session, page=page)
    if not result.total:
        await message.answer("🕒 No spins recorded yet.")
        return
    await message.answer(texts.activity_log(result), parse_mode="HTML")
