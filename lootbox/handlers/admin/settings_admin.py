# lootbox/handlers/admin/settings_admin.py
from __future__ import annotations

import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.config import Settings
from lootbox.database.repo.config_repo import (
    DAILY_SPIN_LIMIT,
    QUALITY_SCORE_THRESHOLD,
    get_config,
    set_setting,
)
from lootbox.handlers.admin.guard import admin_user
from lootbox.services.errors import InvalidSetting

log = logging.getLogger(__name__)
router = Router()


@router.message(Command("settings"))
async def settings_cmd(message: Message, session: AsyncSession, settings: Settings) -> None:
    if await admin_user(session, settings, message) is None:
        return

    cfg = await get_config(session)
    await message.answer(
        "⚙️ <b>Settings</b>\n"
        f"Daily spin limit: <b>{cfg.daily_spin_limit}</b> (/setlimit)\n"
        f"Quality threshold: <b>{cfg.quality_score_threshold}</b> (/setthreshold)\n"
        f"Default timezone: <b>{settings.default_timezone}</b> (env)",
        parse_mode="HTML",
    )


async def _update(message: Message, command: CommandObject, session: AsyncSession, settings: Settings, key: str) -> None:
    admin = await admin_user(session, settings, message)
    if admin is None:
        return

    try:
        value = await set_setting(session, key, (command.args or "").strip())
    except InvalidSetting as e:
        await message.answer(f"❌ {e}")
        return
    await session.commit()

    log.info("Admin %s set %s=%s", admin.id, key, value)
    await message.answer(f"✅ {key} = {value}")


@router.message(Command("setlimit"))
async def setlimit_cmd(message: Message, command: CommandObject, session: AsyncSession, settings: Settings) -> None:
    await _update(message, command, session, settings, DAILY_SPIN_LIMIT)


@router.message(Command("setthreshold"))
async def setthreshold_cmd(message: Message, command: CommandObject, session: AsyncSession, settings: Settings) -> None:
    await _update(message, command, session, settings, QUALITY_SCORE_THRESHOLD)
