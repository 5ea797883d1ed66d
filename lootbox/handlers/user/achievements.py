# lootbox/handlers/user/achievements.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.services.achievements import AchievementService
from lootbox.utils import texts
from lootbox.utils.ensure_user import ensure_user
from lootbox.utils.reply import reply_safe

router = Router()


@router.message(Command("achievements"))
async def achievements_cmd(message: Message, session: AsyncSession) -> None:
    user = await ensure_user(session, message)
    report = await AchievementService.report(session, user_id=user.id)
    await reply_safe(message, texts.achievements(report), parse_mode="HTML")
