# lootbox/handlers/admin/rescore.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.config import Settings
from lootbox.handlers.admin.guard import admin_user
from lootbox.services.catalog import CatalogService

router = Router()


@router.message(Command("rescore"))
async def rescore_cmd(message: Message, session: AsyncSession, settings: Settings) -> None:
    if await admin_user(session, settings, message) is None:
        return

    res = await CatalogService.refresh_quality_scores(session)
    await message.answer(
        f"🔄 Rescored {res.scanned} titles: {res.updated} changed, {res.invalid} missing review data."
    )
