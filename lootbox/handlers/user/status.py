# lootbox/handlers/user/status.py
from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.keyboards.main import BTN_STATUS
from lootbox.services.lootbox import LootboxService
from lootbox.utils import texts
from lootbox.utils.ensure_user import ensure_user
from lootbox.utils.reply import reply_safe

router = Router()


@router.message(Command("status"))
@router.message(F.text == BTN_STATUS)
async def status_cmd(message: Message, session: AsyncSession, lootbox_service: LootboxService) -> None:
    user = await ensure_user(session, message)
    status = await lootbox_service.spin_status(session, user_id=user.id)
    await reply_safe(message, texts.spin_status(status), parse_mode="HTML")
