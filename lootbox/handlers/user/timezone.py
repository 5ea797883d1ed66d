# lootbox/handlers/user/timezone.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.config import Settings
from lootbox.services.errors import InvalidTimezone
from lootbox.services.user import UserService
from lootbox.utils.ensure_user import ensure_user
from lootbox.utils.reply import reply_safe

router = Router()

CLEAR_WORDS = {"default", "reset", "clear"}


@router.message(Command("timezone"))
async def timezone_cmd(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    settings: Settings,
) -> None:
    user = await ensure_user(session, message)
    arg = (command.args or "").strip()

    if not arg:
        current = user.timezone or f"{settings.default_timezone} (default)"
        await reply_safe(
            message,
            f"🕒 Your timezone: <b>{current}</b>\n"
            "Change it with /timezone Europe/Berlin, or /timezone default.",
            parse_mode="HTML",
        )
        return

    try:
        name = await UserService.set_timezone(session, user, None if arg.lower() in CLEAR_WORDS else arg)
    except InvalidTimezone:
        await reply_safe(message, "❌ Unknown timezone. Use a name like Europe/Berlin or America/New_York.")
        return

    shown = name or f"{settings.default_timezone} (default)"
    await reply_safe(message, f"✅ Timezone set to <b>{shown}</b>.", parse_mode="HTML")
