# lootbox/handlers/common.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.utils.ensure_user import ensure_user
from lootbox.utils.reply import reply_safe

router = Router(name="common")

HELP_TEXT = (
    "📌 Available commands:\n"
    "/movie, /series — open a loot box\n"
    "/spin &lt;movie|series&gt; — same thing\n"
    "/status — spins left today\n"
    "/collection [movie|series] [tier] [page] — your trophy cabinet\n"
    "/history [page] — recent spins\n"
    "/stats — collection summary\n"
    "/achievements — milestones and progress\n"
    "/timezone [Area/City] — when your daily spins reset\n"
    "/preview &lt;movie|series&gt; — peek at a random title (not saved)"
)


@router.message(CommandStart())
async def cmd_start(message: Message, session: AsyncSession) -> None:
    await ensure_user(session, message)
    await reply_safe(
        message,
        "🎁 <b>Welcome to the loot box!</b>\n"
        "Every spin reveals a movie or series. The better the reviews, the rarer the drop.\n\n"
        "Use the menu buttons below 👇",
        parse_mode="HTML",
    )


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await reply_safe(message, HELP_TEXT, parse_mode="HTML")
