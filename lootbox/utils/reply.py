# lootbox/utils/reply.py
from __future__ import annotations

from aiogram.enums import ChatType
from aiogram.types import Message, ReplyKeyboardMarkup

from lootbox.keyboards.main import main_menu_kb


def menu_for(message: Message) -> ReplyKeyboardMarkup | None:
    # box buttons only in a private chat with the bot
    return main_menu_kb() if message.chat.type == ChatType.PRIVATE else None


async def reply_safe(message: Message, text: str, **kwargs) -> None:
    kwargs.setdefault("reply_markup", menu_for(message))
    await message.answer(text, **kwargs)
