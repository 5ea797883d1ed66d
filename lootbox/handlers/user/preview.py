# lootbox/handlers/user/preview.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.services.errors import InvalidType, NoContentAvailable
from lootbox.services.lootbox import LootboxService
from lootbox.utils import texts
from lootbox.utils.reply import reply_safe

router = Router()


@router.message(Command("preview"))
async def preview_cmd(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    lootbox_service: LootboxService,
) -> None:
    # guest path: no user row, no budget, nothing written
    try:
        outcome = await lootbox_service.open_guest_lootbox(session, content_type=command.args)
    except InvalidType:
        text = "Usage: /preview movie or /preview series"
    except NoContentAvailable as e:
        text = f"📭 No {e.content_type} titles yet."
    else:
        text = texts.spin_outcome(outcome, guest=True)

    await reply_safe(message, text, parse_mode="HTML")
