# lootbox/handlers/user/spin.py
from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import ContentType
from lootbox.keyboards.main import BTN_MOVIE, BTN_SERIES
from lootbox.services.errors import (
    DailyLimitReached,
    InvalidType,
    NoContentAvailable,
    PersistenceFailure,
)
from lootbox.services.lootbox import LootboxService
from lootbox.utils import texts
from lootbox.utils.ensure_user import ensure_user
from lootbox.utils.reply import reply_safe

log = logging.getLogger(__name__)
router = Router()


async def _open(
    message: Message,
    session: AsyncSession,
    lootbox_service: LootboxService,
    content_type: object,
) -> None:
    user = await ensure_user(session, message)

    try:
        outcome = await lootbox_service.open_lootbox(session, user_id=user.id, content_type=content_type)
    except InvalidType:
        text = "Usage: /spin movie or /spin series"
    except DailyLimitReached as e:
        text = texts.limit_reached(e)
    except NoContentAvailable as e:
        log.warning("No content for spin: %s", e)
        text = f"📭 No {e.content_type} boxes are stocked right now. Try the other type!"
    except PersistenceFailure:
        text = "⚠️ Something went wrong opening your box. No spin was used, please try again."
    else:
        text = texts.spin_outcome(outcome)

    await reply_safe(message, text, parse_mode="HTML")


@router.message(Command("spin"))
async def spin_cmd(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    lootbox_service: LootboxService,
) -> None:
    await _open(message, session, lootbox_service, (command.args or "").strip())


@router.message(Command("movie"))
@router.message(F.text == BTN_MOVIE)
async def movie_cmd(message: Message, session: AsyncSession, lootbox_service: LootboxService) -> None:
    await _open(message, session, lootbox_service, ContentType.MOVIE)


@router.message(Command("series"))
@router.message(F.text == BTN_SERIES)
async def series_cmd(message: Message, session: AsyncSession, lootbox_service: LootboxService) -> None:
    await _open(message, session, lootbox_service, ContentType.SERIES)
