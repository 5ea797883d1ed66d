# lootbox/handlers/user/collection.py
from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import ContentType, RarityTier
from lootbox.keyboards.main import BTN_COLLECTION
from lootbox.services.collection import CollectionService
from lootbox.services.rarity import parse_tier, rarity_of
from lootbox.utils import texts
from lootbox.utils.ensure_user import ensure_user
from lootbox.utils.reply import reply_safe

router = Router()


def parse_collection_args(raw: str | None) -> tuple[ContentType | None, RarityTier | None, int]:
    """
    Args in any order: a type, a tier, a page number.
    Unknown words are ignored.
    """
    ctype = None
    tier = None
    page = 1
    for word in (raw or "").lower().split():
        if word.isdecimal():
            page = max(1, int(word))
        elif word in {t.value for t in ContentType}:
            ctype = ContentType(word)
        elif parse_tier(word) is not None:
            tier = parse_tier(word)
    return ctype, tier, page


def next_page_command(ctype: ContentType | None, tier: RarityTier | None, page: int) -> str:
    """Command that repeats the current filters for `page`."""
    words = ["/collection"]
    if ctype is not None:
        words.append(ctype.value)
    if tier is not None:
        words.append(tier.value)
    words.append(str(page))
    return " ".join(words)


@router.message(Command("collection"))
@router.message(F.text == BTN_COLLECTION)
async def collection_cmd(message: Message, session: AsyncSession, command: CommandObject | None = None) -> None:
    user = await ensure_user(session, message)
    ctype, tier, page = parse_collection_args(command.args if command else None)

    result = await CollectionService.trophy_cabinet(
        session, user_id=user.id, content_type=ctype, rarity_tier=tier, page=page
    )
    if not result.total:
        await reply_safe(message, "🏆 Nothing here yet. Open a box with /movie or /series!")
        return

    lines = [f"🏆 <b>Trophy cabinet</b> (page {result.page}/{result.pages}, {result.total} total)"]
    for unlock, content in result.items:
        r = rarity_of(unlock.rarity_tier)
        lines.append(f"{r.icon} {texts.content_title(content)}")
    if result.has_next:
        lines.append(f"\nMore: {next_page_command(ctype, tier, result.page + 1)}")

    await reply_safe(message, "\n".join(lines), parse_mode="HTML")


@router.message(Command("history"))
async def history_cmd(message: Message, command: CommandObject, session: AsyncSession) -> None:
    user = await ensure_user(session, message)
    arg = (command.args or "").strip()
    page = int(arg) if arg.isdecimal() else 1

    result = await CollectionService.spin_history(session, user_id=user.id, page=page)
    if not result.total:
        await reply_safe(message, "🎰 No spins yet.")
        return

    lines = [f"🎰 <b>Spin history</b> (page {result.page}/{result.pages})"]
    for spin, content in result.items:
        r = rarity_of(spin.rarity_tier)
        new = " 🆕" if spin.was_new_unlock else ""
        lines.append(f"{r.icon} {texts.content_title(content)} · {spin.quality_score}{new}")
    if result.has_next:
        lines.append(f"\nMore: /history {result.page + 1}")

    await reply_safe(message, "\n".join(lines), parse_mode="HTML")


@router.message(Command("stats"))
async def stats_cmd(message: Message, session: AsyncSession) -> None:
    user = await ensure_user(session, message)
    stats = await CollectionService.stats(session, user_id=user.id)
    await reply_safe(message, texts.collection_stats(stats), parse_mode="HTML")
