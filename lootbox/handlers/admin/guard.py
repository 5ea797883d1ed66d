# lootbox/handlers/admin/guard.py
from __future__ import annotations

from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.config import Settings
from lootbox.database.models import User
from lootbox.utils.ensure_user import ensure_user


def is_root(settings: Settings, user: User) -> bool:
    return user.telegram_id in settings.root_admin_ids


def is_admin(settings: Settings, user: User) -> bool:
    # root admins come from env and need no users.is_admin flag
    return is_root(settings, user) or bool(user.is_admin)


async def admin_user(session: AsyncSession, settings: Settings, message: Message) -> User | None:
    """DB user behind the message if they are an admin, else None (and a reply)."""
    user = await ensure_user(session, message)
    if not is_admin(settings, user):
        await message.answer("⛔ Admins only.")
        return None
    return user


async def root_user(session: AsyncSession, settings: Settings, message: Message) -> User | None:
    user = await ensure_user(session, message)
    if not is_root(settings, user):
        await message.answer("⛔ Root admins only.")
        return None
    return user
