# lootbox/database/repo/users.py
from __future__ import annotations

from datetime import date
from typing import Optional

from aiogram.types import TelegramObject
from sqlalchemy import case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models.user import User


def _extract_from_user(event: TelegramObject):
    """
    Best-effort extract aiogram `from_user` from different update types.
    Works for Message, CallbackQuery, InlineQuery, etc.
    """
    u = getattr(event, "from_user", None)
    if u:
        return u

    msg = getattr(event, "message", None)
    if msg and getattr(msg, "from_user", None):
        return msg.from_user

    cb = getattr(event, "callback_query", None)
    if cb and getattr(cb, "from_user", None):
        return cb.from_user

    return None


async def upsert_user_from_event(session: AsyncSession, event: TelegramObject) -> Optional[User]:
    tg = _extract_from_user(event)
    if tg is None:
        return None

    res = await session.execute(select(User).where(User.telegram_id == tg.id))
    user = res.scalar_one_or_none()

    if user is None:
        user = User(
            telegram_id=tg.id,
            username=tg.username,
            first_name=tg.first_name,
            last_name=tg.last_name,
            daily_spins_used=0,
            admin_override_spins=0,
            is_admin=False,
        )
        session.add(user)
        await session.flush()  # ensures `user.id` exists before handlers use it
        return user

    user.username = tg.username
    user.first_name = tg.first_name
    user.last_name = tg.last_name
    return user


async def get_user(session: AsyncSession, user_id: int) -> Optional[User]:
    return await session.get(User, user_id, populate_existing=True)


async def find_user_by_ref(session: AsyncSession, ref: str) -> Optional[User]:
    """`ref` is a Telegram id or an @username."""
    ref = (ref or "").strip()
    if ref.startswith("@"):
        q = select(User).where(User.username == ref[1:])
    else:
        try:
            tg_id = int(ref)
        except ValueError:
            return None
        q = select(User).where(User.telegram_id == tg_id)
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def apply_daily_reset(session: AsyncSession, user_id: int, today: date) -> bool:
    """
    Zero the daily counter once per local day.
    The date guard makes repeated calls on the same day a no-op.
    """
    res = await session.execute(
        update(User)
        .where(
            User.id == user_id,
            or_(User.daily_spins_reset_date.is_(None), User.daily_spins_reset_date != today),
        )
        .values(daily_spins_used=0, daily_spins_reset_date=today)
        .execution_options(synchronize_session=False)
    )
    return res.rowcount > 0


async def consume_spin(session: AsyncSession, user_id: int, daily_limit: int) -> bool:
    """
    Spend one spin: a banked override spin if any, else one daily spin.

    Single guarded UPDATE, so two writers can never both take the last spin.
    Returns False when nothing was left to spend.
    """
    has_override = User.admin_override_spins > 0
    res = await session.execute(
        update(User)
        .where(
            User.id == user_id,
            or_(has_override, User.daily_spins_used < daily_limit),
        )
        .values(
            admin_override_spins=case(
                (has_override, User.admin_override_spins - 1),
                else_=User.admin_override_spins,
            ),
            daily_spins_used=case(
                (has_override, User.daily_spins_used),
                else_=User.daily_spins_used + 1,
            ),
        )
        .execution_options(synchronize_session=False)
    )
    return res.rowcount > 0


async def add_override_spins(session: AsyncSession, user_id: int, amount: int) -> bool:
    res = await session.execute(
        update(User)
        .where(User.id == user_id)
        .values(admin_override_spins=User.admin_override_spins + amount)
        .execution_options(synchronize_session=False)
    )
    return res.rowcount > 0


async def set_timezone(session: AsyncSession, user_id: int, tz_name: str | None) -> None:
    await session.execute(
        update(User)
        .where(User.id == user_id)
        .values(timezone=tz_name)
        .execution_options(synchronize_session=False)
    )


async def set_admin(session: AsyncSession, user_id: int, flag: bool) -> None:
    await session.execute(
        update(User)
        .where(User.id == user_id)
        .values(is_admin=flag)
        .execution_options(synchronize_session=False)
    )


async def count_users(session: AsyncSession) -> int:
    return int(await session.scalar(select(func.count(User.id))) or 0)
