# lootbox/database/repo/unlock_repo.py
from __future__ import annotations

from datetime import datetime
from typing import Collection, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import Content, ContentType, RarityTier, User, UserSpin, UserUnlock


async def has_unlock(session: AsyncSession, user_id: int, content_id: int) -> bool:
    res = await session.execute(
        select(UserUnlock.id).where(
            UserUnlock.user_id == user_id,
            UserUnlock.content_id == content_id,
        )
    )
    return res.first() is not None


async def create_unlock(
    session: AsyncSession,
    *,
    user_id: int,
    content_id: int,
    spin_type: ContentType,
    rarity_tier: RarityTier,
) -> UserUnlock:
    row = UserUnlock(
        user_id=user_id,
        content_id=content_id,
        spin_type=spin_type,
        rarity_tier=rarity_tier,
    )
    session.add(row)
    await session.flush()  # uq_unlock_user_content check
    return row


async def create_spin_record(
    session: AsyncSession,
    *,
    attempt_id: str,
    user_id: int,
    content_id: int,
    spin_type: ContentType,
    rarity_tier: RarityTier,
    quality_score: int,
    was_new_unlock: bool,
) -> UserSpin:
    row = UserSpin(
        attempt_id=attempt_id,
        user_id=user_id,
        content_id=content_id,
        spin_type=spin_type,
        rarity_tier=rarity_tier,
        quality_score=quality_score,
        was_new_unlock=was_new_unlock,
    )
    session.add(row)
    await session.flush()
    return row


async def get_spin_by_attempt(session: AsyncSession, attempt_id: str) -> UserSpin | None:
    res = await session.execute(select(UserSpin).where(UserSpin.attempt_id == attempt_id))
    return res.scalar_one_or_none()


async def count_unlocks(session: AsyncSession, user_id: int) -> int:
    res = await session.execute(
        select(func.count(UserUnlock.id)).where(UserUnlock.user_id == user_id)
    )
    return int(res.scalar_one())


async def count_spins(session: AsyncSession, user_id: int) -> int:
    res = await session.execute(
        select(func.count(UserSpin.id)).where(UserSpin.user_id == user_id)
    )
    return int(res.scalar_one())


async def unlocks_by_tier(session: AsyncSession, user_id: int) -> dict[RarityTier, int]:
    res = await session.execute(
        select(UserUnlock.rarity_tier, func.count(UserUnlock.id))
        .where(UserUnlock.user_id == user_id)
        .group_by(UserUnlock.rarity_tier)
    )
    return {tier: int(n) for tier, n in res.all()}


async def list_unlocks(
    session: AsyncSession,
    user_id: int,
    *,
    spin_type: ContentType | None = None,
    rarity_tier: RarityTier | None = None,
    limit: int,
    offset: int,
) -> tuple[Sequence[tuple[UserUnlock, Content]], int]:
    """Newest first. Returns (rows, total matching)."""
    conds = [UserUnlock.user_id == user_id]
    if spin_type is not None:
        conds.append(UserUnlock.spin_type == spin_type)
    if rarity_tier is not None:
        conds.append(UserUnlock.rarity_tier == rarity_tier)

    total = await session.scalar(select(func.count(UserUnlock.id)).where(*conds))

    res = await session.execute(
        select(UserUnlock, Content)
        .join(Content, Content.id == UserUnlock.content_id)
        .where(*conds)
        .order_by(UserUnlock.unlocked_at.desc(), UserUnlock.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return [(u, c) for u, c in res.all()], int(total or 0)


async def list_spins(
    session: AsyncSession,
    user_id: int,
    *,
    limit: int,
    offset: int,
) -> tuple[Sequence[tuple[UserSpin, Content]], int]:
    total = await session.scalar(
        select(func.count(UserSpin.id)).where(UserSpin.user_id == user_id)
    )
    res = await session.execute(
        select(UserSpin, Content)
        .join(Content, Content.id == UserSpin.content_id)
        .where(UserSpin.user_id == user_id)
        .order_by(UserSpin.created_at.desc(), UserSpin.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return [(s, c) for s, c in res.all()], int(total or 0)


async def count_unlocks_matching(
    session: AsyncSession,
    user_id: int,
    *,
    spin_type: ContentType | None = None,
    tiers: Collection[RarityTier] | None = None,
) -> int:
    conds = [UserUnlock.user_id == user_id]
    if spin_type is not None:
        conds.append(UserUnlock.spin_type == spin_type)
    if tiers is not None:
        conds.append(UserUnlock.rarity_tier.in_(list(tiers)))
    return int(await session.scalar(select(func.count(UserUnlock.id)).where(*conds)) or 0)


async def count_active_days(session: AsyncSession, user_id: int, since: datetime) -> int:
    """Distinct UTC calendar days with at least one spin since `since` (naive UTC)."""
    res = await session.execute(
        select(func.count(func.distinct(func.date(UserSpin.created_at)))).where(
            UserSpin.user_id == user_id,
            UserSpin.created_at >= since,
        )
    )
    return int(res.scalar_one() or 0)


# ----------------------------
# across all users (admin)
# ----------------------------
async def count_all_spins(session: AsyncSession, *, since: datetime | None = None) -> int:
    q = select(func.count(UserSpin.id))
    if since is not None:
        q = q.where(UserSpin.created_at >= since)
    return int(await session.scalar(q) or 0)


async def count_all_unlocks(session: AsyncSession) -> int:
    return int(await session.scalar(select(func.count(UserUnlock.id))) or 0)


async def count_spinning_users(session: AsyncSession, since: datetime) -> int:
    res = await session.execute(
        select(func.count(func.distinct(UserSpin.user_id))).where(UserSpin.created_at >= since)
    )
    return int(res.scalar_one() or 0)


async def all_unlocks_by_tier(session: AsyncSession) -> dict[RarityTier, int]:
    res = await session.execute(
        select(UserUnlock.rarity_tier, func.count(UserUnlock.id)).group_by(UserUnlock.rarity_tier)
    )
    return {tier: int(n) for tier, n in res.all()}


async def all_spins_by_type(session: AsyncSession, since: datetime) -> dict[ContentType, int]:
    res = await session.execute(
        select(UserSpin.spin_type, func.count(UserSpin.id))
        .where(UserSpin.created_at >= since)
        .group_by(UserSpin.spin_type)
    )
    return {ctype: int(n) for ctype, n in res.all()}


async def list_recent_activity(
    session: AsyncSession,
    *,
    limit: int,
    offset: int,
) -> tuple[Sequence[tuple[UserSpin, User, Content]], int]:
    """Spins of every user, newest first."""
    total = await session.scalar(select(func.count(UserSpin.id)))
    res = await session.execute(
        select(UserSpin, User, Content)
        .join(User, User.id == UserSpin.user_id)
        .join(Content, Content.id == UserSpin.content_id)
        .order_by(UserSpin.created_at.desc(), UserSpin.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return [(s, u, c) for s, u, c in res.all()], int(total or 0)
