# lootbox/database/repo/content_repo.py
from __future__ import annotations

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import Content, ContentType


async def query_active_content(
    session: AsyncSession,
    content_type: ContentType,
    min_quality_score: int | None = None,
) -> Sequence[Content]:
    """
    Active rows of one type in id order. The order is the selection walk order,
    keep it stable.

    `min_quality_score` filters on the cached column; the spin path filters on
    the live score instead.
    """
    q = select(Content).where(
        Content.type == content_type,
        Content.is_active.is_(True),
    )
    if min_quality_score is not None:
        q = q.where(Content.quality_score >= min_quality_score)
    res = await session.execute(q.order_by(Content.id))
    return res.scalars().all()


async def get_content_by_id(session: AsyncSession, content_id: int) -> Content | None:
    return await session.get(Content, content_id)


async def all_content(session: AsyncSession) -> Sequence[Content]:
    res = await session.execute(select(Content).order_by(Content.id))
    return res.scalars().all()


async def count_content_by_type(session: AsyncSession) -> dict[ContentType, int]:
    """Every row, active or not."""
    res = await session.execute(select(Content.type, func.count(Content.id)).group_by(Content.type))
    return {ctype: int(n) for ctype, n in res.all()}
