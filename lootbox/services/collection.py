# lootbox/services/collection.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import Content, ContentType, RarityTier, UserSpin, UserUnlock
from lootbox.database.repo import unlock_repo

T = TypeVar("T")

# epic and up counts as a high-quality find
HIGH_QUALITY_TIERS = frozenset({RarityTier.EPIC, RarityTier.LEGENDARY, RarityTier.MYTHIC})

MAX_PAGE = 10_000


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: Sequence[T]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1


@dataclass(frozen=True, slots=True)
class CollectionStats:
    total_unlocks: int
    total_spins: int
    by_tier: dict[RarityTier, int]

    @property
    def high_quality_unlocks(self) -> int:
        return sum(n for tier, n in self.by_tier.items() if tier in HIGH_QUALITY_TIERS)


def page_args(page: int, limit: int, max_limit: int) -> tuple[int, int, int]:
    # offset must stay a 64-bit SQL integer
    page = min(max(1, int(page)), MAX_PAGE)
    limit = min(max(1, int(limit)), max_limit)
    return page, limit, (page - 1) * limit


class CollectionService:
    MAX_PAGE_SIZE = 50

    @staticmethod
    async def trophy_cabinet(
        session: AsyncSession,
        *,
        user_id: int,
        content_type: ContentType | None = None,
        rarity_tier: RarityTier | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[tuple[UserUnlock, Content]]:
        page, limit, offset = page_args(page, limit, CollectionService.MAX_PAGE_SIZE)
        rows, total = await unlock_repo.list_unlocks(
            session,
            user_id,
            spin_type=content_type,
            rarity_tier=rarity_tier,
            limit=limit,
            offset=offset,
        )
        return Page(items=rows, page=page, limit=limit, total=total)

    @staticmethod
    async def spin_history(
        session: AsyncSession,
        *,
        user_id: int,
        page: int = 1,
        limit: int = 10,
    ) -> Page[tuple[UserSpin, Content]]:
        page, limit, offset = page_args(page, limit, CollectionService.MAX_PAGE_SIZE)
        rows, total = await unlock_repo.list_spins(session, user_id, limit=limit, offset=offset)
        return Page(items=rows, page=page, limit=limit, total=total)

    @staticmethod
    async def stats(session: AsyncSession, *, user_id: int) -> CollectionStats:
        return CollectionStats(
            total_unlocks=await unlock_repo.count_unlocks(session, user_id),
            total_spins=await unlock_repo.count_spins(session, user_id),
            by_tier=await unlock_repo.unlocks_by_tier(session, user_id),
        )
