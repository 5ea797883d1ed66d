# lootbox/services/catalog.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.repo import content_repo
from lootbox.database.tx import transactional
from lootbox.services.rarity import tier_for_score
from lootbox.services.scoring import try_quality_score

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RefreshResult:
    scanned: int
    updated: int
    invalid: int


class CatalogService:
    @staticmethod
    async def refresh_quality_scores(session: AsyncSession) -> RefreshResult:
        """
        Rewrite the cached quality_score / rarity_tier of every row with the
        current formula. Rows with broken signals get NULLs.
        """
        scanned = updated = invalid = 0

        async with transactional(session):
            for row in await content_repo.all_content(session):
                scanned += 1
                score = try_quality_score(row)
                tier = tier_for_score(score) if score is not None else None
                if score is None:
                    invalid += 1
                if row.quality_score != score or row.rarity_tier != tier:
                    row.quality_score = score
                    row.rarity_tier = tier
                    updated += 1
            await session.flush()
        await session.commit()

        log.info("Quality scores refreshed: scanned=%s updated=%s invalid=%s", scanned, updated, invalid)
        return RefreshResult(scanned=scanned, updated=updated, invalid=invalid)
