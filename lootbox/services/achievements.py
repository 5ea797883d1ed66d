# lootbox/services/achievements.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import ContentType, RarityTier
from lootbox.database.repo import unlock_repo
from lootbox.utils.dates import utc_now

ACTIVE_DAYS_WINDOW = timedelta(days=30)

# legendary starts at quality score 90
NINETY_PLUS_TIERS = frozenset({RarityTier.LEGENDARY, RarityTier.MYTHIC})


@dataclass(frozen=True, slots=True)
class AchievementDef:
    key: str
    name: str
    description: str
    medal: str  # bronze | silver | gold | legendary | mythic
    counter: str  # key into AchievementCounts
    target: int


ACHIEVEMENTS: tuple[AchievementDef, ...] = (
    AchievementDef("first_unlock", "First Discovery", "Unlock your first piece of content", "bronze", "total", 1),
    AchievementDef("collector", "Collector", "Unlock 25 pieces of content", "silver", "total", 25),
    AchievementDef("curator", "Content Curator", "Unlock 100 pieces of content", "gold", "total", 100),
    AchievementDef("legendary_hunter", "Legendary Hunter", "Unlock 5 legendary items", "legendary", "legendary", 5),
    AchievementDef("mythic_seeker", "Mythic Seeker", "Unlock a mythic item", "mythic", "mythic", 1),
    AchievementDef("movie_buff", "Movie Buff", "Unlock 50 movies", "gold", "movies", 50),
    AchievementDef("series_savant", "Series Savant", "Unlock 50 TV series", "gold", "series", 50),
    AchievementDef(
        "quality_connoisseur", "Quality Connoisseur",
        "Unlock 25 items with 90+ quality score", "legendary", "ninety_plus", 25,
    ),
)


@dataclass(frozen=True, slots=True)
class AchievementCounts:
    total: int
    legendary: int
    mythic: int
    movies: int
    series: int
    ninety_plus: int
    active_days: int


@dataclass(frozen=True, slots=True)
class Achievement:
    key: str
    name: str
    description: str
    medal: str
    target: int
    progress: int

    @property
    def unlocked(self) -> bool:
        return self.progress >= self.target


@dataclass(frozen=True, slots=True)
class AchievementReport:
    achievements: list[Achievement]
    counts: AchievementCounts

    @property
    def unlocked(self) -> int:
        return sum(1 for a in self.achievements if a.unlocked)


def evaluate(counts: AchievementCounts) -> list[Achievement]:
    out: list[Achievement] = []
    for d in ACHIEVEMENTS:
        value = getattr(counts, d.counter)
        out.append(
            Achievement(
                key=d.key,
                name=d.name,
                description=d.description,
                medal=d.medal,
                target=d.target,
                progress=min(value, d.target),
            )
        )
    return out


class AchievementService:
    @staticmethod
    async def counts(session: AsyncSession, *, user_id: int, now: datetime | None = None) -> AchievementCounts:
        now = now or utc_now()
        # spin timestamps are stored as naive UTC
        since = (now.astimezone(timezone.utc) - ACTIVE_DAYS_WINDOW).replace(tzinfo=None)

        async def unlocks(**kw) -> int:
            return await unlock_repo.count_unlocks_matching(session, user_id, **kw)

        return AchievementCounts(
            total=await unlocks(),
            legendary=await unlocks(tiers={RarityTier.LEGENDARY}),
            mythic=await unlocks(tiers={RarityTier.MYTHIC}),
            movies=await unlocks(spin_type=ContentType.MOVIE),
            series=await unlocks(spin_type=ContentType.SERIES),
            ninety_plus=await unlocks(tiers=NINETY_PLUS_TIERS),
            active_days=await unlock_repo.count_active_days(session, user_id, since),
        )

    @staticmethod
    async def report(session: AsyncSession, *, user_id: int, now: datetime | None = None) -> AchievementReport:
        counts = await AchievementService.counts(session, user_id=user_id, now=now)
        return AchievementReport(achievements=evaluate(counts), counts=counts)
