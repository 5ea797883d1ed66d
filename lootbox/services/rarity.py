# lootbox/services/rarity.py
from __future__ import annotations

from dataclasses import dataclass

from lootbox.database.models import RarityTier


@dataclass(frozen=True, slots=True)
class Rarity:
    tier: RarityTier
    label: str
    icon: str
    selection_weight: float

    @property
    def badge(self) -> str:
        return f"{self.icon} {self.label}"


# Labeling table: (inclusive min score, tier), highest first.
# COMMON has no lower bound so every integer lands somewhere.
TIER_THRESHOLDS: tuple[tuple[int, RarityTier], ...] = (
    (95, RarityTier.MYTHIC),
    (90, RarityTier.LEGENDARY),
    (85, RarityTier.EPIC),
    (80, RarityTier.RARE),
    (75, RarityTier.UNCOMMON),
)

TIER_ICONS: dict[RarityTier, str] = {
    RarityTier.MYTHIC: "🌟",
    RarityTier.LEGENDARY: "👑",
    RarityTier.EPIC: "💎",
    RarityTier.RARE: "⭐",
    RarityTier.UNCOMMON: "🔹",
    RarityTier.COMMON: "⚪",
}

# Selection weights are per tier, not per item: a tier with one title and a
# tier with fifty carry the same weight for each of their members.
SELECTION_WEIGHTS: dict[RarityTier, float] = {
    RarityTier.MYTHIC: 0.05,
    RarityTier.LEGENDARY: 0.10,
    RarityTier.EPIC: 0.20,
    RarityTier.RARE: 0.35,
    RarityTier.UNCOMMON: 0.20,
    RarityTier.COMMON: 0.10,
}


def tier_for_score(score: int) -> RarityTier:
    for min_score, tier in TIER_THRESHOLDS:
        if score >= min_score:
            return tier
    return RarityTier.COMMON


def rarity_of(tier: RarityTier) -> Rarity:
    return Rarity(
        tier=tier,
        label=tier.value.upper(),
        icon=TIER_ICONS[tier],
        selection_weight=SELECTION_WEIGHTS[tier],
    )


def classify(score: int) -> Rarity:
    return rarity_of(tier_for_score(score))


def parse_tier(raw: str) -> RarityTier | None:
    try:
        return RarityTier((raw or "").strip().lower())
    except ValueError:
        return None
