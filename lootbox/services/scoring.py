# lootbox/services/scoring.py
"""
Quality score: one integer per content item, computed from review signals.

Critics weigh 80/20 over audience, with penalties for weak critic scores and
for audience scores running far ahead of critics (mainstream bias).
Not clamped: strong titles go past 100.
"""
from __future__ import annotations

import math
from numbers import Real

from lootbox.services.errors import InvalidContentData

CRITICS_WEIGHT = 0.80
AUDIENCE_WEIGHT = 0.20

CERTIFIED_FRESH_BONUS = 5
VERIFIED_HOT_BONUS = 3

# (min rating, bonus), checked top-down
IMDB_BONUSES: tuple[tuple[float, int], ...] = (
    (8.5, 8),
    (8.0, 6),
    (7.5, 3),
)


def _number(item: object, field: str) -> float:
    value = getattr(item, field, None)
    # bool is an int subclass, never a valid score
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidContentData(getattr(item, "id", None), field, value)
    value = float(value)
    if math.isnan(value):
        raise InvalidContentData(getattr(item, "id", None), field, value)
    return value


def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def imdb_bonus(rating: float) -> int:
    for min_rating, bonus in IMDB_BONUSES:
        if rating >= min_rating:
            return bonus
    return 0


def mainstream_penalty(critics: float, audience: float) -> int:
    diff = audience - critics
    if diff > 20:
        return -10
    if diff > 10:
        return -5
    return 0


def compute_quality_score(item: object) -> int:
    """
    `item` is anything with critics_score, audience_score, imdb_rating,
    certified_fresh and verified_hot attributes (ORM row or plain object).

    Raises InvalidContentData when a numeric signal is missing or malformed.
    """
    critics = _number(item, "critics_score")
    audience = _number(item, "audience_score")
    imdb = _number(item, "imdb_rating")

    base = critics * CRITICS_WEIGHT + audience * AUDIENCE_WEIGHT

    critics_penalty = -5 if critics < 80 else 0
    low_critics_penalty = -5 if critics < 70 else 0

    certified = CERTIFIED_FRESH_BONUS if getattr(item, "certified_fresh", False) else 0
    hot = VERIFIED_HOT_BONUS if getattr(item, "verified_hot", False) else 0

    return round_half_up(
        base
        + certified
        + hot
        + imdb_bonus(imdb)
        + critics_penalty
        + low_critics_penalty
        + mainstream_penalty(critics, audience)
    )


def try_quality_score(item: object) -> int | None:
    try:
        return compute_quality_score(item)
    except InvalidContentData:
        return None
