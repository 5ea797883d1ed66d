# lootbox/services/selector.py
from __future__ import annotations

from random import Random
from typing import Sequence, TypeVar

from lootbox.services.rarity import classify
from lootbox.services.scoring import compute_quality_score

T = TypeVar("T")


def selection_weight(item: object) -> float:
    return classify(compute_quality_score(item)).selection_weight


def select_one(candidates: Sequence[T], rng: Random) -> T:
    """
    Weighted draw over `candidates` in the order given.

    Each candidate weighs its rarity tier's selection weight. Walks the list
    subtracting weights from r in [0, total) and returns the first candidate
    that brings r to <= 0. If float drift means none does, the last candidate
    wins.
    """
    if not candidates:
        raise ValueError("select_one() needs at least one candidate")

    weights = [selection_weight(c) for c in candidates]
    r = rng.random() * sum(weights)

    for candidate, weight in zip(candidates, weights):
        r -= weight
        if r <= 0:
            return candidate

    return candidates[-1]


def pick_uniform(candidates: Sequence[T], rng: Random) -> T:
    if not candidates:
        raise ValueError("pick_uniform() needs at least one candidate")
    return rng.choice(candidates)
