# lootbox/services/lootbox.py
from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import dataclass
from random import Random
from typing import Sequence
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import Content, ContentType, User
from lootbox.database.repo import config_repo, content_repo, unlock_repo
from lootbox.database.repo import users as users_repo
from lootbox.database.tx import commit_with_retry
from lootbox.services.entitlement import Entitlement, EntitlementLedger
from lootbox.services.errors import (
    InvalidContentData,
    InvalidType,
    LootboxError,
    NoContentAvailable,
    PersistenceFailure,
    UserNotFound,
)
from lootbox.services.rarity import Rarity, classify
from lootbox.services.scoring import compute_quality_score
from lootbox.services.selector import pick_uniform, select_one

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpinOutcome:
    content: Content
    quality_score: int
    rarity: Rarity
    was_new_unlock: bool
    spins_remaining: int
    total_unlocks: int | None = None


@dataclass(frozen=True, slots=True)
class Scored:
    content: Content
    quality_score: int
    rarity: Rarity


def parse_content_type(raw: object) -> ContentType:
    if isinstance(raw, ContentType):
        return raw
    try:
        return ContentType(str(raw or "").strip().lower())
    except ValueError as e:
        raise InvalidType(raw) from e


def score_candidates(rows: Sequence[Content]) -> list[Scored]:
    """Live-score rows in order; rows with broken signals are skipped."""
    out: list[Scored] = []
    for row in rows:
        try:
            score = compute_quality_score(row)
        except InvalidContentData as e:
            log.warning("Skipping content %s: %s", row.id, e)
            continue
        out.append(Scored(content=row, quality_score=score, rarity=classify(score)))
    return out


class LootboxService:
    """
    Spin orchestration: entitlement -> candidates -> weighted pick -> record.

    One instance per process. It owns the per-user locks that serialize spins
    of the same user; spins of different users run freely.
    """

    COMMIT_ATTEMPTS = 3
    COMMIT_RETRY_DELAY = 0.05  # seconds, doubled per attempt

    def __init__(self, ledger: EntitlementLedger, *, rng: Random | None = None) -> None:
        self.ledger = ledger
        self.rng = rng or Random()
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _user_lock(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    # ----------------------------
    # spin
    # ----------------------------
    async def open_lootbox(self, session: AsyncSession, *, user_id: int, content_type: object) -> SpinOutcome:
        """
        One spin for `user_id`. Nothing is charged unless the outcome is
        recorded.

        On any failure past type validation the caller's session is rolled
        back, which expires every ORM object the caller holds from it.
        """
        ctype = parse_content_type(content_type)

        async with self._user_lock(user_id):
            try:
                cfg = await config_repo.get_config(session)
                user = await self.ledger.check_and_reserve(
                    session, user_id=user_id, daily_limit=cfg.daily_spin_limit
                )

                rows = await content_repo.query_active_content(session, ctype)
                candidates = [
                    s for s in score_candidates(rows)
                    if s.quality_score >= cfg.quality_score_threshold
                ]
                if not candidates:
                    raise NoContentAvailable(ctype.value, cfg.quality_score_threshold)

                row = select_one([s.content for s in candidates], self.rng)
                picked = next(s for s in candidates if s.content is row)

                return await self._record(
                    session,
                    user=user,
                    ctype=ctype,
                    picked=picked,
                    daily_limit=cfg.daily_spin_limit,
                )
            except LootboxError:
                await session.rollback()
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                log.exception("Spin failed for user=%s", user_id)
                raise PersistenceFailure("Could not complete the spin, nothing was charged") from e

    async def _record(
        self,
        session: AsyncSession,
        *,
        user: User,
        ctype: ContentType,
        picked: Scored,
        daily_limit: int,
    ) -> SpinOutcome:
        """
        Unlock + spin record + ledger commit in one transaction.

        A locked store is retried under the same attempt_id; a retry first
        checks whether the previous attempt already landed.
        """
        # plain values: a rollback expires ORM instances
        attempt_id = uuid4().hex
        user_id, tz_name = user.id, user.timezone
        content_id = picked.content.id
        tier = picked.rarity.tier

        async def write(s: AsyncSession) -> bool:
            was_new = not await unlock_repo.has_unlock(s, user_id, content_id)
            if was_new:
                await unlock_repo.create_unlock(
                    s,
                    user_id=user_id,
                    content_id=content_id,
                    spin_type=ctype,
                    rarity_tier=tier,
                )
            await unlock_repo.create_spin_record(
                s,
                attempt_id=attempt_id,
                user_id=user_id,
                content_id=content_id,
                spin_type=ctype,
                rarity_tier=tier,
                quality_score=picked.quality_score,
                was_new_unlock=was_new,
            )
            await self.ledger.commit(s, user_id=user_id, tz_name=tz_name, daily_limit=daily_limit)
            return was_new

        async def landed(s: AsyncSession) -> bool | None:
            spin = await unlock_repo.get_spin_by_attempt(s, attempt_id)
            return None if spin is None else spin.was_new_unlock

        was_new = await commit_with_retry(
            session,
            write,
            attempts=self.COMMIT_ATTEMPTS,
            delay=self.COMMIT_RETRY_DELAY,
            landed=landed,
        )

        content = picked.content
        await session.refresh(content)
        fresh = await users_repo.get_user(session, user_id)
        remaining = self.ledger.remaining_spins(
            int(fresh.daily_spins_used), daily_limit, int(fresh.admin_override_spins)
        )
        total_unlocks = await unlock_repo.count_unlocks(session, user_id) if was_new else None

        log.info(
            "Spin: user=%s content=%s score=%s tier=%s new=%s remaining=%s",
            user_id, content_id, picked.quality_score, tier.value, was_new, remaining,
        )
        return SpinOutcome(
            content=content,
            quality_score=picked.quality_score,
            rarity=picked.rarity,
            was_new_unlock=was_new,
            spins_remaining=remaining,
            total_unlocks=total_unlocks,
        )

    # ----------------------------
    # guest
    # ----------------------------
    async def open_guest_lootbox(self, session: AsyncSession, *, content_type: object) -> SpinOutcome:
        """
        No identity, no budget, nothing written: uniform pick over every valid
        active title of the type. Always reported as a new unlock.
        """
        ctype = parse_content_type(content_type)

        rows = await content_repo.query_active_content(session, ctype)
        candidates = score_candidates(rows)
        if not candidates:
            raise NoContentAvailable(ctype.value)

        picked = pick_uniform(candidates, self.rng)
        return SpinOutcome(
            content=picked.content,
            quality_score=picked.quality_score,
            rarity=picked.rarity,
            was_new_unlock=True,
            spins_remaining=0,
        )

    # ----------------------------
    # status / grants
    # ----------------------------
    async def spin_status(self, session: AsyncSession, *, user_id: int) -> Entitlement:
        cfg = await config_repo.get_config(session)
        user = await users_repo.get_user(session, user_id)
        if user is None:
            raise UserNotFound(user_id)
        return self.ledger.snapshot(user, cfg.daily_spin_limit)

    async def grant_override_spins(self, session: AsyncSession, *, user_id: int, amount: int) -> int:
        async with self._user_lock(user_id):
            return await self.ledger.grant_override_spins(session, user_id=user_id, amount=amount)
