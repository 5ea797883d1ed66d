# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from random import Random

import pytest
import pytest_asyncio

from lootbox.database import Database
from lootbox.database.models import Content, ContentType, User
from lootbox.database.models.content import dump_json_list
from lootbox.services.entitlement import EntitlementLedger
from lootbox.services.lootbox import LootboxService


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# (critics, audience, imdb, certified_fresh, verified_hot) -> score / tier
MYTHIC = (92, 95, 8.8, True, True)      # 109
LEGENDARY = (92, 92, 7.0, False, False)  # 92
EPIC = (86, 86, 7.0, False, False)       # 86
RARE = (82, 82, 7.0, False, False)       # 82
UNCOMMON = (80, 70, 7.0, False, False)   # 78
COMMON = (65, 90, 7.0, False, False)     # 50


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.init_models()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def session(db):
    async with db.session() as s:
        yield s


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def ledger(clock) -> EntitlementLedger:
    return EntitlementLedger("UTC", clock=clock)


@pytest.fixture
def service(ledger) -> LootboxService:
    svc = LootboxService(ledger, rng=Random(1234))
    svc.COMMIT_RETRY_DELAY = 0
    return svc


@pytest.fixture
def make_user(session):
    async def _make(telegram_id: int = 1001, **fields) -> User:
        fields.setdefault("daily_spins_used", 0)
        fields.setdefault("admin_override_spins", 0)
        user = User(telegram_id=telegram_id, username=f"user{telegram_id}", **fields)
        session.add(user)
        await session.commit()
        return user

    return _make


@pytest.fixture
def make_content(session):
    async def _make(
        title: str,
        signals: tuple = MYTHIC,
        *,
        type: ContentType = ContentType.MOVIE,
        is_active: bool = True,
        platforms: list[str] | None = None,
        genres: list[str] | None = None,
    ) -> Content:
        critics, audience, imdb, fresh, hot = signals
        row = Content(
            type=type,
            title=title,
            year=2024,
            critics_score=critics,
            audience_score=audience,
            imdb_rating=imdb,
            certified_fresh=fresh,
            verified_hot=hot,
            platforms_json=dump_json_list(platforms),
            genres_json=dump_json_list(genres),
            is_active=is_active,
        )
        session.add(row)
        await session.commit()
        return row

    return _make
