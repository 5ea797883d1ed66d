"""
Tests for the retrying commit helper.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from lootbox.database.models import AppConfig
from lootbox.database.tx import commit_with_retry


def locked() -> OperationalError:
    return OperationalError("UPDATE", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_retries_then_commits(session):
    calls = []

    async def work(s):
        calls.append(1)
        s.add(AppConfig(id=len(calls)))
        await s.flush()
        if len(calls) < 3:
            raise locked()
        return "ok"

    assert await commit_with_retry(session, work, attempts=3, delay=0) == "ok"
    assert len(calls) == 3
    # only the last attempt's row survived
    assert await session.scalar(select(func.count(AppConfig.id))) == 1


@pytest.mark.asyncio
async def test_gives_up(session):
    async def work(s):
        raise locked()

    with pytest.raises(OperationalError):
        await commit_with_retry(session, work, attempts=2, delay=0)


@pytest.mark.asyncio
async def test_landed_short_circuits(session):
    calls = []

    async def work(s):
        calls.append(1)
        raise locked()

    async def landed(s):
        return "already there"

    assert await commit_with_retry(session, work, attempts=3, delay=0, landed=landed) == "already there"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_other_errors_are_not_retried(session):
    calls = []

    async def work(s):
        calls.append(1)
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    with pytest.raises(IntegrityError):
        await commit_with_retry(session, work, attempts=3, delay=0)
    assert len(calls) == 1
