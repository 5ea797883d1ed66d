# lootbox/database/tx.py
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

log = logging.getLogger(__name__)

T = TypeVar("T")


@asynccontextmanager
async def transactional(session: AsyncSession):
    """
    Atomic section on an autobegin session: a SAVEPOINT when a transaction is
    already open (the caller still owns the outer commit), else a fresh
    transaction.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield


async def commit_with_retry(
    session: AsyncSession,
    work: Callable[[AsyncSession], Awaitable[T]],
    *,
    attempts: int = 3,
    delay: float = 0.05,
    landed: Callable[[AsyncSession], Awaitable[T | None]] | None = None,
) -> T:
    """
    Run `work` atomically and commit. A locked/busy store (OperationalError)
    rolls back and runs it again, up to `attempts` times with doubling delay.

    `landed` is awaited before every retry; a non-None result means the
    previous attempt did commit, and is returned instead of redoing `work`.
    Any other error propagates untouched.
    """
    for attempt in range(1, attempts + 1):
        try:
            if attempt > 1 and landed is not None:
                done = await landed(session)
                if done is not None:
                    return done

            async with transactional(session):
                result = await work(session)
            await session.commit()
            return result
        except OperationalError:
            await session.rollback()
            if attempt == attempts:
                raise
            log.warning("Commit attempt %s/%s failed, retrying", attempt, attempts)
            await asyncio.sleep(delay * 2 ** (attempt - 1))

    raise RuntimeError("commit_with_retry() needs attempts >= 1")
