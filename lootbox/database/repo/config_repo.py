# lootbox/database/repo/config_repo.py
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lootbox.database.models import AppConfig
from lootbox.services.errors import InvalidSetting


CONFIG_ID = 1

DAILY_SPIN_LIMIT = "daily_spin_limit"
QUALITY_SCORE_THRESHOLD = "quality_score_threshold"

SETTING_KEYS = (DAILY_SPIN_LIMIT, QUALITY_SCORE_THRESHOLD)


@dataclass(frozen=True, slots=True)
class ConfigDTO:
    daily_spin_limit: int
    quality_score_threshold: int


async def get_or_create_config(session: AsyncSession) -> AppConfig:
    res = await session.execute(select(AppConfig).where(AppConfig.id == CONFIG_ID))
    cfg = res.scalar_one_or_none()
    if cfg:
        return cfg

    cfg = AppConfig(id=CONFIG_ID)
    session.add(cfg)
    await session.flush()
    return cfg


async def get_config(session: AsyncSession) -> ConfigDTO:
    cfg = await get_or_create_config(session)
    return ConfigDTO(
        daily_spin_limit=int(cfg.daily_spin_limit),
        quality_score_threshold=int(cfg.quality_score_threshold),
    )


async def get_setting(session: AsyncSession, key: str) -> int:
    if key not in SETTING_KEYS:
        raise InvalidSetting(f"Unknown setting: {key!r}")
    cfg = await get_config(session)
    return getattr(cfg, key)


def _validate(key: str, value: object) -> int:
    if key not in SETTING_KEYS:
        raise InvalidSetting(f"Unknown setting: {key!r}")
    if isinstance(value, bool):
        raise InvalidSetting(f"{key} must be an integer, got {value!r}")
    try:
        v = int(str(value).strip())
    except ValueError as e:
        raise InvalidSetting(f"{key} must be an integer, got {value!r}") from e
    if v < 0:
        raise InvalidSetting(f"{key} must be >= 0, got {v}")
    return v


async def set_setting(session: AsyncSession, key: str, value: object) -> int:
    v = _validate(key, value)
    await get_or_create_config(session)
    await session.execute(
        update(AppConfig).where(AppConfig.id == CONFIG_ID).values({key: v})
    )
    return v
