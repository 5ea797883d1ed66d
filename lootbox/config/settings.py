# lootbox/config/settings.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


def _require(env: Mapping[str, str], key: str) -> str:
    v = env.get(key)
    if v is None or not v.strip():
        raise RuntimeError(f"Missing required environment variable: {key}")
    return v.strip()


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _parse_int_list(raw: str | None, key_name: str) -> list[int]:
    """
    Parses comma/space/newline separated ints.
    Accepts:
      "951258732"
      "951258732,123"
      "951258732 123"
      "[951258732, 123]"  (brackets ignored)
    """
    if not raw:
        return []

    cleaned = raw.strip().strip("[](){}").strip()
    if not cleaned:
        return []

    parts = [p for p in re.split(r"[,\s]+", cleaned) if p]

    out: list[int] = []
    for p in parts:
        p2 = p.strip().strip("'\"")
        if not p2:
            continue
        out.append(_to_int(p2, key_name))
    return out


def _timezone_name(raw: str | None, key_name: str) -> str:
    name = (raw or "UTC").strip() or "UTC"
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise RuntimeError(f"Unknown timezone for {key_name}: {name!r}") from e
    return name


@dataclass(frozen=True, slots=True)
class Settings:
    # --- required ---
    bot_token: str

    # --- optional ---
    database_url: str = "sqlite+aiosqlite:///./lootbox.db"

    # --- security / admin ---
    root_admin_ids: tuple[int, ...] = ()

    # --- time ---
    # "today" for users that never picked a timezone
    default_timezone: str = "UTC"
    rescore_hour: int = 4

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast for required fields.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        bot_token = _require(env, "BOT_TOKEN")

        database_url = (env.get("DATABASE_URL") or "sqlite+aiosqlite:///./lootbox.db").strip()

        root_admin_ids = tuple(_parse_int_list(env.get("ROOT_ADMIN_IDS"), "ROOT_ADMIN_IDS"))

        default_timezone = _timezone_name(env.get("DEFAULT_TIMEZONE"), "DEFAULT_TIMEZONE")

        rescore_hour_raw = (env.get("RESCORE_HOUR") or "4").strip()
        rescore_hour = _to_int(rescore_hour_raw, "RESCORE_HOUR")
        if not 0 <= rescore_hour <= 23:
            raise RuntimeError(f"RESCORE_HOUR must be 0..23, got {rescore_hour}")

        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            bot_token=bot_token,
            database_url=database_url,
            root_admin_ids=root_admin_ids,
            default_timezone=default_timezone,
            rescore_hour=rescore_hour,
            environment=environment,
        )
