# lootbox/database/models/app_config.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from lootbox.database.base import Base


class AppConfig(Base):
    """
    Single-row config table.
    Keep bot_token, timezone defaults in ENV.
    Keep gameplay settings here.
    """
    __tablename__ = "app_config"

    id: Mapped[int] = mapped_column(primary_key=True)  # always 1

    daily_spin_limit: Mapped[int] = mapped_column(Integer, default=3)
    quality_score_threshold: Mapped[int] = mapped_column(Integer, default=83)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )
