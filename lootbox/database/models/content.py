# lootbox/database/models/content.py
from __future__ import annotations

import enum
import json
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Float, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from lootbox.database.base import Base


class ContentType(str, enum.Enum):
    MOVIE = "movie"
    SERIES = "series"


class RarityTier(str, enum.Enum):
    """Ordered lowest to highest; member order is the tier order."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    @property
    def rank(self) -> int:
        return list(RarityTier).index(self)


class Content(Base):
    """
    A movie or series that a loot box can reveal.

    Raw review signals are nullable: rows imported without them stay in the
    catalog but are never selected. `quality_score` / `rarity_tier` are a cache
    refreshed by the scheduler; selection always recomputes.
    """
    __tablename__ = "content"
    __table_args__ = (
        Index("ix_content_type_active", "type", "is_active"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    type: Mapped[ContentType] = mapped_column(Enum(ContentType, native_enum=False), index=True)
    title: Mapped[str] = mapped_column(String(256))
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    critics_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    audience_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    imdb_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    certified_fresh: Mapped[bool] = mapped_column(Boolean, default=False)
    verified_hot: Mapped[bool] = mapped_column(Boolean, default=False)

    # JSON string lists, see `platforms` / `genres`
    platforms_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    genres_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # cache only
    quality_score: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    rarity_tier: Mapped[RarityTier | None] = mapped_column(
        Enum(RarityTier, native_enum=False),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def platforms(self) -> list[str]:
        """Where to watch."""
        return _json_list(self.platforms_json)

    @property
    def genres(self) -> list[str]:
        return _json_list(self.genres_json)


def _json_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    return [str(v) for v in value] if isinstance(value, list) else []


def dump_json_list(values) -> str | None:
    values = [str(v).strip() for v in (values or ()) if str(v).strip()]
    return json.dumps(values, ensure_ascii=False) if values else None
