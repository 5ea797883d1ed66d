# lootbox/database/models/spin.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from lootbox.database.base import Base
from lootbox.database.models.content import ContentType, RarityTier


class UserSpin(Base):
    """
    Append-only log, one row per successful spin.
    `attempt_id` makes the recording step safe to retry.
    """
    __tablename__ = "user_spins"
    __table_args__ = (
        Index("ix_spin_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    attempt_id: Mapped[str] = mapped_column(String(32), unique=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    content_id: Mapped[int] = mapped_column(ForeignKey("content.id", ondelete="CASCADE"), index=True)

    spin_type: Mapped[ContentType] = mapped_column(Enum(ContentType, native_enum=False))
    rarity_tier: Mapped[RarityTier] = mapped_column(Enum(RarityTier, native_enum=False))
    quality_score: Mapped[int] = mapped_column(Integer)
    was_new_unlock: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
