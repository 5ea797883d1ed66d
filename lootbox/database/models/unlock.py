# lootbox/database/models/unlock.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from lootbox.database.base import Base
from lootbox.database.models.content import ContentType, RarityTier


class UserUnlock(Base):
    """
    First discovery of a content item by a user (trophy cabinet entry).
    Unique per (user_id, content_id); never rewritten by later duplicate spins.
    """
    __tablename__ = "user_unlocks"
    __table_args__ = (
        UniqueConstraint("user_id", "content_id", name="uq_unlock_user_content"),
        Index("ix_unlock_user_type", "user_id", "spin_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    content_id: Mapped[int] = mapped_column(ForeignKey("content.id", ondelete="CASCADE"), index=True)

    spin_type: Mapped[ContentType] = mapped_column(Enum(ContentType, native_enum=False))
    rarity_tier: Mapped[RarityTier] = mapped_column(Enum(RarityTier, native_enum=False), index=True)

    unlocked_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
