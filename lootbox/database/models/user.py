# lootbox/database/models/user.py
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Date, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from lootbox.database.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("daily_spins_used >= 0", name="ck_users_daily_spins_used_nonneg"),
        CheckConstraint("admin_override_spins >= 0", name="ck_users_override_spins_nonneg"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    telegram_id: Mapped[int] = mapped_column(BigInteger, unique=True, index=True)

    username: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # IANA name; NULL means "use DEFAULT_TIMEZONE"
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Spin entitlement
    daily_spins_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    daily_spins_reset_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    admin_override_spins: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # granted with /promote; root admins come from ROOT_ADMIN_IDS
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )
