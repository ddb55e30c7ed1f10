"""Subscription ORM: plan tier per tenant, written by the billing module.

Invariants:
    - At most one row per user_id
    - The quota engine only ever SELECTs from this table

Design Decisions:
    - plan/status stored as short strings; mapped to PlanTier/SubscriptionStatus on read
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from quota_engine.db.base import Base


class Subscription(Base):
    """Billing-owned subscription state for one tenant."""
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True,
    )
    plan: Mapped[str] = mapped_column(
        String(20), nullable=False, default="free",
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active",
    )
    current_period_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    cancel_at_period_end: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
