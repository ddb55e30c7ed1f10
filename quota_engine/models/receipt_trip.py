"""ReceiptTrip ORM: one scanned shopping receipt, the second quota source.

Invariants:
    - id is an opaque string (UUID text), never compared numerically
    - user_id scopes every row to one tenant
    - receipt_date is the eviction timestamp

Design Decisions:
    - String id over native UUID: portable across PostgreSQL and SQLite test DBs
    - Line items hang off the trip in the receipts module; a trip counts once
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Numeric, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from quota_engine.db.base import Base


class ReceiptTrip(Base):
    """Receipt trip counted against the tenant's record cap."""
    __tablename__ = "receipts"
    __table_args__ = (
        Index("ix_receipts_user_receipt_date_id", "user_id", "receipt_date", "id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    receipt_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    store_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    total_amount: Mapped[float | None] = mapped_column(
        Numeric(14, 2), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
