"""BankTransaction ORM: imported bank statement rows, one of the two quota sources.

Invariants:
    - id is an integer primary key (numeric eviction tie-break)
    - user_id scopes every row to one tenant
    - tx_date is the eviction timestamp (oldest tx_date goes first)

Design Decisions:
    - Composite index (user_id, tx_date, id) matches the oldest-first scan
    - Only the columns the quota engine reads are mapped; import owns the rest
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, Numeric, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from quota_engine.db.base import Base


class BankTransaction(Base):
    """Bank transaction row counted against the tenant's record cap."""
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_user_tx_date_id", "user_id", "tx_date", "id"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    tx_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[float | None] = mapped_column(
        Numeric(14, 2), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
