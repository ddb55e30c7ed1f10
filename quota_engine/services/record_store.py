"""SQL Record Store: RecordStore implementation over the transactions and receipts tables.

Invariants:
    - Every statement filters on user_id (never crosses tenant boundaries)
    - fetch_oldest orders by (timestamp ASC, id ASC) and returns typed candidates;
      receipt trip ids compare byte-wise, matching the in-memory merge
    - delete returns the rowcount the database reports, not len(ids)
    - Each delete commits on its own; sources are never wrapped in one transaction
    - SQLAlchemy failures surface as StorageError with tenant/source context

Design Decisions:
    - Explicit source -> (model, timestamp column) table: every mapping visible in one place
    - No retries here: callers own retry policy
"""

import logging
from typing import Sequence

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quota_engine.core.domain_types import RecordSource, TenantId
from quota_engine.core.errors import ErrorContext, StorageError
from quota_engine.core.eviction_order import EvictionCandidate, make_candidate
from quota_engine.models.receipt_trip import ReceiptTrip
from quota_engine.models.transaction import BankTransaction

logger = logging.getLogger(__name__)

_SOURCES = {
    RecordSource.TRANSACTIONS: (BankTransaction, BankTransaction.tx_date),
    RecordSource.RECEIPT_TRIPS: (ReceiptTrip, ReceiptTrip.receipt_date),
}


def oldest_query(
    source: RecordSource, tenant_id: TenantId, limit: int, dialect_name: str,
) -> Select:
    """Oldest-first id/timestamp select for one source.

    Receipt trip ids sort byte-wise, the order merge_oldest uses. PostgreSQL
    needs an explicit "C" collation for that; SQLite's BINARY default already sorts so.
    """
    model, ts_column = _SOURCES[source]
    id_order = model.id
    if source == RecordSource.RECEIPT_TRIPS and dialect_name == "postgresql":
        id_order = model.id.collate("C")
    return (
        select(model.id, ts_column)
        .where(model.user_id == tenant_id)
        .order_by(ts_column.asc(), id_order.asc())
        .limit(limit)
    )


def _coerce_ids(source: RecordSource, ids: Sequence[int | str]) -> list:
    if source == RecordSource.TRANSACTIONS:
        return [int(i) for i in ids]
    return [str(i) for i in ids]


class SqlRecordStore:
    """Per-source count/fetch/delete against the shared record database."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count(self, tenant_id: TenantId, source: RecordSource) -> int | None:
        model, _ = _SOURCES[RecordSource(source)]
        try:
            result = await self.db.execute(
                select(func.count()).select_from(model)
                .where(model.user_id == tenant_id),
            )
        except SQLAlchemyError as e:
            raise self._storage_error(e, "count", tenant_id, source) from e
        return result.scalar_one_or_none()

    async def fetch_oldest(
        self, tenant_id: TenantId, source: RecordSource, limit: int,
    ) -> list[EvictionCandidate]:
        source = RecordSource(source)
        if limit <= 0:
            return []
        query = oldest_query(
            source, tenant_id, limit, self.db.get_bind().dialect.name,
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise self._storage_error(e, "fetch", tenant_id, source) from e
        return [make_candidate(source, row[0], row[1]) for row in result.all()]

    async def delete(
        self, tenant_id: TenantId, source: RecordSource, ids: Sequence[int | str],
    ) -> int:
        source = RecordSource(source)
        if not ids:
            return 0
        model, _ = _SOURCES[source]
        try:
            result = await self.db.execute(
                delete(model)
                .where(model.user_id == tenant_id)
                .where(model.id.in_(_coerce_ids(source, ids))),
            )
            deleted = max(0, result.rowcount or 0)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise self._storage_error(e, "delete", tenant_id, source) from e
        if deleted < len(ids):
            logger.info(
                f"Delete on {source.value} removed {deleted}/{len(ids)} rows "
                f"(others already gone)",
                extra={"tenant_id": tenant_id, "source": source.value},
            )
        return deleted

    @staticmethod
    def _storage_error(
        exc: Exception, operation: str, tenant_id: TenantId, source: RecordSource,
    ) -> StorageError:
        logger.error(
            f"Record store {operation} failed: {exc}",
            extra={"tenant_id": tenant_id, "source": RecordSource(source).value},
        )
        return StorageError(
            type(exc).__name__, operation,
            ErrorContext(tenant_id=tenant_id, source=RecordSource(source).value),
        )
