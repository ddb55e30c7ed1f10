"""Eviction: oldest-first selection and user-triggered deletion down to a target cap.

Invariants:
    - get_oldest_candidates(count <= 0) returns [] without touching the store
    - Selection asks each source for at most `count` rows, then merges in core
    - enforce_cap with target_cap <= 0 is a no-op with zero store calls
    - enforce_cap with to_delete == 0 issues no candidate query and no delete
    - One delete batch per non-empty source; tallies are the store's reported rowcounts
    - No rollback across sources: a failed second delete keeps the first one's rows deleted
    - enforce_cap is only ever called from an explicit user action, never on a timer

Design Decisions:
    - Selector and executor split: preview endpoints reuse the selector without
      any destructive capability
    - Partial failures raise PartialEnforcementError carrying the real tally;
      failures before any row is deleted re-raise the store's StorageError as-is
"""

import logging

from quota_engine.core.cap_decision import (
    CapDecision,
    EnforcementResult,
    calculate_cap_decision,
    noop_enforcement,
    tally_enforcement,
)
from quota_engine.core.domain_types import RecordSource, TenantId
from quota_engine.core.errors import ErrorContext, PartialEnforcementError, StorageError
from quota_engine.core.eviction_order import (
    EvictionCandidate,
    merge_oldest,
    partition_by_source,
)
from quota_engine.core.repository_protocols import RecordStore
from quota_engine.services.usage_counter import UsageCounter

logger = logging.getLogger(__name__)

# Fetch and delete sequence
_DELETE_ORDER = (RecordSource.TRANSACTIONS, RecordSource.RECEIPT_TRIPS)


class EvictionSelector:
    """Computes how much must go and which records are the oldest."""

    def __init__(self, store: RecordStore, usage_counter: UsageCounter):
        self.store = store
        self.usage_counter = usage_counter

    async def calculate_deletions_for_cap(
        self, tenant_id: TenantId, target_cap: int,
    ) -> CapDecision:
        usage = await self.usage_counter.get_usage(tenant_id)
        return calculate_cap_decision(usage.total, target_cap)

    async def get_oldest_candidates(
        self, tenant_id: TenantId, count: int,
    ) -> list[EvictionCandidate]:
        if count <= 0:
            return []
        streams = []
        for source in _DELETE_ORDER:
            streams.append(await self.store.fetch_oldest(tenant_id, source, count))
        return merge_oldest(streams, count)


class EvictionExecutor:
    """Deletes the oldest records until a tenant fits under a target cap."""

    def __init__(self, selector: EvictionSelector, store: RecordStore):
        self.selector = selector
        self.store = store

    async def enforce_cap(self, tenant_id: TenantId, target_cap: int) -> EnforcementResult:
        if target_cap <= 0:
            logger.warning(
                f"Ignoring non-positive target cap {target_cap}",
                extra={"tenant_id": tenant_id, "target_cap": target_cap},
            )
            return EnforcementResult()
        decision = await self.selector.calculate_deletions_for_cap(tenant_id, target_cap)
        if decision.to_delete == 0:
            return noop_enforcement(decision)

        logger.warning(
            f"Tenant over target ({decision.current_total}/{target_cap}), "
            f"deleting {decision.to_delete} oldest record(s)",
            extra={
                "tenant_id": tenant_id,
                "target_cap": target_cap,
                "to_delete": decision.to_delete,
            },
        )
        candidates = await self.selector.get_oldest_candidates(
            tenant_id, decision.to_delete,
        )
        partitions = partition_by_source(candidates)

        deleted: dict[RecordSource, int] = {}
        for source in _DELETE_ORDER:
            ids = partitions[source]
            if not ids:
                continue
            try:
                deleted[source] = await self.store.delete(tenant_id, source, ids)
            except StorageError as e:
                if sum(deleted.values()) == 0:
                    raise
                partial = tally_enforcement(decision, deleted)
                logger.error(
                    f"Partial enforcement: {source.value} delete failed after "
                    f"{partial.deleted} row(s) removed",
                    extra={"tenant_id": tenant_id, "source": source.value},
                )
                raise PartialEnforcementError(
                    partial, source.value, ErrorContext(tenant_id=tenant_id),
                ) from e

        result = tally_enforcement(decision, deleted)
        logger.info(
            f"Deleted {result.deleted} record(s) "
            f"({result.tables.transactions} bank, {result.tables.receipt_trips} receipt trips)",
            extra={
                "tenant_id": tenant_id,
                "deleted": result.deleted,
                "deleted_transactions": result.tables.transactions,
                "deleted_receipt_trips": result.tables.receipt_trips,
            },
        )
        return result
