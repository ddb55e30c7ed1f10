"""Usage Counter: aggregates a tenant's stored records across both sources.

Invariants:
    - Exactly one RecordStore.count call per source per get_usage
    - Missing/None counts are 0 (UsageSnapshot.from_counts)
    - Read-only: never deletes, never writes plan state
    - StorageError from the store propagates unmodified
"""

import logging

from quota_engine.core.domain_types import RecordSource, TenantId
from quota_engine.core.plan_catalog import get_cap
from quota_engine.core.repository_protocols import RecordStore, TenantPlanProvider
from quota_engine.core.usage import (
    OverageReport,
    TenantCapacity,
    UsageSnapshot,
    build_overage_report,
)

logger = logging.getLogger(__name__)


class UsageCounter:
    """Reads per-source counts and the tenant's plan."""

    def __init__(self, store: RecordStore, plan_provider: TenantPlanProvider):
        self.store = store
        self.plan_provider = plan_provider

    async def get_usage(self, tenant_id: TenantId) -> UsageSnapshot:
        bank = await self.store.count(tenant_id, RecordSource.TRANSACTIONS)
        trips = await self.store.count(tenant_id, RecordSource.RECEIPT_TRIPS)
        return UsageSnapshot.from_counts(bank, trips)

    async def get_capacity(self, tenant_id: TenantId) -> TenantCapacity:
        """Plan, cap and usage in one read. Main input to admission decisions."""
        plan = await self.plan_provider.get_plan(tenant_id)
        cap = get_cap(plan)
        usage = await self.get_usage(tenant_id)
        return TenantCapacity(plan=plan, cap=cap, usage=usage)

    async def get_remaining_capacity(self, tenant_id: TenantId) -> int:
        capacity = await self.get_capacity(tenant_id)
        return capacity.remaining

    async def get_overage(self, tenant_id: TenantId) -> OverageReport:
        """How far above its plan cap a tenant is. Reports only; deletes nothing."""
        report = build_overage_report(await self.get_capacity(tenant_id))
        if report.is_over:
            logger.warning(
                f"Tenant over capacity: {report.current_total}/{report.cap}",
                extra={"tenant_id": tenant_id, "plan": report.plan.value},
            )
        return report
