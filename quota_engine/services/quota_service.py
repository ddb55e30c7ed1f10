"""Quota Service: wires the quota components over one RecordStore + TenantPlanProvider.

Invariants:
    - One QuotaService per unit of work (per request); holds no cross-request state
    - Exposes exactly the engine's public operations; no business logic of its own

Design Decisions:
    - Explicit construction over a DI container: every collaborator visible here
"""

from sqlalchemy.ext.asyncio import AsyncSession

from quota_engine.core.cap_decision import CapDecision, EnforcementResult
from quota_engine.core.domain_types import PlanTier, TenantId
from quota_engine.core.enforce_admission import AdmissionResult, PartialImportSize
from quota_engine.core.eviction_order import EvictionCandidate
from quota_engine.core.plan_catalog import get_cap
from quota_engine.core.repository_protocols import RecordStore, TenantPlanProvider
from quota_engine.core.usage import OverageReport, TenantCapacity, UsageSnapshot
from quota_engine.services.capacity_gate import CapacityGate, RemainingCapacityCheck
from quota_engine.services.eviction import EvictionExecutor, EvictionSelector
from quota_engine.services.plan_provider import SqlTenantPlanProvider
from quota_engine.services.record_store import SqlRecordStore
from quota_engine.services.usage_counter import UsageCounter


class QuotaService:
    """Public surface of the quota enforcement and eviction engine."""

    def __init__(self, store: RecordStore, plan_provider: TenantPlanProvider):
        self.usage_counter = UsageCounter(store, plan_provider)
        self.selector = EvictionSelector(store, self.usage_counter)
        self.executor = EvictionExecutor(self.selector, store)
        self.gate = CapacityGate(self.usage_counter)

    @classmethod
    def from_session(cls, db: AsyncSession) -> "QuotaService":
        return cls(SqlRecordStore(db), SqlTenantPlanProvider(db))

    @staticmethod
    def get_cap(plan: PlanTier | str) -> int:
        return get_cap(plan)

    async def get_usage(self, tenant_id: TenantId) -> UsageSnapshot:
        return await self.usage_counter.get_usage(tenant_id)

    async def get_capacity(self, tenant_id: TenantId) -> TenantCapacity:
        return await self.usage_counter.get_capacity(tenant_id)

    async def get_remaining_capacity(self, tenant_id: TenantId) -> int:
        return await self.usage_counter.get_remaining_capacity(tenant_id)

    async def get_overage(self, tenant_id: TenantId) -> OverageReport:
        return await self.usage_counter.get_overage(tenant_id)

    async def calculate_deletions_for_cap(
        self, tenant_id: TenantId, target_cap: int,
    ) -> CapDecision:
        return await self.selector.calculate_deletions_for_cap(tenant_id, target_cap)

    async def get_oldest_candidates(
        self, tenant_id: TenantId, count: int,
    ) -> list[EvictionCandidate]:
        return await self.selector.get_oldest_candidates(tenant_id, count)

    async def enforce_cap(self, tenant_id: TenantId, target_cap: int) -> EnforcementResult:
        return await self.executor.enforce_cap(tenant_id, target_cap)

    async def check_admission(
        self,
        tenant_id: TenantId,
        incoming_count: int,
        date_min: str | None = None,
        date_max: str | None = None,
    ) -> AdmissionResult:
        return await self.gate.check_admission(
            tenant_id, incoming_count, date_min=date_min, date_max=date_max,
        )

    async def has_any_remaining_capacity(self, tenant_id: TenantId) -> RemainingCapacityCheck:
        return await self.gate.has_any_remaining_capacity(tenant_id)

    async def get_partial_import_size(
        self, tenant_id: TenantId, incoming_count: int,
    ) -> PartialImportSize:
        return await self.gate.get_partial_import_size(tenant_id, incoming_count)
