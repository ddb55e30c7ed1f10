"""Capacity Gate: admission control before a batch of new records is written.

Invariants:
    - Reads plan + usage once, then delegates to the pure evaluate_admission
    - Never writes or deletes; a denial is a LimitExceededResult value
    - StorageError and ConfigurationError propagate (they are not denials)
"""

import logging
from dataclasses import dataclass

from quota_engine.core.domain_types import PlanTier, TenantId
from quota_engine.core.enforce_admission import (
    AdmissionResult,
    LimitExceededResult,
    PartialImportSize,
    calculate_partial_import_size,
    evaluate_admission,
)
from quota_engine.services.usage_counter import UsageCounter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemainingCapacityCheck:
    has_capacity: bool
    remaining: int
    plan: PlanTier


class CapacityGate:
    """Admission decisions for incoming record batches."""

    def __init__(self, usage_counter: UsageCounter):
        self.usage_counter = usage_counter

    async def check_admission(
        self,
        tenant_id: TenantId,
        incoming_count: int,
        date_min: str | None = None,
        date_max: str | None = None,
    ) -> AdmissionResult:
        capacity = await self.usage_counter.get_capacity(tenant_id)
        result = evaluate_admission(
            capacity.plan, capacity.cap, capacity.used, incoming_count,
            date_min=date_min, date_max=date_max,
        )
        if isinstance(result, LimitExceededResult):
            logger.info(
                f"Admission denied: {incoming_count} incoming, {result.remaining} remaining",
                extra={
                    "tenant_id": tenant_id,
                    "plan": result.plan.value,
                    "cap": result.cap,
                    "used": result.used,
                    "incoming_count": incoming_count,
                },
            )
        return result

    async def has_any_remaining_capacity(self, tenant_id: TenantId) -> RemainingCapacityCheck:
        """Fail-fast check before expensive work (e.g. parsing a large upload)."""
        capacity = await self.usage_counter.get_capacity(tenant_id)
        return RemainingCapacityCheck(
            has_capacity=capacity.remaining > 0,
            remaining=capacity.remaining,
            plan=capacity.plan,
        )

    async def get_partial_import_size(
        self, tenant_id: TenantId, incoming_count: int,
    ) -> PartialImportSize:
        """How much of a denied batch still fits (IMPORT_PARTIAL)."""
        capacity = await self.usage_counter.get_capacity(tenant_id)
        return calculate_partial_import_size(incoming_count, capacity.remaining)
