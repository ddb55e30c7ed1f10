"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Every method is scoped to a single tenant_id
    - Implementations raise StorageError on failure (never return sentinel errors)

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fakes
    - Async in Protocol: implementations do IO; the core functions that consume
      their results are never async themselves
"""

from typing import Protocol, Sequence

from quota_engine.core.domain_types import PlanTier, RecordSource, TenantId
from quota_engine.core.eviction_order import EvictionCandidate


class TenantPlanProvider(Protocol):
    """Read-only access to a tenant's current plan tier (owned by billing)."""
    async def get_plan(self, tenant_id: TenantId) -> PlanTier: ...


class RecordStore(Protocol):
    """Count, select and delete a tenant's records in one source."""
    async def count(self, tenant_id: TenantId, source: RecordSource) -> int | None: ...

    async def fetch_oldest(
        self, tenant_id: TenantId, source: RecordSource, limit: int,
    ) -> list[EvictionCandidate]: ...

    async def delete(
        self, tenant_id: TenantId, source: RecordSource, ids: Sequence[int | str],
    ) -> int: ...
