"""Usage Snapshot: pure normalization of per-source record counts.

Invariants:
    - total == bank_transactions + receipt_trips, always
    - None / empty / non-numeric-string counts normalize to 0, never raise
    - Counts are never negative

Design Decisions:
    - Normalization lives here, not in the store: every RecordStore gets the
      same treatment of "no rows"
"""

from dataclasses import dataclass

from quota_engine.core.domain_types import PlanTier


def normalize_count(raw: object) -> int:
    """Turn a raw COUNT(*) result into a non-negative int (None/'' -> 0)."""
    if raw is None or raw == "":
        return 0
    if isinstance(raw, bool):
        return int(raw)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 0
    return max(0, value)


@dataclass(frozen=True)
class UsageSnapshot:
    """Current stored-record counts for one tenant."""
    bank_transactions: int
    receipt_trips: int

    @property
    def total(self) -> int:
        return self.bank_transactions + self.receipt_trips

    @classmethod
    def from_counts(cls, bank_transactions: object, receipt_trips: object) -> "UsageSnapshot":
        return cls(
            bank_transactions=normalize_count(bank_transactions),
            receipt_trips=normalize_count(receipt_trips),
        )

    def to_dict(self) -> dict:
        return {
            "bankTransactions": self.bank_transactions,
            "receiptTrips": self.receipt_trips,
            "total": self.total,
        }


@dataclass(frozen=True)
class TenantCapacity:
    """Plan, cap and usage for one tenant at one point in time."""
    plan: PlanTier
    cap: int
    usage: UsageSnapshot

    @property
    def used(self) -> int:
        return self.usage.total

    @property
    def remaining(self) -> int:
        return compute_remaining(self.cap, self.used)


@dataclass(frozen=True)
class OverageReport:
    """Read-only answer to "is this tenant above its plan cap, and by how much"."""
    is_over: bool
    excess: int
    current_total: int
    cap: int
    plan: PlanTier


def compute_remaining(cap: int, used: int) -> int:
    return max(0, cap - used)


def build_overage_report(capacity: TenantCapacity) -> OverageReport:
    excess = max(0, capacity.used - capacity.cap)
    return OverageReport(
        is_over=excess > 0,
        excess=excess,
        current_total=capacity.used,
        cap=capacity.cap,
        plan=capacity.plan,
    )
