"""Cap Decision: pure arithmetic for eviction planning and enforcement tallies.

Invariants:
    - to_delete == max(0, current_total - target_cap)
    - would_exceed == current_total > target_cap
    - EnforcementResult.deleted == tables.transactions + tables.receipt_trips
    - calculate_cap_decision applies the formula to any target; destructive
      callers reject non-positive targets before getting here
"""

from dataclasses import dataclass, field

from quota_engine.core.domain_types import RecordSource


@dataclass(frozen=True)
class CapDecision:
    current_total: int
    target_cap: int
    to_delete: int
    would_exceed: bool

    def to_dict(self) -> dict:
        return {
            "currentTotal": self.current_total,
            "targetCap": self.target_cap,
            "toDelete": self.to_delete,
            "wouldExceed": self.would_exceed,
        }


def calculate_cap_decision(current_total: int, target_cap: int) -> CapDecision:
    return CapDecision(
        current_total=current_total,
        target_cap=target_cap,
        to_delete=max(0, current_total - target_cap),
        would_exceed=current_total > target_cap,
    )


@dataclass(frozen=True)
class SourceTally:
    """Rows actually deleted, per record source."""
    transactions: int = 0
    receipt_trips: int = 0

    @property
    def total(self) -> int:
        return self.transactions + self.receipt_trips

    @classmethod
    def from_counts(cls, counts: dict[RecordSource, int]) -> "SourceTally":
        return cls(
            transactions=counts.get(RecordSource.TRANSACTIONS, 0),
            receipt_trips=counts.get(RecordSource.RECEIPT_TRIPS, 0),
        )

    def to_dict(self) -> dict:
        return {
            RecordSource.TRANSACTIONS.value: self.transactions,
            RecordSource.RECEIPT_TRIPS.value: self.receipt_trips,
        }


@dataclass(frozen=True)
class EnforcementResult:
    tables: SourceTally = field(default_factory=SourceTally)
    remaining: int = 0

    @property
    def deleted(self) -> int:
        return self.tables.total

    def to_dict(self) -> dict:
        return {
            "deleted": self.deleted,
            "tables": self.tables.to_dict(),
            "remaining": self.remaining,
        }


def noop_enforcement(decision: CapDecision) -> EnforcementResult:
    """Result when nothing has to go: headroom reported as target - current."""
    return EnforcementResult(
        tables=SourceTally(),
        remaining=decision.target_cap - decision.current_total,
    )


def tally_enforcement(
    decision: CapDecision, deleted_by_source: dict[RecordSource, int],
) -> EnforcementResult:
    """Result after deletes, from the rows the store reports as removed."""
    tables = SourceTally.from_counts(deleted_by_source)
    return EnforcementResult(
        tables=tables,
        remaining=max(0, decision.target_cap - (decision.current_total - tables.total)),
    )
