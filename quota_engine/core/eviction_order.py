"""Eviction Order: tagged-union candidates and the deterministic oldest-first merge.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - TransactionCandidate.id is int, ReceiptTripCandidate.id is str; never coerced to a shared type
    - Timestamps are timezone-aware UTC after construction (naive values are read as UTC)
    - Sort key is (timestamp, source rank, id): ids are only compared within one source
    - merge_oldest output is independent of the order its input streams are given in

Design Decisions:
    - Source rank breaks cross-source timestamp ties: transactions before receiptTrips
    - Receipt trip ids compare by ordinal string order (stable for UUIDs and opaque keys)
    - Duplicate (source, id) pairs collapse to the first occurrence
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from heapq import merge
from typing import Iterable, Union

from quota_engine.core.domain_types import RecordSource

SOURCE_RANK: dict[RecordSource, int] = {
    RecordSource.TRANSACTIONS: 0,
    RecordSource.RECEIPT_TRIPS: 1,
}


def normalize_timestamp(value: datetime | date | str) -> datetime:
    """Coerce a stored timestamp (datetime, date or ISO string) to aware UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if not isinstance(value, datetime):
        raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TransactionCandidate:
    """A bank transaction eligible for eviction (numeric id)."""
    id: int
    timestamp: datetime

    source = RecordSource.TRANSACTIONS

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise TypeError(f"transactions id must be int, got {type(self.id).__name__}")
        object.__setattr__(self, "timestamp", normalize_timestamp(self.timestamp))

    def sort_key(self) -> tuple:
        return (self.timestamp, SOURCE_RANK[self.source], self.id)

    def to_dict(self) -> dict:
        return {
            "source": self.source.value,
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ReceiptTripCandidate:
    """A receipt trip eligible for eviction (opaque string id)."""
    id: str
    timestamp: datetime

    source = RecordSource.RECEIPT_TRIPS

    def __post_init__(self):
        if not isinstance(self.id, str):
            raise TypeError(f"receiptTrips id must be str, got {type(self.id).__name__}")
        object.__setattr__(self, "timestamp", normalize_timestamp(self.timestamp))

    def sort_key(self) -> tuple:
        return (self.timestamp, SOURCE_RANK[self.source], self.id)

    def to_dict(self) -> dict:
        return {
            "source": self.source.value,
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
        }


EvictionCandidate = Union[TransactionCandidate, ReceiptTripCandidate]


def make_candidate(
    source: RecordSource | str, record_id: object, timestamp: datetime | date | str,
) -> EvictionCandidate:
    """Build the right candidate variant from a raw (source, id, timestamp) row."""
    source = RecordSource(source)
    if source == RecordSource.TRANSACTIONS:
        return TransactionCandidate(id=int(record_id), timestamp=timestamp)
    return ReceiptTripCandidate(id=str(record_id), timestamp=timestamp)


def candidate_sort_key(candidate: EvictionCandidate) -> tuple:
    return candidate.sort_key()


def merge_oldest(
    streams: Iterable[Iterable[EvictionCandidate]], count: int,
) -> list[EvictionCandidate]:
    """Merge per-source candidate streams into the `count` globally oldest.

    Each stream is sorted first, so callers need not trust store ordering.
    Returns min(count, distinct candidates available) entries.
    """
    if count <= 0:
        return []
    ordered = [sorted(s, key=candidate_sort_key) for s in streams]
    seen: set[tuple[RecordSource, object]] = set()
    result: list[EvictionCandidate] = []
    for candidate in merge(*ordered, key=candidate_sort_key):
        identity = (candidate.source, candidate.id)
        if identity in seen:
            continue
        seen.add(identity)
        result.append(candidate)
        if len(result) == count:
            break
    return result


def partition_by_source(
    candidates: Iterable[EvictionCandidate],
) -> dict[RecordSource, list]:
    """Group candidate ids by source, preserving order. Every source has a key."""
    partitions: dict[RecordSource, list] = {source: [] for source in RecordSource}
    for candidate in candidates:
        partitions[candidate.source].append(candidate.id)
    return partitions
