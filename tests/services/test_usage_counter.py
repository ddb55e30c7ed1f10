"""Usage Counter: tests for per-source aggregation over a RecordStore."""

import pytest

from quota_engine.core.domain_types import PlanTier, RecordSource, TenantId
from quota_engine.core.errors import StorageError
from quota_engine.services.usage_counter import UsageCounter
from tests.services.fakes import FakePlanProvider, FakeRecordStore, ts

TENANT = TenantId("tenant-1")


async def test_get_usage_sums_both_sources():
    store = FakeRecordStore({
        "transactions": [(i, ts(1)) for i in range(1, 121)],
        "receiptTrips": [(f"r{i}", ts(2)) for i in range(30)],
    })
    usage = await UsageCounter(store, FakePlanProvider()).get_usage(TENANT)
    assert usage.bank_transactions == 120
    assert usage.receipt_trips == 30
    assert usage.total == 150


async def test_get_usage_one_count_per_source():
    store = FakeRecordStore()
    await UsageCounter(store, FakePlanProvider()).get_usage(TENANT)
    assert store.calls == [
        ("count", RecordSource.TRANSACTIONS),
        ("count", RecordSource.RECEIPT_TRIPS),
    ]


async def test_missing_counts_normalize_to_zero():
    store = FakeRecordStore()
    store.count_override = {
        RecordSource.TRANSACTIONS: None, RecordSource.RECEIPT_TRIPS: "",
    }
    usage = await UsageCounter(store, FakePlanProvider()).get_usage(TENANT)
    assert usage.total == 0


async def test_remaining_capacity_uses_plan_cap():
    store = FakeRecordStore({"transactions": [(i, ts(1)) for i in range(1, 101)]})
    counter = UsageCounter(store, FakePlanProvider(PlanTier.PRO))
    assert await counter.get_remaining_capacity(TENANT) == 1400


async def test_overage_reports_excess():
    store = FakeRecordStore({"transactions": [(i, ts(1)) for i in range(1, 311)]})
    report = await UsageCounter(store, FakePlanProvider()).get_overage(TENANT)
    assert report.is_over is True
    assert report.excess == 10
    assert store.calls_named("delete") == []


async def test_count_failure_propagates_unchanged():
    store = FakeRecordStore()
    store.fail_count_on = RecordSource.RECEIPT_TRIPS
    with pytest.raises(StorageError) as exc_info:
        await UsageCounter(store, FakePlanProvider()).get_usage(TENANT)
    assert exc_info.value is store.raised
