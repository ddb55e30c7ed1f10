"""Capacity Gate: tests for admission checks against live usage."""

import pytest

from quota_engine.core.domain_types import PlanTier, RecordSource, SuggestedAction, TenantId
from quota_engine.core.errors import PartialEnforcementError, StorageError
from quota_engine.core.enforce_admission import Admitted, LimitExceededResult
from quota_engine.services.capacity_gate import CapacityGate
from quota_engine.services.usage_counter import UsageCounter
from tests.services.fakes import FakePlanProvider, FakeRecordStore, ts

TENANT = TenantId("tenant-1")


def _gate(used: int, plan: PlanTier = PlanTier.FREE) -> tuple[CapacityGate, FakeRecordStore]:
    store = FakeRecordStore({"transactions": [(i, ts(1)) for i in range(1, used + 1)]})
    return CapacityGate(UsageCounter(store, FakePlanProvider(plan))), store


async def test_admits_batch_that_fits():
    gate, _ = _gate(100)
    result = await gate.check_admission(TENANT, 50)
    assert isinstance(result, Admitted)
    assert result.remaining == 200


async def test_denies_and_echoes_dates():
    gate, _ = _gate(290)
    result = await gate.check_admission(
        TENANT, 20, date_min="2024-01-01", date_max="2024-02-01",
    )
    assert isinstance(result, LimitExceededResult)
    assert result.remaining == 10
    assert SuggestedAction.IMPORT_PARTIAL in result.suggested_actions
    assert result.date_min == "2024-01-01"
    assert result.date_max == "2024-02-01"


async def test_denial_never_deletes():
    gate, store = _gate(300)
    await gate.check_admission(TENANT, 5)
    assert store.calls_named("delete") == []
    assert store.calls_named("fetch_oldest") == []


async def test_has_any_remaining_capacity():
    gate, _ = _gate(300)
    check = await gate.has_any_remaining_capacity(TENANT)
    assert check.has_capacity is False
    assert check.remaining == 0

    gate, _ = _gate(10, PlanTier.PRO)
    check = await gate.has_any_remaining_capacity(TENANT)
    assert check.has_capacity is True
    assert check.plan == PlanTier.PRO


async def test_storage_failure_is_raised_not_a_denial():
    gate, store = _gate(290)
    store.fail_count_on = RecordSource.TRANSACTIONS
    with pytest.raises(StorageError) as exc_info:
        await gate.check_admission(TENANT, 20)
    assert exc_info.value is store.raised
    assert not isinstance(exc_info.value, PartialEnforcementError)


async def test_partial_import_size_uses_remaining_capacity():
    gate, _ = _gate(290)
    size = await gate.get_partial_import_size(TENANT, 25)
    assert size.allowed_count == 10
    assert size.skipped_count == 15
