"""Tenant Plan Provider: tests for subscription -> effective plan resolution."""

from datetime import datetime, timedelta, timezone

import pytest

from quota_engine.core.domain_types import PlanTier, TenantId
from quota_engine.core.errors import UnknownPlanError
from quota_engine.models.subscription import Subscription
from quota_engine.services.plan_provider import SqlTenantPlanProvider, effective_plan

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)
TENANT = TenantId("tenant-1")


# ─── effective_plan ──────────────────────────────────────────────

def test_active_keeps_plan():
    assert effective_plan("pro", "active", None, NOW) == PlanTier.PRO


def test_trialing_keeps_plan():
    assert effective_plan("max", "trialing", None, NOW) == PlanTier.MAX


def test_canceled_keeps_plan_until_period_end():
    end = NOW + timedelta(days=3)
    assert effective_plan("pro", "canceled", end, NOW) == PlanTier.PRO


def test_canceled_after_period_end_is_free():
    end = NOW - timedelta(days=1)
    assert effective_plan("pro", "canceled", end, NOW) == PlanTier.FREE


def test_past_due_without_period_end_is_free():
    assert effective_plan("max", "past_due", None, NOW) == PlanTier.FREE


def test_unknown_stored_plan_raises():
    with pytest.raises(UnknownPlanError):
        effective_plan("platinum", "active", None, NOW)


# ─── SqlTenantPlanProvider ───────────────────────────────────────

async def test_no_subscription_is_free(test_db):
    provider = SqlTenantPlanProvider(test_db, clock=lambda: NOW)
    assert await provider.get_plan(TENANT) == PlanTier.FREE


async def test_reads_subscription_row(test_db):
    test_db.add(Subscription(user_id=TENANT, plan="pro", status="active"))
    await test_db.commit()
    provider = SqlTenantPlanProvider(test_db, clock=lambda: NOW)
    assert await provider.get_plan(TENANT) == PlanTier.PRO


async def test_lapsed_subscription_row_is_free(test_db):
    test_db.add(Subscription(
        user_id=TENANT, plan="max", status="canceled",
        current_period_end=NOW - timedelta(days=10),
    ))
    await test_db.commit()
    provider = SqlTenantPlanProvider(test_db, clock=lambda: NOW)
    assert await provider.get_plan(TENANT) == PlanTier.FREE
