"""Plan Catalog: tests for tier -> cap lookups and upgrade paths.

Tests cover:
    - get_cap returns the configured cap per tier
    - Unknown tiers raise UnknownPlanError
    - get_upgrade_plans returns strictly higher tiers in ascending order
    - get_base_capacity honors the billing interval
"""

import pytest

from quota_engine.core.domain_types import BillingInterval, PlanTier
from quota_engine.core.errors import ConfigurationError, UnknownPlanError
from quota_engine.core.plan_catalog import (
    PLAN_CATALOG,
    get_base_capacity,
    get_cap,
    get_plan_display_name,
    get_upgrade_plans,
    list_plans,
    needs_upgrade,
    resolve_plan,
)


# ─── get_cap ─────────────────────────────────────────────────────

def test_get_cap_per_tier():
    assert get_cap(PlanTier.FREE) == 300
    assert get_cap(PlanTier.PRO) == 1500
    assert get_cap(PlanTier.MAX) == 5000


def test_get_cap_accepts_raw_string():
    assert get_cap("pro") == 1500


def test_get_cap_unknown_plan_raises():
    with pytest.raises(UnknownPlanError) as exc_info:
        get_cap("enterprise")
    assert exc_info.value.plan == "enterprise"
    assert exc_info.value.code == "UNKNOWN_PLAN"


def test_unknown_plan_is_configuration_error():
    with pytest.raises(ConfigurationError):
        resolve_plan("gold")


def test_catalog_covers_every_tier():
    assert set(PLAN_CATALOG) == set(PlanTier)


# ─── upgrade paths ───────────────────────────────────────────────

def test_list_plans_ascending_by_cap():
    caps = [get_cap(p) for p in list_plans()]
    assert caps == sorted(caps)


def test_upgrade_plans_from_free():
    assert get_upgrade_plans(PlanTier.FREE) == [PlanTier.PRO, PlanTier.MAX]


def test_upgrade_plans_from_pro():
    assert get_upgrade_plans(PlanTier.PRO) == [PlanTier.MAX]


def test_upgrade_plans_empty_at_top_tier():
    assert get_upgrade_plans(PlanTier.MAX) == []


def test_upgrade_plans_are_exactly_the_tiers_needing_upgrade():
    for current in PlanTier:
        assert get_upgrade_plans(current) == [
            p for p in list_plans() if needs_upgrade(current, p)
        ]


def test_needs_upgrade():
    assert needs_upgrade(PlanTier.FREE, PlanTier.PRO) is True
    assert needs_upgrade(PlanTier.MAX, PlanTier.PRO) is False
    assert needs_upgrade(PlanTier.PRO, PlanTier.PRO) is False


# ─── billing interval ────────────────────────────────────────────

def test_base_capacity_monthly_matches_cap():
    assert get_base_capacity(PlanTier.PRO) == get_cap(PlanTier.PRO)


def test_base_capacity_annual_is_higher_for_paid_tiers():
    assert get_base_capacity(PlanTier.PRO, BillingInterval.ANNUAL) == 2000
    assert get_base_capacity(PlanTier.MAX, "annual") == 6000


def test_base_capacity_free_has_no_annual_bonus():
    assert get_base_capacity(PlanTier.FREE, BillingInterval.ANNUAL) == 300


def test_base_capacity_unknown_interval_raises():
    with pytest.raises(ConfigurationError):
        get_base_capacity(PlanTier.PRO, "weekly")


def test_display_name():
    assert get_plan_display_name("max") == "Max"
