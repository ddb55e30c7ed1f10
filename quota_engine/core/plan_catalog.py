"""Plan Catalog: single source of truth for plan tier -> record cap.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - PLAN_CATALOG has one entry per PlanTier, iterated in ascending cap order
    - Unknown plan tiers raise UnknownPlanError (never a silent fallback)

Design Decisions:
    - Enforcement and the /plans endpoint both read PLAN_CATALOG, so what is
      enforced and what is displayed come from the same artifact
    - Bump PLAN_CATALOG_VERSION whenever a cap changes
"""

from dataclasses import dataclass

from quota_engine.core.domain_types import BillingInterval, PlanTier
from quota_engine.core.errors import ConfigurationError, UnknownPlanError

PLAN_CATALOG_VERSION = "2025.1"


@dataclass(frozen=True)
class PlanLimits:
    """Record-quota limits for one plan tier."""
    display_name: str
    max_total_records: int
    max_total_records_annual: int


PLAN_CATALOG: dict[PlanTier, PlanLimits] = {
    PlanTier.FREE: PlanLimits(
        display_name="Free",
        max_total_records=300,
        max_total_records_annual=300,   # no annual variant
    ),
    PlanTier.PRO: PlanLimits(
        display_name="Pro",
        max_total_records=1500,
        max_total_records_annual=2000,
    ),
    PlanTier.MAX: PlanLimits(
        display_name="Max",
        max_total_records=5000,
        max_total_records_annual=6000,
    ),
}


def resolve_plan(plan: PlanTier | str) -> PlanTier:
    """Coerce a plan value to PlanTier, raising UnknownPlanError if absent."""
    try:
        tier = PlanTier(plan)
    except ValueError:
        raise UnknownPlanError(plan) from None
    if tier not in PLAN_CATALOG:
        raise UnknownPlanError(plan)
    return tier


def get_plan_limits(plan: PlanTier | str) -> PlanLimits:
    return PLAN_CATALOG[resolve_plan(plan)]


def get_cap(plan: PlanTier | str) -> int:
    """Total records a tenant on `plan` may hold."""
    return get_plan_limits(plan).max_total_records


def get_base_capacity(
    plan: PlanTier | str,
    billing_interval: BillingInterval | str = BillingInterval.MONTHLY,
) -> int:
    """Cap for a plan considering billing interval (annual subscribers get more)."""
    limits = get_plan_limits(plan)
    try:
        interval = BillingInterval(billing_interval)
    except ValueError:
        raise ConfigurationError(
            f"Unknown billing interval: {billing_interval!r}",
        ) from None
    if interval == BillingInterval.ANNUAL:
        return limits.max_total_records_annual
    return limits.max_total_records


def list_plans() -> list[PlanTier]:
    """All tiers, ascending by cap."""
    return sorted(PLAN_CATALOG, key=lambda p: PLAN_CATALOG[p].max_total_records)


def get_upgrade_plans(current: PlanTier | str) -> list[PlanTier]:
    """Every tier strictly above `current`, ascending by cap. Empty at the top tier."""
    return [p for p in list_plans() if needs_upgrade(current, p)]


def needs_upgrade(current: PlanTier | str, required: PlanTier | str) -> bool:
    return get_cap(current) < get_cap(required)


def get_plan_display_name(plan: PlanTier | str) -> str:
    return get_plan_limits(plan).display_name
