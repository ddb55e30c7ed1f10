"""Admission Enforcement: decides whether an incoming batch fits and how to remediate if not.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - incoming_count <= remaining admits; anything else returns LimitExceededResult
    - DELETE_EXISTING and FILTER_BY_DATE are always suggested on denial
    - IMPORT_PARTIAL suggested iff remaining > 0
    - UPGRADE suggested iff upgrade_plans is non-empty (tiers strictly above, ascending cap)
    - Suggested actions are emitted in SuggestedAction declaration order

Design Decisions:
    - Return values, not exceptions: a denial is a normal outcome the caller renders,
      keeping it distinct from StorageError
    - to_payload() uses the camelCase field names UI code branches on
"""

from dataclasses import dataclass, field

from quota_engine.core.domain_types import PlanTier, SuggestedAction
from quota_engine.core.plan_catalog import get_upgrade_plans, resolve_plan
from quota_engine.core.usage import compute_remaining

LIMIT_EXCEEDED = "LIMIT_EXCEEDED"


@dataclass(frozen=True)
class Remediation:
    suggested_actions: tuple[SuggestedAction, ...]
    upgrade_plans: tuple[PlanTier, ...] = ()


@dataclass(frozen=True)
class Admitted:
    """Incoming batch fits within remaining capacity."""
    plan: PlanTier
    cap: int
    used: int
    remaining: int
    incoming_count: int

    ok = True

    def to_payload(self) -> dict:
        return {
            "ok": True,
            "plan": self.plan.value,
            "cap": self.cap,
            "used": self.used,
            "remaining": self.remaining,
            "incomingCount": self.incoming_count,
        }


@dataclass(frozen=True)
class LimitExceededResult:
    """Structured denial with remediation options."""
    plan: PlanTier
    cap: int
    used: int
    remaining: int
    incoming_count: int
    suggested_actions: tuple[SuggestedAction, ...]
    upgrade_plans: tuple[PlanTier, ...] = ()
    date_min: str | None = None
    date_max: str | None = None
    code: str = field(default=LIMIT_EXCEEDED, init=False)

    ok = False

    def to_payload(self) -> dict:
        payload = {
            "code": self.code,
            "plan": self.plan.value,
            "cap": self.cap,
            "used": self.used,
            "remaining": self.remaining,
            "incomingCount": self.incoming_count,
            "suggestedActions": [a.value for a in self.suggested_actions],
            "upgradePlans": [p.value for p in self.upgrade_plans],
        }
        if self.date_min is not None:
            payload["dateMin"] = self.date_min
        if self.date_max is not None:
            payload["dateMax"] = self.date_max
        return payload


AdmissionResult = Admitted | LimitExceededResult


def build_suggested_actions(
    plan: PlanTier | str, cap: int, used: int, remaining: int, incoming_count: int,
) -> Remediation:
    """Decision table for a denied batch. Pure over its five inputs."""
    upgrade_plans = tuple(get_upgrade_plans(plan))
    actions = {SuggestedAction.DELETE_EXISTING, SuggestedAction.FILTER_BY_DATE}
    if remaining > 0:
        actions.add(SuggestedAction.IMPORT_PARTIAL)
    if upgrade_plans:
        actions.add(SuggestedAction.UPGRADE)
    return Remediation(
        suggested_actions=tuple(a for a in SuggestedAction if a in actions),
        upgrade_plans=upgrade_plans,
    )


def evaluate_admission(
    plan: PlanTier | str,
    cap: int,
    used: int,
    incoming_count: int,
    date_min: str | None = None,
    date_max: str | None = None,
) -> AdmissionResult:
    """Admit or deny `incoming_count` new records for a tenant at `used`/`cap`."""
    tier = resolve_plan(plan)
    remaining = compute_remaining(cap, used)
    if incoming_count <= remaining:
        return Admitted(
            plan=tier, cap=cap, used=used,
            remaining=remaining, incoming_count=incoming_count,
        )

    remediation = build_suggested_actions(tier, cap, used, remaining, incoming_count)
    return LimitExceededResult(
        plan=tier,
        cap=cap,
        used=used,
        remaining=remaining,
        incoming_count=incoming_count,
        suggested_actions=remediation.suggested_actions,
        upgrade_plans=remediation.upgrade_plans,
        date_min=date_min,
        date_max=date_max,
    )


@dataclass(frozen=True)
class PartialImportSize:
    allowed_count: int
    skipped_count: int


def calculate_partial_import_size(incoming_count: int, remaining: int) -> PartialImportSize:
    """Slice of an incoming batch that still fits (IMPORT_PARTIAL)."""
    incoming_count = max(0, incoming_count)
    remaining = max(0, remaining)
    return PartialImportSize(
        allowed_count=min(incoming_count, remaining),
        skipped_count=max(0, incoming_count - remaining),
    )


def is_limit_exceeded_payload(payload: object) -> bool:
    """True for a serialized LimitExceededResult (e.g. a 403 response body)."""
    return isinstance(payload, dict) and payload.get("code") == LIMIT_EXCEEDED
