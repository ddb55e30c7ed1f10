"""Admission Enforcement: tests for the admit/deny decision table.

Tests cover:
    - Batches that fit are admitted (including exactly filling the cap)
    - Denials carry LIMIT_EXCEEDED and remediation in canonical order
    - IMPORT_PARTIAL only with remaining > 0, UPGRADE only below the top tier
    - Date range is echoed only when provided
"""

import pytest

from quota_engine.core.domain_types import PlanTier, SuggestedAction
from quota_engine.core.enforce_admission import (
    LIMIT_EXCEEDED,
    Admitted,
    LimitExceededResult,
    build_suggested_actions,
    calculate_partial_import_size,
    evaluate_admission,
    is_limit_exceeded_payload,
)


# ─── evaluate_admission ──────────────────────────────────────────

def test_admits_when_batch_fits():
    result = evaluate_admission(PlanTier.FREE, 300, 100, 50)
    assert isinstance(result, Admitted)
    assert result.ok is True
    assert result.remaining == 200


def test_admits_batch_that_exactly_fills_cap():
    result = evaluate_admission(PlanTier.FREE, 300, 250, 50)
    assert isinstance(result, Admitted)


def test_admits_empty_batch_when_full():
    result = evaluate_admission(PlanTier.FREE, 300, 300, 0)
    assert isinstance(result, Admitted)


def test_denies_with_partial_option():
    result = evaluate_admission(PlanTier.FREE, 300, 290, 20)
    assert isinstance(result, LimitExceededResult)
    assert result.ok is False
    assert result.code == LIMIT_EXCEEDED
    assert result.remaining == 10
    assert result.suggested_actions == (
        SuggestedAction.IMPORT_PARTIAL,
        SuggestedAction.FILTER_BY_DATE,
        SuggestedAction.UPGRADE,
        SuggestedAction.DELETE_EXISTING,
    )
    assert result.upgrade_plans == (PlanTier.PRO, PlanTier.MAX)


def test_denies_without_partial_when_full():
    result = evaluate_admission(PlanTier.PRO, 1500, 1500, 1)
    assert SuggestedAction.IMPORT_PARTIAL not in result.suggested_actions
    assert result.upgrade_plans == (PlanTier.MAX,)


def test_top_tier_gets_no_upgrade():
    result = evaluate_admission(PlanTier.MAX, 5000, 4990, 20)
    assert SuggestedAction.UPGRADE not in result.suggested_actions
    assert result.upgrade_plans == ()
    assert SuggestedAction.DELETE_EXISTING in result.suggested_actions
    assert SuggestedAction.FILTER_BY_DATE in result.suggested_actions


def test_over_cap_tenant_has_zero_remaining():
    result = evaluate_admission(PlanTier.FREE, 300, 320, 1)
    assert result.remaining == 0


def test_build_suggested_actions_is_pure():
    first = build_suggested_actions(PlanTier.FREE, 300, 290, 10, 20)
    second = build_suggested_actions(PlanTier.FREE, 300, 290, 10, 20)
    assert first == second


# ─── payloads ────────────────────────────────────────────────────

def test_denial_payload_without_dates():
    payload = evaluate_admission(PlanTier.FREE, 300, 290, 20).to_payload()
    assert payload == {
        "code": "LIMIT_EXCEEDED",
        "plan": "free",
        "cap": 300,
        "used": 290,
        "remaining": 10,
        "incomingCount": 20,
        "suggestedActions": [
            "IMPORT_PARTIAL", "FILTER_BY_DATE", "UPGRADE", "DELETE_EXISTING",
        ],
        "upgradePlans": ["pro", "max"],
    }
    assert is_limit_exceeded_payload(payload)


def test_denial_payload_echoes_dates():
    payload = evaluate_admission(
        PlanTier.FREE, 300, 290, 20, date_min="2024-01-01", date_max="2024-03-31",
    ).to_payload()
    assert payload["dateMin"] == "2024-01-01"
    assert payload["dateMax"] == "2024-03-31"


def test_admitted_payload_is_not_limit_exceeded():
    payload = evaluate_admission(PlanTier.PRO, 1500, 0, 10).to_payload()
    assert payload["ok"] is True
    assert not is_limit_exceeded_payload(payload)
    assert not is_limit_exceeded_payload(None)


# ─── partial import ──────────────────────────────────────────────

@pytest.mark.parametrize("incoming, remaining, allowed, skipped", [
    (20, 10, 10, 10),
    (5, 10, 5, 0),
    (5, 0, 0, 5),
    (-1, 10, 0, 0),
])
def test_partial_import_size(incoming, remaining, allowed, skipped):
    size = calculate_partial_import_size(incoming, remaining)
    assert (size.allowed_count, size.skipped_count) == (allowed, skipped)
