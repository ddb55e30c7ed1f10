"""Error Hierarchy: tests for codes, statuses and the REST envelope."""

from quota_engine.core.cap_decision import EnforcementResult, SourceTally
from quota_engine.core.errors import (
    ErrorCategory,
    ConfigurationError,
    ErrorContext,
    PartialEnforcementError,
    StorageError,
    UnknownPlanError,
)


def test_storage_error_envelope():
    err = StorageError("timeout", "count", ErrorContext(tenant_id="t1", source="transactions"))
    body = err.to_response()["error"]
    assert err.http_status == 503
    assert body["code"] == "STORAGE_ERROR"
    assert body["context"] == {
        "tenant_id": "t1", "source": "transactions", "operation": "count",
    }


def test_unknown_plan_is_configuration_error():
    err = UnknownPlanError("gold")
    assert isinstance(err, ConfigurationError)
    assert err.http_status == 500
    assert err.to_response()["error"]["category"] == "configuration"


def test_partial_enforcement_carries_result():
    result = EnforcementResult(tables=SourceTally(transactions=2), remaining=0)
    err = PartialEnforcementError(result, "receiptTrips")
    assert isinstance(err, StorageError)
    assert err.code == "PARTIAL_ENFORCEMENT"
    body = err.to_response()["error"]
    assert body["context"]["source"] == "receiptTrips"
    assert body["result"] == {
        "deleted": 2,
        "tables": {"transactions": 2, "receiptTrips": 0},
        "remaining": 0,
    }


def test_error_categories_match_raised_errors():
    assert {c.value for c in ErrorCategory} == {
        "validation", "configuration", "storage", "internal",
    }
