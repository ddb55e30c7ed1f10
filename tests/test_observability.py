"""Structured Logging: tests for the JSON formatter."""

import json
import logging

from quota_engine.core.domain_types import PlanTier
from quota_engine.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "quota_engine.services.eviction", logging.INFO, __file__, 1,
        "Deleted %d record(s)", (3,), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    line = JSONFormatter().format(_record(tenant_id="t1", deleted=3))
    data = json.loads(line)
    assert data["message"] == "Deleted 3 record(s)"
    assert data["level"] == "INFO"
    assert data["tenant_id"] == "t1"
    assert data["deleted"] == 3


def test_json_formatter_skips_unset_extras():
    data = json.loads(JSONFormatter().format(_record()))
    assert "tenant_id" not in data
    assert "source" not in data


def test_json_formatter_renders_plan_tier():
    data = json.loads(JSONFormatter().format(_record(plan=PlanTier.PRO, cap=1500)))
    assert data["plan"] == "pro"
    assert data["cap"] == 1500
