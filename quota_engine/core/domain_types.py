"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - TenantId wraps str; every engine operation is scoped to exactly one tenant
    - PlanTier members are declared in ascending cap order
    - RecordSource values are the wire names used in EnforcementResult.tables
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TenantId = NewType("TenantId", str)
TransactionId = NewType("TransactionId", int)
ReceiptTripId = NewType("ReceiptTripId", str)


# ─── Enums ───────────────────────────────────────────────────────

class PlanTier(str, Enum):
    """Subscription tiers. Declaration order is ascending cap order."""
    FREE = "free"
    PRO = "pro"
    MAX = "max"


class RecordSource(str, Enum):
    """The two disjoint record origins that share one quota."""
    TRANSACTIONS = "transactions"
    RECEIPT_TRIPS = "receiptTrips"


class SuggestedAction(str, Enum):
    """Remediation options attached to a LIMIT_EXCEEDED denial.

    Declaration order is the canonical output order.
    """
    IMPORT_PARTIAL = "IMPORT_PARTIAL"
    FILTER_BY_DATE = "FILTER_BY_DATE"
    UPGRADE = "UPGRADE"
    DELETE_EXISTING = "DELETE_EXISTING"


class BillingInterval(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"


class SubscriptionStatus(str, Enum):
    """Subscription states written by the billing module (read-only here)."""
    ACTIVE = "active"
    TRIALING = "trialing"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
