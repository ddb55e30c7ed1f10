"""ORM Models: SQLAlchemy declarative models for quota-relevant tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every record row is scoped by user_id (the tenant)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from quota_engine.models.transaction import BankTransaction  # noqa: F401
from quota_engine.models.receipt_trip import ReceiptTrip  # noqa: F401
from quota_engine.models.subscription import Subscription  # noqa: F401
