"""Tenant Plan Provider: reads the billing-owned subscriptions table.

Invariants:
    - Read-only: never writes subscriptions
    - No subscription row -> PlanTier.FREE
    - canceled/past_due keep their plan until current_period_end, then FREE
    - A stored plan outside the catalog raises UnknownPlanError
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quota_engine.core.domain_types import PlanTier, SubscriptionStatus, TenantId
from quota_engine.core.errors import ErrorContext, StorageError
from quota_engine.core.eviction_order import normalize_timestamp
from quota_engine.core.plan_catalog import resolve_plan
from quota_engine.models.subscription import Subscription

logger = logging.getLogger(__name__)

_LAPSING_STATUSES = frozenset({
    SubscriptionStatus.CANCELED.value, SubscriptionStatus.PAST_DUE.value,
})


def effective_plan(
    plan: str, status: str, current_period_end: datetime | None, now: datetime,
) -> PlanTier:
    """Plan a subscription grants right now. Pure."""
    tier = resolve_plan(plan)
    if status in _LAPSING_STATUSES:
        if current_period_end and normalize_timestamp(current_period_end) > now:
            return tier
        return PlanTier.FREE
    return tier


class SqlTenantPlanProvider:
    """TenantPlanProvider backed by the subscriptions table."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.db = db
        self._clock = clock

    async def get_plan(self, tenant_id: TenantId) -> PlanTier:
        try:
            result = await self.db.execute(
                select(Subscription).where(Subscription.user_id == tenant_id).limit(1),
            )
        except SQLAlchemyError as e:
            logger.error(f"Plan lookup failed: {e}", extra={"tenant_id": tenant_id})
            raise StorageError(
                type(e).__name__, "fetch", ErrorContext(tenant_id=tenant_id),
            ) from e
        subscription = result.scalar_one_or_none()
        if subscription is None:
            return PlanTier.FREE
        return effective_plan(
            subscription.plan, subscription.status,
            subscription.current_period_end, self._clock(),
        )
