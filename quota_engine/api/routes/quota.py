"""Quota Routes: plan catalog, usage, admission checks, partial imports and user-triggered eviction.

Invariants:
    - Every handler builds one QuotaService over the request's session
    - Admission denials return 403 with the LIMIT_EXCEEDED payload (not an error envelope)
    - enforce-cap is POST-only: deletion happens only on an explicit user action
    - Read endpoints never delete
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from quota_engine.core.domain_types import BillingInterval, TenantId
from quota_engine.core.enforce_admission import is_limit_exceeded_payload
from quota_engine.core.plan_catalog import (
    PLAN_CATALOG_VERSION,
    get_base_capacity,
    get_cap,
    get_plan_display_name,
    list_plans,
)
from quota_engine.infrastructure.database import get_db
from quota_engine.schemas.quota import (
    AdmissionCheckRequest,
    EnforceCapRequest,
    LimitExceededResponse,
    PartialImportRequest,
    PlanCatalogResponse,
    PlanResponse,
)
from quota_engine.services.quota_service import QuotaService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["quota"])

TenantPath = Annotated[str, Path(min_length=1, max_length=100)]


@router.get("/plans", response_model=PlanCatalogResponse)
async def get_plans():
    """Plan catalog as enforced, ascending by cap."""
    plans = []
    for tier in list_plans():
        plans.append(PlanResponse(
            plan=tier.value,
            display_name=get_plan_display_name(tier),
            cap=get_cap(tier),
            annual_cap=get_base_capacity(tier, BillingInterval.ANNUAL),
        ))
    return PlanCatalogResponse(version=PLAN_CATALOG_VERSION, plans=plans)


@router.get("/tenants/{tenant_id}/usage")
async def get_usage(
    tenant_id: TenantPath, db: AsyncSession = Depends(get_db),
):
    capacity = await QuotaService.from_session(db).get_capacity(TenantId(tenant_id))
    return {
        "plan": capacity.plan.value,
        "cap": capacity.cap,
        "usage": capacity.usage.to_dict(),
        "remaining": capacity.remaining,
    }


@router.get("/tenants/{tenant_id}/capacity")
async def get_capacity(
    tenant_id: TenantPath, db: AsyncSession = Depends(get_db),
):
    """Fail-fast check: does the tenant have room for anything at all."""
    check = await QuotaService.from_session(db).has_any_remaining_capacity(
        TenantId(tenant_id),
    )
    return {
        "hasCapacity": check.has_capacity,
        "remaining": check.remaining,
        "plan": check.plan.value,
    }


@router.get("/tenants/{tenant_id}/overage")
async def get_overage(
    tenant_id: TenantPath, db: AsyncSession = Depends(get_db),
):
    report = await QuotaService.from_session(db).get_overage(TenantId(tenant_id))
    return {
        "isOver": report.is_over,
        "excess": report.excess,
        "currentTotal": report.current_total,
        "cap": report.cap,
        "plan": report.plan.value,
    }


@router.post(
    "/tenants/{tenant_id}/admission-check",
    responses={status.HTTP_403_FORBIDDEN: {"model": LimitExceededResponse}},
)
async def check_admission(
    tenant_id: TenantPath,
    body: AdmissionCheckRequest,
    db: AsyncSession = Depends(get_db),
):
    result = await QuotaService.from_session(db).check_admission(
        TenantId(tenant_id), body.incoming_count,
        date_min=body.date_min, date_max=body.date_max,
    )
    payload = result.to_payload()
    if is_limit_exceeded_payload(payload):
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=payload)
    return payload


@router.post("/tenants/{tenant_id}/partial-import")
async def get_partial_import_size(
    tenant_id: TenantPath,
    body: PartialImportRequest,
    db: AsyncSession = Depends(get_db),
):
    """Slice of an incoming batch that fits the remaining capacity."""
    size = await QuotaService.from_session(db).get_partial_import_size(
        TenantId(tenant_id), body.incoming_count,
    )
    return {"allowedCount": size.allowed_count, "skippedCount": size.skipped_count}


@router.get("/tenants/{tenant_id}/deletions-preview")
async def preview_deletions(
    tenant_id: TenantPath,
    target_cap: int = Query(alias="targetCap"),
    db: AsyncSession = Depends(get_db),
):
    """How many records enforce-cap would remove, and which ones. Deletes nothing."""
    service = QuotaService.from_session(db)
    decision = await service.calculate_deletions_for_cap(TenantId(tenant_id), target_cap)
    candidates = await service.get_oldest_candidates(
        TenantId(tenant_id), decision.to_delete,
    )
    return {
        **decision.to_dict(),
        "candidates": [c.to_dict() for c in candidates],
    }


@router.get("/tenants/{tenant_id}/oldest")
async def get_oldest(
    tenant_id: TenantPath,
    count: int = Query(le=10_000),
    db: AsyncSession = Depends(get_db),
):
    candidates = await QuotaService.from_session(db).get_oldest_candidates(
        TenantId(tenant_id), count,
    )
    return {"candidates": [c.to_dict() for c in candidates]}


@router.post("/tenants/{tenant_id}/enforce-cap")
async def enforce_cap(
    tenant_id: TenantPath,
    body: EnforceCapRequest,
    db: AsyncSession = Depends(get_db),
):
    """User-confirmed deletion of the oldest records down to targetCap."""
    logger.info(
        f"Enforce cap requested: target {body.target_cap}",
        extra={"tenant_id": tenant_id, "target_cap": body.target_cap},
    )
    result = await QuotaService.from_session(db).enforce_cap(
        TenantId(tenant_id), body.target_cap,
    )
    return result.to_dict()
