"""Quota Schemas: Pydantic models for the quota API boundary.

Invariants:
    - AdmissionCheckRequest.incomingCount is a non-negative int
    - dateMin/dateMax are opaque strings echoed back on denial (never parsed here)
    - EnforceCapRequest.targetCap accepts any int; non-positive targets are no-ops downstream
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AdmissionCheckRequest(_CamelModel):
    """Incoming batch about to be imported."""
    incoming_count: int = Field(ge=0, alias="incomingCount")
    date_min: str | None = Field(None, alias="dateMin", max_length=64)
    date_max: str | None = Field(None, alias="dateMax", max_length=64)

    @field_validator("date_min", "date_max")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class PartialImportRequest(_CamelModel):
    incoming_count: int = Field(ge=0, alias="incomingCount")


class EnforceCapRequest(_CamelModel):
    target_cap: int = Field(alias="targetCap")


class PlanResponse(BaseModel):
    plan: str
    display_name: str = Field(serialization_alias="displayName")
    cap: int
    annual_cap: int = Field(serialization_alias="annualCap")


class PlanCatalogResponse(BaseModel):
    version: str
    plans: list[PlanResponse]


class LimitExceededResponse(BaseModel):
    """Body of a 403 admission denial."""
    code: str
    plan: str
    cap: int
    used: int
    remaining: int
    incomingCount: int
    suggestedActions: list[str]
    upgradePlans: list[str]
    dateMin: str | None = None
    dateMax: str | None = None
