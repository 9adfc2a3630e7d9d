"""Data contracts for the cost-share allowance calculation."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bacc_backend.core.tables import GEOGRAPHIC_MULTIPLIERS, RANK_ALLOWANCES


class ChildInput(BaseModel):
    """One child as submitted by the calculator form."""

    model_config = ConfigDict(extra="ignore")

    # Unknown or missing brackets are skipped by the calculator, not rejected.
    age: Optional[str] = None


class AllowanceRequest(BaseModel):
    """Inputs required to compute a per-child allowance."""

    model_config = ConfigDict(extra="ignore")

    rank: str = Field(..., min_length=1, description="Pay grade code, e.g. 'E-5'.")
    location: str = Field(..., min_length=1, description="Cost-of-living band.")
    costShare: float = Field(
        0.0,
        ge=0,
        le=100,
        description="Percentage of the allowance the family pays (0-100).",
    )
    children: List[ChildInput]

    @field_validator("rank")
    @classmethod
    def _known_rank(cls, value: str) -> str:
        if value not in RANK_ALLOWANCES:
            raise ValueError(f"unknown rank {value!r}")
        return value

    @field_validator("location")
    @classmethod
    def _known_location(cls, value: str) -> str:
        if value not in GEOGRAPHIC_MULTIPLIERS:
            raise ValueError(f"unknown location {value!r}")
        return value


class Breakdown(BaseModel):
    baseAllowance: float
    geoMultiplier: float
    ageMultiplier: float
    costShareDecimal: float
    beforeCostShare: float


class ChildResult(BaseModel):
    age: str
    amount: float
    breakdown: Breakdown


class CalculationResult(BaseModel):
    """Per-child results plus monthly and annual totals."""

    perChild: List[ChildResult]
    totalMonthly: float
    totalAnnual: float
