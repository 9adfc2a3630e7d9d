"""Cost-share allowance calculation."""

import math

from bacc_backend.core.tables import (
    AGE_MULTIPLIERS,
    GEOGRAPHIC_MULTIPLIERS,
    RANK_ALLOWANCES,
)
from bacc_backend.schemas.allowance import (
    AllowanceRequest,
    Breakdown,
    CalculationResult,
    ChildResult,
)


def round_cents(value: float) -> float:
    """Round to two decimals, halves going up on the scaled value."""
    return math.floor(value * 100 + 0.5) / 100


def calculate_allowance(request: AllowanceRequest) -> CalculationResult:
    """Compute the monthly allowance for every child with a known age bracket.

    Children whose age is missing or not one of the known brackets are left
    out of ``perChild``; the remaining entries keep their submission order.
    """
    base_allowance = RANK_ALLOWANCES[request.rank]
    geo_multiplier = GEOGRAPHIC_MULTIPLIERS[request.location]
    cost_share_decimal = request.costShare / 100

    per_child: list[ChildResult] = []
    total = 0.0
    for child in request.children:
        age_multiplier = AGE_MULTIPLIERS.get(child.age) if child.age else None
        if age_multiplier is None:
            continue

        before_cost_share = base_allowance * geo_multiplier * age_multiplier
        amount = round_cents(before_cost_share * (1 - cost_share_decimal))
        per_child.append(
            ChildResult(
                age=child.age,
                amount=amount,
                breakdown=Breakdown(
                    baseAllowance=base_allowance,
                    geoMultiplier=geo_multiplier,
                    ageMultiplier=age_multiplier,
                    costShareDecimal=cost_share_decimal,
                    beforeCostShare=round_cents(before_cost_share),
                ),
            )
        )
        total += amount

    total_monthly = round_cents(total)
    return CalculationResult(
        perChild=per_child,
        totalMonthly=total_monthly,
        totalAnnual=round_cents(total_monthly * 12),
    )
