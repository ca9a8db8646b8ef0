# school_finance/projections/engine.py
"""
Projection engine: turns one set of InputParameters into a current-period
position plus compounded projections for the following periods.

Ordering rules per projected period ``i``:
1. Gross revenue compounds on the previous period's gross revenue by the
   fee increase for ``i``.
2. The discount is the same effective rate (``total_discount_effect``) in
   every period.
3. The pay-only cost baseline compounds by the pay increase for ``i``;
   inflation for ``i`` is applied on top to give the reported cost and is
   never carried into the next period's baseline.

No input is clamped or validated here. Out-of-range values propagate
arithmetically; see ``InputParameters.validation_issues``.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Tuple

from school_finance.config.models import InputParameters

logger = logging.getLogger(__name__)

TERMS_PER_YEAR = 3
STAFF_CHILD_DISCOUNT = 0.5
DEFAULT_PERIOD_COUNT = 3
CURRENT_PERIOD_LABEL = "Current"


@dataclass(frozen=True)
class YearlyProjection:
    """One period of projected figures. Rates are percentages."""

    period: str
    gross_revenue: float
    discount_amount: float
    net_revenue: float
    costs: float
    surplus: float
    fee_increase: float = 0.0
    pay_increase: float = 0.0
    inflation: float = 0.0
    pay_baseline: float = 0.0


def period_label(period: int) -> str:
    return CURRENT_PERIOD_LABEL if period == 0 else f"Year {period}"


def effective_discount_rate(params: InputParameters) -> float:
    """Fraction of gross revenue given up as discounts, in every period."""
    return params.total_discount_effect / 100


def staff_pay_cost(params: InputParameters, period: int = 0) -> float:
    """Teaching plus support pay for a period (salary x headcount)."""
    teaching = params.period_value("avg_annual_salary", period) * params.period_value(
        "num_teachers", period
    )
    support = params.period_value("avg_support_salary", period) * params.period_value(
        "num_support_staff", period
    )
    return teaching + support


def detailed_total_cost(params: InputParameters, period: int = 0) -> float:
    """Total cost implied by staff pay making up ``staff_cost_share`` of it.

    A share of zero or less cannot scale anything, so the staff pay is
    returned unscaled.
    """
    staff = staff_pay_cost(params, period)
    if params.staff_cost_share <= 0:
        return staff
    return staff / (params.staff_cost_share / 100)


def _current_period(params: InputParameters, rate: float) -> YearlyProjection:
    gross = params.num_children * params.fee_per_term * TERMS_PER_YEAR
    discount = gross * rate
    net = gross - discount

    if params.use_detailed_staff_costs:
        cost = detailed_total_cost(params, 0)
        surplus = net - cost
    else:
        # Cost is back-solved from the surplus the user reports
        cost = net - params.current_surplus
        surplus = params.current_surplus

    return YearlyProjection(
        period=period_label(0),
        gross_revenue=gross,
        discount_amount=discount,
        net_revenue=net,
        costs=cost,
        surplus=surplus,
        pay_baseline=cost,
    )


def project(
    params: InputParameters, period_count: int = DEFAULT_PERIOD_COUNT
) -> List[YearlyProjection]:
    """
    Project the current period and ``period_count`` following periods.

    Args:
        params: Parameters for the run; never mutated.
        period_count: Number of projected periods after the current one.

    Returns:
        ``period_count + 1`` YearlyProjection rows, current period first.

    Raises:
        ValueError: If period_count is negative.
    """
    if period_count < 0:
        raise ValueError(f"period_count cannot be negative, got {period_count}")

    rate = effective_discount_rate(params)
    current = _current_period(params, rate)
    projections = [current]

    prev_gross = current.gross_revenue
    baseline = current.costs
    for period in range(1, period_count + 1):
        fee_increase = params.period_value("fee_increase", period)
        pay_increase = params.period_value("pay_increase", period)
        inflation = params.inflation_for(period)

        gross = prev_gross * (1 + fee_increase / 100)
        discount = gross * rate
        net = gross - discount

        baseline = baseline * (1 + pay_increase / 100)
        cost = baseline * (1 + inflation / 100)

        projections.append(
            YearlyProjection(
                period=period_label(period),
                gross_revenue=gross,
                discount_amount=discount,
                net_revenue=net,
                costs=cost,
                surplus=net - cost,
                fee_increase=fee_increase,
                pay_increase=pay_increase,
                inflation=inflation,
                pay_baseline=baseline,
            )
        )
        prev_gross = gross

    logger.debug(
        f"Projected {len(projections)} periods; final surplus {projections[-1].surplus:,.2f}"
    )
    return projections


@lru_cache(maxsize=128)
def cached_project(
    params: InputParameters, period_count: int = DEFAULT_PERIOD_COUNT
) -> Tuple[YearlyProjection, ...]:
    """``project`` memoized on parameter equality, for repeated what-if edits."""
    return tuple(project(params, period_count))
