# school_finance/projections/breakdowns.py
"""
Reconciliation figures shown alongside a projection.

None of these feed the headline revenue or surplus numbers. In particular
the staff/other discount breakdown is kept independent of
``total_discount_effect``, which is the only rate the engine applies.
"""

import logging
from dataclasses import dataclass
from typing import List

from school_finance.config.models import InputParameters
from .engine import (
    DEFAULT_PERIOD_COUNT,
    STAFF_CHILD_DISCOUNT,
    TERMS_PER_YEAR,
    detailed_total_cost,
    effective_discount_rate,
    period_label,
    staff_pay_cost,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscountBreakdown:
    period: str
    enrolled_children: int
    staff_children: int
    other_children: int
    calculated_rate: float  # % derived from staff/other discounts
    effective_rate: float  # % actually applied (total_discount_effect)

    @property
    def rate_gap(self) -> float:
        """Effective minus calculated rate, in percentage points."""
        return self.effective_rate - self.calculated_rate


@dataclass(frozen=True)
class StaffCostBreakdown:
    period: str
    teaching_cost: float
    support_cost: float
    staff_cost: float
    total_cost: float  # staff_cost scaled up by staff_cost_share


@dataclass(frozen=True)
class BaseCalculations:
    terms_per_year: int
    effective_discount: float  # fraction, not %
    gross_revenue: float
    discount_amount: float
    net_revenue: float
    costs: float


def discount_breakdown(params: InputParameters, period: int = 0) -> DiscountBreakdown:
    """Average discount implied by staff children (50%) and everyone else."""
    enrolled = params.period_value("num_children", period)
    staff = params.num_staff_children
    other = max(0, enrolled - staff)

    if enrolled > 0:
        discounted_places = staff * STAFF_CHILD_DISCOUNT + other * (
            params.other_children_discount / 100
        )
        calculated = discounted_places / enrolled * 100
    else:
        calculated = 0.0

    return DiscountBreakdown(
        period=period_label(period),
        enrolled_children=enrolled,
        staff_children=staff,
        other_children=other,
        calculated_rate=calculated,
        effective_rate=params.total_discount_effect,
    )


def staff_cost_breakdown(
    params: InputParameters, period_count: int = DEFAULT_PERIOD_COUNT
) -> List[StaffCostBreakdown]:
    """Salary x headcount figures for the current and each projected period."""
    if period_count < 0:
        raise ValueError(f"period_count cannot be negative, got {period_count}")

    rows = []
    for period in range(period_count + 1):
        teaching = params.period_value("avg_annual_salary", period) * params.period_value(
            "num_teachers", period
        )
        support = params.period_value("avg_support_salary", period) * params.period_value(
            "num_support_staff", period
        )
        rows.append(
            StaffCostBreakdown(
                period=period_label(period),
                teaching_cost=teaching,
                support_cost=support,
                staff_cost=staff_pay_cost(params, period),
                total_cost=detailed_total_cost(params, period),
            )
        )
    return rows


def base_calculations(params: InputParameters) -> BaseCalculations:
    """Step-by-step current-period figures (cost back-solved from surplus)."""
    rate = effective_discount_rate(params)
    gross = params.num_children * params.fee_per_term * TERMS_PER_YEAR
    discount = gross * rate
    net = gross - discount
    return BaseCalculations(
        terms_per_year=TERMS_PER_YEAR,
        effective_discount=rate,
        gross_revenue=gross,
        discount_amount=discount,
        net_revenue=net,
        costs=net - params.current_surplus,
    )
