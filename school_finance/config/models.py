# school_finance/config/models.py
"""
Pydantic model for the full set of financial parameters that drive a
projection run.

Attribute names are snake_case; the serialized form uses the camelCase keys
of the saved scenario state (``numChildren``, ``feePerTerm``, ...). Both
spellings are accepted when validating input.
"""

import logging
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Number of projected periods that carry their own override values
OVERRIDE_PERIODS = 3

# base field -> (by-year flag, override field prefix)
BY_YEAR_FIELDS: Dict[str, Tuple[str, str]] = {
    "num_children": ("use_students_by_year", "num_children_year"),
    "fee_per_term": ("use_fee_per_term_by_year", "fee_per_term_year"),
    "fee_increase": ("use_fee_increase_by_year", "fee_increase_year"),
    "pay_increase": ("use_pay_increase_by_year", "pay_increase_year"),
    "avg_annual_salary": ("use_staff_by_year", "avg_annual_salary_year"),
    "num_teachers": ("use_staff_by_year", "num_teachers_year"),
    "avg_support_salary": ("use_staff_by_year", "avg_support_salary_year"),
    "num_support_staff": ("use_staff_by_year", "num_support_year"),
}


class InputParameters(BaseModel):
    """Frozen configuration for one projection run.

    Rates (fee/pay increase, discounts, inflation, staff cost share) are
    percentages, e.g. ``12.5`` for 12.5%.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    # --- Enrolment ---
    num_children: int = Field(200, description="Enrolled children, current period")
    use_students_by_year: bool = False
    num_children_year1: int = 200
    num_children_year2: int = 200
    num_children_year3: int = 200

    # --- Fees ---
    fee_per_term: float = Field(7000.0, description="Fee per child per term")
    use_fee_per_term_by_year: bool = False
    fee_per_term_year1: float = 7000.0
    fee_per_term_year2: float = 7000.0
    fee_per_term_year3: float = 7000.0

    use_fee_increase_by_year: bool = False
    fee_increase: float = Field(3.0, description="Annual fee increase (%)")
    fee_increase_year1: float = 3.0
    fee_increase_year2: float = 3.0
    fee_increase_year3: float = 3.0

    # --- Pay ---
    use_pay_increase_by_year: bool = False
    pay_increase: float = Field(2.0, description="Annual staff pay increase (%)")
    pay_increase_year1: float = 2.0
    pay_increase_year2: float = 2.0
    pay_increase_year3: float = 2.0

    # --- Current position and discounts ---
    current_surplus: float = Field(100000.0, description="Current annual surplus")
    num_staff_children: int = Field(0, description="Staff children (50% discount)")
    other_children_discount: float = Field(
        15.0, description="Average discount for non-staff children (%)"
    )
    total_discount_effect: float = Field(
        12.5, description="Discount rate applied to gross revenue (%)"
    )
    staff_cost_share: float = Field(
        70.0, description="Share of total cost that is staff pay (%)"
    )

    # --- Detailed staff costs ---
    use_detailed_staff_costs: bool = False
    use_staff_by_year: bool = False
    avg_annual_salary: float = 38000.0
    avg_annual_salary_year1: float = 38000.0
    avg_annual_salary_year2: float = 38000.0
    avg_annual_salary_year3: float = 38000.0
    num_teachers: int = 40
    num_teachers_year1: int = 40
    num_teachers_year2: int = 40
    num_teachers_year3: int = 40
    avg_support_salary: float = 24000.0
    avg_support_salary_year1: float = 24000.0
    avg_support_salary_year2: float = 24000.0
    avg_support_salary_year3: float = 24000.0
    num_support_staff: int = 20
    num_support_year1: int = 20
    num_support_year2: int = 20
    num_support_year3: int = 20

    # --- Inflation ---
    inflation_year1: float = Field(2.5, description="Cost inflation, year 1 (%)")
    inflation_year2: float = Field(2.3, description="Cost inflation, year 2 (%)")
    inflation_year3: float = Field(2.2, description="Cost inflation, year 3 (%)")

    def period_value(self, field: str, period: int) -> float:
        """Return the value of ``field`` that applies to ``period``.

        Period 0 always uses the base value. Later periods use the matching
        ``*_yearN`` override when the field's by-year flag is set; periods
        beyond the last override reuse it.
        """
        if field not in BY_YEAR_FIELDS:
            raise KeyError(f"'{field}' has no per-period values")
        flag, prefix = BY_YEAR_FIELDS[field]
        if period <= 0 or not getattr(self, flag):
            return getattr(self, field)
        return getattr(self, f"{prefix}{min(period, OVERRIDE_PERIODS)}")

    def inflation_for(self, period: int) -> float:
        """Inflation rate (%) for a projected period; 0 for the current one."""
        if period <= 0:
            return 0.0
        return getattr(self, f"inflation_year{min(period, OVERRIDE_PERIODS)}")

    def validation_issues(self) -> List[str]:
        """List semantic range problems without rejecting the parameters.

        The projection engine honours every value verbatim, so these are
        reported for callers to surface rather than enforced.
        """
        issues = []
        enrolment_periods = range(OVERRIDE_PERIODS + 1) if self.use_students_by_year else [0]
        for period in enrolment_periods:
            enrolled = self.period_value("num_children", period)
            label = "current period" if period == 0 else f"year {period}"
            if enrolled < 0:
                issues.append(f"Enrolled children cannot be negative ({label}: {enrolled})")
            elif self.num_staff_children > enrolled:
                issues.append(
                    f"Staff children ({self.num_staff_children}) exceed enrolled "
                    f"children ({label}: {enrolled})"
                )
        if self.num_staff_children < 0:
            issues.append("Staff children cannot be negative")
        for field in ("num_teachers", "num_support_staff"):
            for period in range(OVERRIDE_PERIODS + 1):
                if self.period_value(field, period) < 0:
                    issues.append(f"{field} cannot be negative (period {period})")
                    break
        for field in ("fee_per_term", "avg_annual_salary", "avg_support_salary"):
            for period in range(OVERRIDE_PERIODS + 1):
                if self.period_value(field, period) < 0:
                    issues.append(f"{field} cannot be negative (period {period})")
                    break
        for field in ("total_discount_effect", "other_children_discount"):
            value = getattr(self, field)
            if not 0 <= value <= 100:
                issues.append(f"{field} must be between 0 and 100%, got {value}")
        if not 0 < self.staff_cost_share <= 100:
            issues.append(
                f"staff_cost_share must be above 0 and at most 100%, got {self.staff_cost_share}"
            )
        if issues:
            logger.debug(f"Input parameters have {len(issues)} range issue(s)")
        return issues

    def to_state(self) -> Dict[str, object]:
        """Serialize to the camelCase mapping stored inside a scenario."""
        return self.model_dump(mode="json", by_alias=True)
