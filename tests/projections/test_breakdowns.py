"""
Tests for the reconciliation figures shown next to a projection.
"""
import pytest

from school_finance.config.models import InputParameters
from school_finance.projections.breakdowns import (
    base_calculations,
    discount_breakdown,
    staff_cost_breakdown,
)
from school_finance.projections.engine import project


def test_discount_breakdown_mixes_staff_and_other_children():
    params = InputParameters(num_children=200, num_staff_children=10, other_children_discount=15)
    breakdown = discount_breakdown(params)

    # (10 * 0.5 + 190 * 0.15) / 200 = 16.75%
    assert breakdown.other_children == 190
    assert breakdown.calculated_rate == pytest.approx(16.75)
    assert breakdown.effective_rate == 12.5
    assert breakdown.rate_gap == pytest.approx(12.5 - 16.75)


def test_discount_breakdown_with_no_children_is_zero():
    breakdown = discount_breakdown(InputParameters(num_children=0, num_staff_children=0))
    assert breakdown.calculated_rate == 0.0
    assert breakdown.other_children == 0


def test_discount_breakdown_never_counts_negative_other_children():
    breakdown = discount_breakdown(InputParameters(num_children=5, num_staff_children=8))
    assert breakdown.other_children == 0
    assert breakdown.calculated_rate == pytest.approx(8 * 0.5 / 5 * 100)


def test_discount_breakdown_uses_period_enrolment():
    params = InputParameters(
        num_children=200,
        use_students_by_year=True,
        num_children_year2=100,
        num_staff_children=20,
        other_children_discount=10,
    )
    breakdown = discount_breakdown(params, period=2)
    assert breakdown.period == "Year 2"
    assert breakdown.enrolled_children == 100
    assert breakdown.calculated_rate == pytest.approx((20 * 0.5 + 80 * 0.1) / 100 * 100)


def test_discount_breakdown_does_not_affect_revenue():
    low = InputParameters(num_staff_children=0, other_children_discount=10)
    high = InputParameters(num_staff_children=150, other_children_discount=20)
    assert project(low) == project(high)


def test_staff_cost_breakdown_by_year():
    params = InputParameters(
        use_staff_by_year=True,
        avg_annual_salary=40000,
        num_teachers=10,
        avg_support_salary=20000,
        num_support_staff=5,
        avg_annual_salary_year1=42000,
        num_teachers_year1=11,
        avg_support_salary_year1=21000,
        num_support_year1=6,
        staff_cost_share=80,
    )
    rows = staff_cost_breakdown(params, 1)

    assert [r.period for r in rows] == ["Current", "Year 1"]
    assert rows[0].teaching_cost == 400000
    assert rows[0].support_cost == 100000
    assert rows[0].staff_cost == 500000
    assert rows[0].total_cost == pytest.approx(625000)
    assert rows[1].teaching_cost == 42000 * 11
    assert rows[1].support_cost == 21000 * 6
    assert rows[1].total_cost == pytest.approx((42000 * 11 + 21000 * 6) / 0.8)


def test_staff_cost_breakdown_ignores_overrides_when_flag_off():
    params = InputParameters(use_staff_by_year=False, num_teachers=10, num_teachers_year1=99)
    rows = staff_cost_breakdown(params, 1)
    assert rows[0].teaching_cost == rows[1].teaching_cost


def test_staff_cost_breakdown_rejects_negative_period_count():
    with pytest.raises(ValueError):
        staff_cost_breakdown(InputParameters(), -2)


def test_base_calculations_match_current_projection():
    params = InputParameters()
    calc = base_calculations(params)
    current = project(params)[0]

    assert calc.terms_per_year == 3
    assert calc.effective_discount == 0.125
    assert calc.gross_revenue == current.gross_revenue
    assert calc.discount_amount == current.discount_amount
    assert calc.net_revenue == current.net_revenue
    assert calc.costs == current.costs
