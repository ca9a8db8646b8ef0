# school_finance/schema.py
"""Canonical column names for projection tables and summaries.

All reporting code should import from here for consistency.
"""
from typing import List

PERIOD = "period"
GROSS_REVENUE = "gross_revenue"
DISCOUNT_AMOUNT = "discount_amount"
NET_REVENUE = "net_revenue"
COSTS = "costs"
SURPLUS = "surplus"
FEE_INCREASE = "fee_increase"
PAY_INCREASE = "pay_increase"
INFLATION = "inflation"
PAY_BASELINE = "pay_baseline"

PROJECTION_COLUMNS: List[str] = [
    PERIOD,
    GROSS_REVENUE,
    DISCOUNT_AMOUNT,
    NET_REVENUE,
    COSTS,
    SURPLUS,
    FEE_INCREASE,
    PAY_INCREASE,
    INFLATION,
    PAY_BASELINE,
]

# Summary keys
SUMMARY_FINAL_SURPLUS = "final_surplus"
SUMMARY_CUMULATIVE_SURPLUS = "cumulative_projected_surplus"
SUMMARY_LOWEST_SURPLUS_PERIOD = "lowest_surplus_period"
SUMMARY_LOWEST_SURPLUS = "lowest_surplus"
SUMMARY_DEFICIT_PERIODS = "deficit_periods"
SUMMARY_REVENUE_GROWTH_PCT = "gross_revenue_growth_pct"
SUMMARY_COST_GROWTH_PCT = "cost_growth_pct"
