"""Projection engine and the reporting built on top of it."""

from .engine import (
    DEFAULT_PERIOD_COUNT,
    TERMS_PER_YEAR,
    YearlyProjection,
    cached_project,
    project,
)
from .breakdowns import base_calculations, discount_breakdown, staff_cost_breakdown
from .reporting import projections_to_frame, save_projection_results, summarize_projections

__all__ = [
    "DEFAULT_PERIOD_COUNT",
    "TERMS_PER_YEAR",
    "YearlyProjection",
    "cached_project",
    "project",
    "base_calculations",
    "discount_breakdown",
    "staff_cost_breakdown",
    "projections_to_frame",
    "save_projection_results",
    "summarize_projections",
]
