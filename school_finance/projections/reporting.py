# school_finance/projections/reporting.py
"""
Reporting module for financial projections.

Builds tabular output and summary statistics from a projection run using
the canonical column names in ``school_finance.schema``. Display formatting
and charts belong to the presentation layer.
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd
import yaml

from school_finance import schema
from .engine import YearlyProjection

logger = logging.getLogger(__name__)


def projections_to_frame(projections: Sequence[YearlyProjection]) -> pd.DataFrame:
    """One row per period, columns in ``schema.PROJECTION_COLUMNS`` order."""
    if not projections:
        return pd.DataFrame(columns=schema.PROJECTION_COLUMNS)
    df = pd.DataFrame([asdict(p) for p in projections])
    return df[schema.PROJECTION_COLUMNS]


def _growth_pct(start: float, end: float) -> Optional[float]:
    if start == 0:
        return None
    return float((end - start) / abs(start) * 100)


def summarize_projections(projections: Sequence[YearlyProjection]) -> Dict[str, Any]:
    """
    Headline statistics for a projection run.

    Cumulative surplus and deficit counts cover projected periods only (not
    the current one). Growth percentages compare the final period with the
    current one and are None when the current figure is zero.
    """
    if not projections:
        logger.warning("No projections to summarize.")
        return {}

    df = projections_to_frame(projections)
    projected = df.iloc[1:]
    surplus = df[schema.SURPLUS].to_numpy(dtype=float)
    lowest_idx = int(np.argmin(surplus))

    current = df.iloc[0]
    final = df.iloc[-1]
    return {
        schema.SUMMARY_FINAL_SURPLUS: float(final[schema.SURPLUS]),
        schema.SUMMARY_CUMULATIVE_SURPLUS: float(projected[schema.SURPLUS].sum()),
        schema.SUMMARY_LOWEST_SURPLUS_PERIOD: str(df.iloc[lowest_idx][schema.PERIOD]),
        schema.SUMMARY_LOWEST_SURPLUS: float(surplus[lowest_idx]),
        schema.SUMMARY_DEFICIT_PERIODS: int((projected[schema.SURPLUS] < 0).sum()),
        schema.SUMMARY_REVENUE_GROWTH_PCT: _growth_pct(
            current[schema.GROSS_REVENUE], final[schema.GROSS_REVENUE]
        ),
        schema.SUMMARY_COST_GROWTH_PCT: _growth_pct(current[schema.COSTS], final[schema.COSTS]),
    }


def save_projection_results(
    output_path: Path,
    scenario_name: str,
    projections: Sequence[YearlyProjection],
) -> Dict[str, Path]:
    """Save the projection table (CSV) and summary (YAML) to ``output_path``."""
    output_path = Path(output_path)
    logger.info(f"Saving projection results for '{scenario_name}' to {output_path}...")
    output_path.mkdir(parents=True, exist_ok=True)

    table_path = output_path / f"{scenario_name}_projection.csv"
    projections_to_frame(projections).to_csv(table_path, index=False)
    logger.info(f"Projection table saved to {table_path}")

    summary_path = output_path / f"{scenario_name}_summary.yaml"
    with open(summary_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(summarize_projections(projections), f, sort_keys=False)
    logger.info(f"Projection summary saved to {summary_path}")

    return {"table": table_path, "summary": summary_path}
