from school_finance.config.models import InputParameters
from school_finance.projections.engine import YearlyProjection, cached_project, project
from school_finance.scenarios.store import Scenario, ScenarioStore

__all__ = [
    "InputParameters",
    "YearlyProjection",
    "cached_project",
    "project",
    "Scenario",
    "ScenarioStore",
]
