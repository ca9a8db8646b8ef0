"""Configuration models and loaders for projection parameters."""

from .models import InputParameters, BY_YEAR_FIELDS, OVERRIDE_PERIODS
from .loaders import ConfigLoadError, load_input_parameters, load_yaml_config

__all__ = [
    "InputParameters",
    "BY_YEAR_FIELDS",
    "OVERRIDE_PERIODS",
    "ConfigLoadError",
    "load_input_parameters",
    "load_yaml_config",
]
