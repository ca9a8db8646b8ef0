# school_finance/config/loaders.py
"""
Load projection parameters from YAML files.

A parameter file may name a parent with ``extends: other.yaml`` (resolved
relative to the child's directory); the parent is loaded first and the
child's keys are deep-merged over it.
"""

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

import yaml
from pydantic import ValidationError

from .models import InputParameters

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ConfigLoadError(Exception):
    """Custom exception for errors during config loading."""

    pass


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge override into base and return a new dict.
    """
    merged = deepcopy(base)
    for key, val in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(val, dict):
            merged[key] = deep_merge(merged[key], val)
        else:
            merged[key] = deepcopy(val)
    return merged


def load_yaml_config(config_path: PathLike) -> Dict[str, Any]:
    """
    Loads configuration data from a single YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        The loaded mapping (empty if the file is empty).

    Raises:
        ConfigLoadError: If the file cannot be found or parsed, or does not
            hold a mapping.
    """
    config_path = Path(config_path)
    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file: {config_path}") from e

    if data is None:
        logger.warning(f"Configuration file is empty: {config_path}")
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Expected a mapping at the top of {config_path}, got {type(data).__name__}"
        )
    return data


def load_config(config_path: PathLike, _seen: Optional[Set[Path]] = None) -> Dict[str, Any]:
    """Load a YAML file and resolve its ``extends`` chain."""
    config_path = Path(config_path).resolve()
    seen = set() if _seen is None else _seen
    if config_path in seen:
        raise ConfigLoadError(f"Circular extends detected at '{config_path}'")
    seen.add(config_path)

    cfg = load_yaml_config(config_path)
    parent = cfg.get("extends")
    if not parent:
        return cfg

    parent_path = config_path.parent / parent
    logger.debug(f"{config_path.name} extends {parent_path}")
    parent_cfg = load_config(parent_path, seen)
    overrides = {k: v for k, v in cfg.items() if k != "extends"}
    return deep_merge(parent_cfg, overrides)


def load_input_parameters(config_path: PathLike) -> InputParameters:
    """
    Load and validate projection parameters from a YAML file.

    Fields may sit at the top level of the file or under a ``parameters``
    key; snake_case and camelCase names are both accepted.

    Raises:
        ConfigLoadError: If the file cannot be loaded or fails validation.
    """
    cfg = load_config(config_path)
    raw = cfg.get("parameters", cfg)
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"'parameters' in {config_path} must be a mapping")
    raw = {k: v for k, v in raw.items() if k not in ("extends", "name")}

    try:
        params = InputParameters.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Invalid parameters in {config_path}: {e}")
        raise ConfigLoadError(f"Invalid parameters in {config_path}: {e}") from e

    logger.info(f"Loaded input parameters from {config_path}")
    logger.debug(f"Input parameters: {params.model_dump()}")
    return params
