"""Persistence of named parameter snapshots."""

from .ports import InMemoryPort, JsonFilePort, PersistenceError, PersistencePort
from .store import (
    CURRENT_VERSION,
    STORAGE_KEY,
    Scenario,
    ScenarioStore,
    create_scenario_id,
)

__all__ = [
    "InMemoryPort",
    "JsonFilePort",
    "PersistenceError",
    "PersistencePort",
    "CURRENT_VERSION",
    "STORAGE_KEY",
    "Scenario",
    "ScenarioStore",
    "create_scenario_id",
]
