"""
Tests for the key-value persistence ports.
"""
import json

import pytest

from school_finance.config.models import InputParameters
from school_finance.scenarios.ports import InMemoryPort, JsonFilePort, PersistenceError
from school_finance.scenarios.store import ScenarioStore


def test_in_memory_port():
    port = InMemoryPort({"a": "1"})
    assert port.get("a") == "1"
    assert port.get("b") is None
    port.set("b", "2")
    assert port.get("b") == "2"


def test_json_file_port_missing_file(tmp_path):
    assert JsonFilePort(tmp_path / "store.json").get("k") is None


def test_json_file_port_set_and_get(tmp_path):
    path = tmp_path / "nested" / "store.json"
    port = JsonFilePort(path)
    port.set("k1", "v1")
    port.set("k2", "v2")

    assert port.get("k1") == "v1"
    assert json.loads(path.read_text()) == {"k1": "v1", "k2": "v2"}
    # No temp files left behind
    assert [p.name for p in path.parent.iterdir()] == ["store.json"]


def test_json_file_port_get_on_corrupt_file_raises(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("not json")
    with pytest.raises(ValueError):
        JsonFilePort(path).get("k")


def test_json_file_port_overwrites_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2]")
    port = JsonFilePort(path)
    port.set("k", "v")
    assert port.get("k") == "v"


def test_json_file_port_write_failure_raises_persistence_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    port = JsonFilePort(blocker / "store.json")
    with pytest.raises(PersistenceError):
        port.set("k", "v")


def test_store_over_corrupt_file_loads_nothing(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{{{")
    assert ScenarioStore(JsonFilePort(path)).load() == []


def test_store_round_trip_through_file(tmp_path):
    path = tmp_path / "store.json"
    store = ScenarioStore(JsonFilePort(path))
    saved = [store.create("Baseline", InputParameters()), store.create("Lean", InputParameters(num_children=150))]
    store.save(saved)

    reopened = ScenarioStore(JsonFilePort(path))
    assert reopened.load() == saved
