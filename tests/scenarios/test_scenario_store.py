"""
Tests for the scenario store: creation, fail-open loading, version
filtering and save/load round trips.
"""
import json
from datetime import datetime, timedelta, timezone

import pytest

from school_finance.config.models import InputParameters
from school_finance.scenarios.ports import InMemoryPort, PersistenceError
from school_finance.scenarios.store import (
    CURRENT_VERSION,
    STORAGE_KEY,
    Scenario,
    ScenarioStore,
    create_scenario_id,
)


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class BrokenPort:
    def get(self, key):
        raise OSError("storage unavailable")

    def set(self, key, value):
        raise PersistenceError("disk full")


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def port():
    return InMemoryPort()


@pytest.fixture
def store(port, clock):
    return ScenarioStore(port, clock=clock)


def test_create_stamps_metadata(store, clock):
    scenario = store.create("Baseline", InputParameters())

    assert scenario.name == "Baseline"
    assert scenario.version == CURRENT_VERSION
    assert scenario.created_at == scenario.updated_at == clock.now
    assert scenario.state == InputParameters()


def test_create_assigns_unique_ids(store):
    ids = {store.create(f"s{i}", InputParameters()).id for i in range(50)}
    assert len(ids) == 50


def test_create_copies_state_by_value(store):
    raw = {"num_children": 180}
    scenario = store.create("From dict", raw)
    raw["num_children"] = 5
    assert scenario.state.num_children == 180

    params = InputParameters(num_children=120)
    from_model = store.create("From model", params)
    assert from_model.state == params
    assert from_model.state is not params


def test_create_scenario_id_falls_back_without_randomness(monkeypatch):
    def no_entropy():
        raise NotImplementedError

    monkeypatch.setattr("school_finance.scenarios.store.uuid.uuid4", no_entropy)
    scenario_id = create_scenario_id()

    prefix, millis, suffix = scenario_id.split("_")
    assert prefix == "scenario"
    assert int(millis, 36) > 0
    assert len(suffix) == 6


def test_round_trip(store):
    scenarios = [
        store.create("Baseline", InputParameters()),
        store.create("High fees", InputParameters(fee_increase=6.0)),
    ]
    store.save(scenarios)
    assert store.load() == scenarios


def test_save_writes_single_json_array_with_camel_case(store, port, clock):
    scenario = store.create("Baseline", InputParameters())
    store.save([scenario])

    records = json.loads(port.get(STORAGE_KEY))
    assert len(records) == 1
    record = records[0]
    assert set(record) == {"id", "name", "createdAt", "updatedAt", "version", "state"}
    assert record["version"] == 1
    assert record["state"]["numChildren"] == 200
    assert datetime.fromisoformat(record["createdAt"].replace("Z", "+00:00")) == clock.now


def test_load_drops_mismatched_versions(store, port):
    keep = store.create("Keep", InputParameters())
    store.save([keep])
    records = json.loads(port.get(STORAGE_KEY))
    old = dict(records[0], id="old-one", version=0)
    future = dict(records[0], id="future-one", version=2)
    port.set(STORAGE_KEY, json.dumps([old, records[0], future]))

    loaded = store.load()
    assert [s.id for s in loaded] == [keep.id]


def test_load_drops_records_without_state(store, port):
    keep = store.create("Keep", InputParameters())
    store.save([keep])
    records = json.loads(port.get(STORAGE_KEY))
    stateless = {k: v for k, v in records[0].items() if k != "state"}
    null_state = dict(records[0], id="null", state=None)
    port.set(STORAGE_KEY, json.dumps([stateless, null_state, records[0], "junk", None]))

    assert [s.id for s in store.load()] == [keep.id]


def test_load_drops_malformed_records(store, port, caplog):
    keep = store.create("Keep", InputParameters())
    store.save([keep])
    records = json.loads(port.get(STORAGE_KEY))
    bad = dict(records[0], id="bad", createdAt="not a date")
    port.set(STORAGE_KEY, json.dumps([bad, records[0]]))

    with caplog.at_level("WARNING"):
        loaded = store.load()
    assert [s.id for s in loaded] == [keep.id]
    assert "bad" in caplog.text


@pytest.mark.parametrize("payload", [None, "", "{not json", '{"a": 1}', "42"])
def test_load_fails_open_on_bad_payload(clock, payload):
    port = InMemoryPort()
    if payload is not None:
        port.set(STORAGE_KEY, payload)
    assert ScenarioStore(port, clock=clock).load() == []


def test_no_port_loads_nothing_and_skips_save(clock):
    store = ScenarioStore(None, clock=clock)
    store.save([store.create("Unsaved", InputParameters())])
    assert store.load() == []


def test_unreadable_port_loads_nothing(clock):
    assert ScenarioStore(BrokenPort(), clock=clock).load() == []


def test_save_failure_propagates(clock):
    store = ScenarioStore(BrokenPort(), clock=clock)
    with pytest.raises(PersistenceError):
        store.save([store.create("x", InputParameters())])


def test_custom_key(port, clock):
    store = ScenarioStore(port, key="other", clock=clock)
    store.save([store.create("x", InputParameters())])
    assert port.get(STORAGE_KEY) is None
    assert len(store.load()) == 1


def test_update_keeps_identity(store, clock):
    original = store.create("Baseline", InputParameters())
    clock.advance(hours=2)
    updated = store.update(original, name="Renamed", state=InputParameters(num_children=210))

    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert updated.updated_at == clock.now
    assert updated.name == "Renamed"
    assert updated.state.num_children == 210
    assert original.name == "Baseline"


def test_scenario_fields_are_immutable(store):
    scenario = store.create("Baseline", InputParameters())
    with pytest.raises(Exception):
        scenario.id = "changed"


def test_find_and_remove(store):
    a = store.create("A", InputParameters())
    b = store.create("B", InputParameters())

    assert ScenarioStore.find([a, b], b.id) is b
    assert ScenarioStore.find([a, b], "missing") is None
    assert ScenarioStore.remove([a, b], a.id) == [b]


def test_scenario_parses_persisted_record():
    record = {
        "id": "abc",
        "name": "Legacy",
        "createdAt": "2025-09-01T10:00:00.000Z",
        "updatedAt": "2025-09-02T10:00:00.000Z",
        "version": 1,
        "state": {"numChildren": 190, "feePerTerm": 7200},
    }
    scenario = Scenario.model_validate(record)
    assert scenario.created_at.tzinfo is not None
    assert scenario.state.num_children == 190
    assert scenario.state.fee_per_term == 7200
