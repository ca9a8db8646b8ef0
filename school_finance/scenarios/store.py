# school_finance/scenarios/store.py
"""
Scenario store: named, versioned snapshots of InputParameters persisted as
one JSON array under a single key of a persistence port.

Loading is fail-open. A missing port, unreadable payload or malformed
record yields fewer (or no) scenarios, never an exception. Records whose
``version`` differs from CURRENT_VERSION are dropped, not migrated.
Saving writes the whole collection in one ``set`` and lets port failures
propagate.
"""

import json
import logging
import random
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from school_finance.config.models import InputParameters
from .ports import PersistencePort

logger = logging.getLogger(__name__)

STORAGE_KEY = "school-financial-analysis:scenarios"
CURRENT_VERSION = 1

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class Scenario(BaseModel):
    """A named, timestamped snapshot of projection parameters."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    version: int = CURRENT_VERSION
    state: InputParameters

    def to_record(self) -> dict:
        """Persisted form: camelCase keys, ISO-8601 timestamps."""
        return self.model_dump(mode="json", by_alias=True)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def create_scenario_id() -> str:
    """
    Collision-resistant scenario identifier.

    Uses a random UUID; if the platform has no randomness source, falls back
    to ``scenario_<base36 millis>_<6 random chars>``.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        logger.warning("No OS randomness source; using timestamp-based scenario id")
        millis = np.base_repr(int(time.time() * 1000), 36).lower()
        suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=6))
        return f"scenario_{millis}_{suffix}"


def _copy_state(state: Union[InputParameters, Mapping[str, Any]]) -> InputParameters:
    if isinstance(state, InputParameters):
        return InputParameters.model_validate(state.model_dump())
    return InputParameters.model_validate(dict(state))


class ScenarioStore:
    """
    Owns the scenario collection and the only read/write path to the port.

    Args:
        port: Key-value persistence port, or None when no storage backend
            is available (loads return nothing, saves are skipped).
        key: Key the collection is stored under.
        clock: Returns the current time; defaults to UTC now.
    """

    def __init__(
        self,
        port: Optional[PersistencePort] = None,
        key: str = STORAGE_KEY,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.port = port
        self.key = key
        self.clock = clock or _utc_now

    def load(self) -> List[Scenario]:
        """Read the stored collection, dropping anything unusable."""
        if self.port is None:
            logger.debug("No persistence port configured; no scenarios loaded")
            return []

        try:
            raw = self.port.get(self.key)
        except Exception as e:
            logger.warning(f"Could not read scenarios from storage: {e}")
            return []
        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Stored scenarios are not valid JSON; ignoring them: {e}")
            return []
        if not isinstance(payload, list):
            logger.warning(
                f"Stored scenarios should be a JSON array, got {type(payload).__name__}; ignoring"
            )
            return []

        scenarios = []
        for index, record in enumerate(payload):
            if not isinstance(record, dict) or not record.get("state"):
                logger.warning(f"Dropping stored scenario #{index}: no state")
                continue
            if record.get("version") != CURRENT_VERSION:
                logger.warning(
                    f"Dropping stored scenario {record.get('id')!r}: version "
                    f"{record.get('version')!r} != {CURRENT_VERSION}"
                )
                continue
            try:
                scenarios.append(Scenario.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Dropping malformed stored scenario {record.get('id')!r}: {e}")

        logger.info(f"Loaded {len(scenarios)} of {len(payload)} stored scenarios")
        return scenarios

    def save(self, scenarios: Sequence[Scenario]) -> None:
        """Replace the stored collection with ``scenarios`` in a single write."""
        if self.port is None:
            logger.debug("No persistence port configured; scenarios not saved")
            return
        payload = json.dumps([s.to_record() for s in scenarios])
        self.port.set(self.key, payload)
        logger.info(f"Saved {len(scenarios)} scenarios")

    def create(self, name: str, state: Union[InputParameters, Mapping[str, Any]]) -> Scenario:
        """Wrap a copy of ``state`` in a new scenario. Nothing is persisted."""
        now = self.clock()
        scenario = Scenario(
            id=create_scenario_id(),
            name=name,
            created_at=now,
            updated_at=now,
            version=CURRENT_VERSION,
            state=_copy_state(state),
        )
        logger.debug(f"Created scenario {scenario.id} ({name!r})")
        return scenario

    def update(
        self,
        scenario: Scenario,
        name: Optional[str] = None,
        state: Optional[Union[InputParameters, Mapping[str, Any]]] = None,
    ) -> Scenario:
        """Return a renamed and/or re-stated copy; id and creation time are kept."""
        changes = {"updated_at": self.clock()}
        if name is not None:
            changes["name"] = name
        if state is not None:
            changes["state"] = _copy_state(state)
        return scenario.model_copy(update=changes)

    @staticmethod
    def find(scenarios: Sequence[Scenario], scenario_id: str) -> Optional[Scenario]:
        return next((s for s in scenarios if s.id == scenario_id), None)

    @staticmethod
    def remove(scenarios: Sequence[Scenario], scenario_id: str) -> List[Scenario]:
        return [s for s in scenarios if s.id != scenario_id]
