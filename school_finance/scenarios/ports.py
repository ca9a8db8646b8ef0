# school_finance/scenarios/ports.py
"""
Key-value persistence ports for the scenario store.

Any object with ``get(key) -> Optional[str]`` and ``set(key, value)``
satisfies the port; two implementations are provided here.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when the storage medium cannot be written."""

    pass


class PersistencePort(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryPort:
    """Dict-backed port; contents live as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFilePort:
    """
    Port backed by a JSON object file mapping keys to string values.

    Reads tolerate a missing file. Writes replace the whole file in one
    ``os.replace`` so readers never see a half-written document.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            try:
                data = self._read_all()
            except ValueError:
                logger.warning(f"Discarding unreadable store file {self.path}")
                data = {}
            data[key] = value

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}", exc_info=True)
            raise PersistenceError(f"Could not write scenarios to {self.path}: {e}") from e
        logger.debug(f"Wrote key '{key}' to {self.path}")
