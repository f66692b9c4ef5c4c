from __future__ import annotations

import logging
import os
import tempfile
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import orjson

from ..domain import PlannerState, utc_timestamp
from ..domain.models import STATE_VERSION
from ..errors import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_PLANNER_DATA: Dict[str, Any] = {
    "unavailableDates": [],
    "selectedDates": [],
    "confirmedPlans": [],
    "recurringPatterns": [],
    "customActivities": [],
    "calendarConnected": False,
    "lastUpdated": None,
    "version": STATE_VERSION,
}

# Older blobs name these fields after the two people.
LEGACY_KEYS: Dict[str, str] = {
    "gioSelectedDates": "selectedDates",
    "appleCalendarConnected": "calendarConnected",
}


class PlannerGateway(Protocol):
    def load(self) -> PlannerState: ...

    def save(self, state: PlannerState) -> None: ...


class JsonPlannerStore:
    """Flat JSON file holding the whole planner blob."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def ensure_initialized(self) -> None:
        if self._path.exists():
            return
        initial = deepcopy(DEFAULT_PLANNER_DATA)
        initial["lastUpdated"] = utc_timestamp()
        self._write(initial)
        logger.info("Initialized planner data file at %s", self._path)

    def read_raw(self) -> Dict[str, Any]:
        try:
            self.ensure_initialized()
            raw = self._path.read_bytes()
            data = orjson.loads(raw) if raw.strip() else {}
        except (OSError, orjson.JSONDecodeError) as exc:
            logger.error("Error reading planner data from %s: %s", self._path, exc)
            raise PersistenceError(f"Failed to read planner data from {self._path}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Planner data in {self._path} is not an object")
        for legacy_key, key in LEGACY_KEYS.items():
            if legacy_key in data:
                value = data.pop(legacy_key)
                if data.get(key) is None:
                    data[key] = value
        # Backfill missing keys when upgrading.
        for key, value in DEFAULT_PLANNER_DATA.items():
            data.setdefault(key, deepcopy(value))
        return data

    def load(self) -> PlannerState:
        data = self.read_raw()
        try:
            return PlannerState.from_record(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Planner data in {self._path} is malformed: {exc}") from exc

    def save(self, state: PlannerState) -> None:
        state.last_updated = utc_timestamp()
        self._write(state.to_record())

    def _write(self, payload: Dict[str, Any]) -> None:
        temp_path: Optional[Path] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Unique temp file per write so concurrent saves never share one.
            with tempfile.NamedTemporaryFile(
                dir=self._path.parent,
                prefix=self._path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_path = Path(handle.name)
                handle.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2) + b"\n")
            os.replace(temp_path, self._path)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            logger.error("Error writing planner data to %s: %s", self._path, exc)
            raise PersistenceError(f"Failed to write planner data to {self._path}") from exc


__all__ = ["DEFAULT_PLANNER_DATA", "LEGACY_KEYS", "JsonPlannerStore", "PlannerGateway"]
