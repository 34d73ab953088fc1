from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from weekplanner.state import PlannerState

logger = logging.getLogger(__name__)

STATE_KEY = "study_planner_state_v2"
LEGACY_STATE_KEY = "study_planner_state"


class StorageError(RuntimeError):
    """Raised when the durable store cannot be read or written."""


class JsonFileStore:
    """Durable string key-value store, one file per key."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Could not read `{key}` from {path}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        except OSError as exc:
            raise StorageError(f"Could not write `{key}` to {path}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except (OSError, UnicodeEncodeError) as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Could not write `{key}` to {path}") from exc

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove `{key}` from {path}") from exc


class PlannerStore:
    """Loads and saves the planner state under a fixed key."""

    def __init__(self, store: JsonFileStore, key: str = STATE_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> PlannerState:
        raw = self._read(self._key)
        if raw is None and self._key == STATE_KEY:
            raw = self._read(LEGACY_STATE_KEY)
            if raw is not None:
                logger.info("Migrating planner state from `%s`", LEGACY_STATE_KEY)
        if raw is None:
            logger.debug("No stored planner state, using defaults")
            return PlannerState()
        return _parse_state(raw)

    def save(self, state: PlannerState) -> bool:
        try:
            payload = json.dumps(state.to_payload(), ensure_ascii=False)
            self._store.set_item(self._key, payload)
        except (StorageError, TypeError, ValueError):
            logger.exception("Failed to save planner state")
            return False
        return True

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get_item(key)
        except StorageError:
            logger.warning("Stored planner state is unreadable, using defaults", exc_info=True)
            return None


def _parse_state(raw: str) -> PlannerState:
    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored planner state is not valid JSON, using defaults")
        return PlannerState()

    if not isinstance(loaded, dict):
        logger.warning("Stored planner state is not an object, using defaults")
        return PlannerState()

    defaults: dict[str, Any] = PlannerState().to_payload()
    try:
        return PlannerState.model_validate({**defaults, **loaded})
    except ValidationError as exc:
        logger.warning("Stored planner state is invalid, using defaults: %s", exc)
        return PlannerState()
