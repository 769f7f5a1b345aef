"""
Durable state for the session and the profile.

Both stores write the whole record on every mutation, so a failed write is
reconciled by the next successful one. Write failures never raise into the
engines: they come back as an error Result and are logged.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import structlog
from pydantic import ValidationError

from fasttrack.domain.models import FastingState, Profile
from fasttrack.errors import PersistenceWriteError
from fasttrack.services.effects import CompanionSync, EffectDispatcher, Result

logger = structlog.get_logger(__name__)

STATE_KEY = "state"
START_TIMESTAMP_KEY = "startTimestamp"
GOAL_DURATION_KEY = "goalDuration"
SESSION_KEYS = (STATE_KEY, START_TIMESTAMP_KEY, GOAL_DURATION_KEY)

IDLE_SESSION: dict[str, Any] = {
    STATE_KEY: FastingState.IDLE.value,
    START_TIMESTAMP_KEY: 0.0,
    GOAL_DURATION_KEY: 0.0,
}


class KeyValueBackend(Protocol):
    """Whole-record storage. ``save`` must be all-or-nothing."""

    def load(self) -> dict[str, Any]: ...

    def save(self, data: dict[str, Any]) -> None: ...


class JsonFileStore:
    """JSON file backend with atomic replace-on-write."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.logger = logger.bind(component="json_file_store", path=str(self.path))

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as e:
            self.logger.warning("store_file_corrupt", error=str(e))
            return {}
        if not isinstance(data, dict):
            self.logger.warning("store_file_unexpected_shape", type=type(data).__name__)
            return {}
        return data

    def save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data, indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class MemoryStore:
    """In-process backend, for tests and ephemeral runs."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = json.loads(json.dumps(data or {}))
        self.write_count = 0

    def load(self) -> dict[str, Any]:
        return json.loads(json.dumps(self.data))

    def save(self, data: dict[str, Any]) -> None:
        # Round-trip through JSON so unserializable values fail like the file backend
        self.data = json.loads(json.dumps(data))
        self.write_count += 1


class SessionStore:
    """
    Write-through store for the persisted session fields.

    ``put``/``update`` persist first and then dispatch a companion context
    sync, so the engine never observes fields implicitly.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        dispatcher: EffectDispatcher,
        companion: CompanionSync,
    ) -> None:
        self.backend = backend
        self.dispatcher = dispatcher
        self.companion = companion
        self.logger = logger.bind(component="session_store")
        self._fields: dict[str, Any] = dict(IDLE_SESSION)
        self._needs_write = False

    @property
    def snapshot(self) -> dict[str, Any]:
        return dict(self._fields)

    @property
    def needs_write(self) -> bool:
        """True when the last write failed and durable state is behind memory."""
        return self._needs_write

    def get(self, key: str) -> Any:
        return self._fields[key]

    def load(self) -> dict[str, Any]:
        """Restore fields from the backend. Missing or inconsistent data means idle."""
        raw = self.backend.load()
        try:
            state = FastingState(raw.get(STATE_KEY, FastingState.IDLE.value))
            start = float(raw.get(START_TIMESTAMP_KEY, 0.0))
            goal = float(raw.get(GOAL_DURATION_KEY, 0.0))
        except (TypeError, ValueError) as e:
            self.logger.warning("session_record_invalid", error=str(e))
            state, start, goal = FastingState.IDLE, 0.0, 0.0

        if state is FastingState.FASTING and goal <= 0:
            self.logger.warning("session_record_without_goal", start_timestamp=start)
            state = FastingState.IDLE
        if state is FastingState.IDLE:
            start, goal = 0.0, 0.0

        self._fields = {
            STATE_KEY: state.value,
            START_TIMESTAMP_KEY: start,
            GOAL_DURATION_KEY: goal,
        }
        self.logger.info("session_restored", **self._fields)
        return self.snapshot

    def put(self, key: str, value: Any) -> Result[None, PersistenceWriteError]:
        return self.update({key: value})

    def update(self, fields: dict[str, Any]) -> Result[None, PersistenceWriteError]:
        """Apply ``fields`` in memory, persist the full record, then sync."""
        unknown = set(fields) - set(SESSION_KEYS)
        if unknown:
            raise KeyError(f"Unknown session fields: {sorted(unknown)}")

        self._fields.update(fields)
        result = self._write()

        self.dispatcher.dispatch(
            "sync_context",
            self.companion.sync_context,
            self._fields[STATE_KEY],
            self._fields[START_TIMESTAMP_KEY],
            self._fields[GOAL_DURATION_KEY],
        )
        return result

    def _write(self) -> Result[None, PersistenceWriteError]:
        try:
            self.backend.save(self.snapshot)
        except (OSError, TypeError, ValueError) as e:
            error = PersistenceWriteError("session", e)
            self._needs_write = True
            self.logger.error("persistence_write_failed", target="session", error=str(e))
            return Result.err(error)

        if self._needs_write:
            self.logger.info("persistence_reconciled", target="session")
        self._needs_write = False
        return Result.ok(None)


class ProfileStore:
    """Loads and saves the single Profile record."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend
        self.logger = logger.bind(component="profile_store")

    def load(self) -> Profile:
        raw = self.backend.load()
        if not raw:
            self.logger.info("profile_created_empty")
            return Profile()
        try:
            return Profile.model_validate(raw)
        except ValidationError as e:
            self.logger.warning("profile_record_invalid", error=str(e))
            return Profile()

    def save(self, profile: Profile) -> Result[None, PersistenceWriteError]:
        try:
            self.backend.save(profile.model_dump(mode="json"))
        except (OSError, TypeError, ValueError) as e:
            self.logger.error("persistence_write_failed", target="profile", error=str(e))
            return Result.err(PersistenceWriteError("profile", e))
        return Result.ok(None)
