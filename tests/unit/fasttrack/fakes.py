"""Test doubles: recording collaborators, failing stores and a manual clock."""

from __future__ import annotations

import random
from datetime import UTC
from typing import Any

from fasttrack.services.effects import Collaborators, EffectDispatcher
from fasttrack.services.gamification import GamificationEngine
from fasttrack.services.messages import MessageGenerator
from fasttrack.services.session_engine import SessionEngine
from fasttrack.services.storage import MemoryStore, ProfileStore, SessionStore

T0 = 1_700_000_000.0


class RecordingCollaborator:
    """Test double implementing every collaborator protocol by recording calls."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fail_on = fail_on or set()

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise ConnectionError(f"{name} unavailable")

    def named(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    async def schedule_completion_notification(
        self, fire_after: float, title: str, body: str
    ) -> None:
        self._record("schedule_completion_notification", fire_after, title, body)

    async def cancel_scheduled_notification(self) -> None:
        self._record("cancel_scheduled_notification")

    async def create_live_session(
        self, goal: float, initial_zone: str, initial_progress: float
    ) -> None:
        self._record("create_live_session", goal, initial_zone, initial_progress)

    async def update_live_session(
        self, zone_name: str, progress: float, elapsed_seconds: float
    ) -> None:
        self._record("update_live_session", zone_name, progress, elapsed_seconds)

    async def end_live_session(self, final_progress: float, elapsed_seconds: float) -> None:
        self._record("end_live_session", final_progress, elapsed_seconds)

    async def sync_context(
        self, state: str, start_timestamp: float, goal_duration: float
    ) -> None:
        self._record("sync_context", state, start_timestamp, goal_duration)

    async def persist_completed_interval(self, start: float, end: float) -> None:
        self._record("persist_completed_interval", start, end)


class FailingStore(MemoryStore):
    """MemoryStore whose writes fail while ``failing`` is set."""

    def __init__(self, data: dict[str, Any] | None = None, failing: bool = True) -> None:
        super().__init__(data)
        self.failing = failing

    def save(self, data: dict[str, Any]) -> None:
        if self.failing:
            raise OSError("disk full")
        super().save(data)


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class EngineHarness:
    """A SessionEngine wired to in-memory stores and a recording collaborator."""

    def __init__(
        self,
        session_backend: MemoryStore | None = None,
        profile_backend: MemoryStore | None = None,
        clock: FakeClock | None = None,
        recorder: RecordingCollaborator | None = None,
    ) -> None:
        self.session_backend = session_backend or MemoryStore()
        self.profile_backend = profile_backend or MemoryStore()
        self.clock = clock or FakeClock()
        self.recorder = recorder or RecordingCollaborator()
        self.dispatcher = EffectDispatcher(timeout_seconds=1.0)
        self.store = SessionStore(self.session_backend, self.dispatcher, self.recorder)
        self.gamification = GamificationEngine(ProfileStore(self.profile_backend), tz=UTC)
        self.engine = SessionEngine(
            self.store,
            self.gamification,
            self.dispatcher,
            collaborators=Collaborators(
                notifications=self.recorder,
                live_session=self.recorder,
                companion=self.recorder,
                health=self.recorder,
            ),
            messages=MessageGenerator(random.Random(7)),
            clock=self.clock,
        )
