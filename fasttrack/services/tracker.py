"""
Composition root for the fasting tracker.

Builds the stores, engines, dispatcher and ticker from an AppConfig and a set
of external collaborators. Nothing here is a process-wide singleton: create
one FastingTracker per application (or per test).
"""

import random
import time
from collections.abc import Callable

import structlog

from fasttrack.config import AppConfig, get_config
from fasttrack.domain.badges import Badge
from fasttrack.domain.models import FastingPlan, Profile, SessionStatus, plan_by_name
from fasttrack.domain.zones import time_in_current_zone
from fasttrack.services.effects import Collaborators, EffectDispatcher
from fasttrack.services.gamification import CompletionReport, GamificationEngine
from fasttrack.services.messages import MessageGenerator, MessageType
from fasttrack.services.session_engine import SessionEngine
from fasttrack.services.storage import (
    JsonFileStore,
    KeyValueBackend,
    ProfileStore,
    SessionStore,
)
from fasttrack.services.ticker import SessionTicker

logger = structlog.get_logger(__name__)


class FastingTracker:
    """
    Main service wiring the session engine to its collaborators.

    All commands must run on the event loop that owns the ticker.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        collaborators: Collaborators | None = None,
        clock: Callable[[], float] = time.time,
        session_backend: KeyValueBackend | None = None,
        profile_backend: KeyValueBackend | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or get_config()
        self.collaborators = collaborators or Collaborators()
        self.clock = clock
        self.logger = logger.bind(component="fasting_tracker")
        self.messages = MessageGenerator(rng)

        self.dispatcher = EffectDispatcher(self.config.tracker.effect_timeout_seconds)
        self._init_storage(session_backend, profile_backend)
        self._init_engines()

    def _init_storage(
        self,
        session_backend: KeyValueBackend | None,
        profile_backend: KeyValueBackend | None,
    ) -> None:
        storage = self.config.storage
        self.session_store = SessionStore(
            session_backend or JsonFileStore(storage.session_path),
            self.dispatcher,
            self.collaborators.companion,
        )
        self.profile_store = ProfileStore(profile_backend or JsonFileStore(storage.profile_path))
        self.logger.info("storage_initialized", data_dir=storage.data_dir)

    def _init_engines(self) -> None:
        tracker = self.config.tracker
        self.gamification = GamificationEngine(self.profile_store, tz=tracker.tzinfo())
        self.engine = SessionEngine(
            self.session_store,
            self.gamification,
            self.dispatcher,
            collaborators=self.collaborators,
            messages=self.messages,
            clock=self.clock,
            live_update_every_seconds=tracker.live_update_every_seconds,
        )
        self.ticker = SessionTicker(self.engine, tracker.tick_interval_seconds)
        self.logger.info("engines_initialized", state=self.engine.state.value)

    # ------------------------------ Commands ------------------------------
    async def resume(self) -> SessionStatus:
        """Restart ticking for a fast restored from storage. Pushes an initial sync."""
        self.session_store.update({})
        self.ticker.ensure_running()
        return self.engine.status()

    async def start_fast(
        self, goal_seconds: float | None = None, plan: str | None = None
    ) -> SessionStatus:
        """Start a fast from an explicit goal, a named plan, or the default plan."""
        if goal_seconds is None:
            goal_seconds = self.plan(plan).duration_seconds
        status = self.engine.start(goal_seconds)
        self.ticker.ensure_running()
        return status

    async def end_fast(self) -> CompletionReport | None:
        return self.engine.end()

    async def edit_start_time(self, new_start: float) -> SessionStatus:
        return self.engine.edit_start_time(new_start)

    async def shutdown(self) -> None:
        """Stop ticking and wait for in-flight effects."""
        await self.ticker.stop()
        await self.dispatcher.drain()
        self.logger.info("tracker_shutdown")

    # ------------------------------ Queries -------------------------------
    def plan(self, name: str | None = None) -> FastingPlan:
        return plan_by_name(name or self.config.tracker.default_plan)

    def status(self) -> SessionStatus:
        return self.engine.status()

    def profile(self) -> Profile:
        return self.engine.get_profile()

    def unlocked_badges(self) -> list[Badge]:
        return self.gamification.unlocked_badges()

    def zone_message(self, message_type: MessageType = MessageType.MOTIVATIONAL) -> str:
        return self.messages.fasting_message(self.engine.get_current_zone(), message_type)

    def contextual_message(self) -> str:
        elapsed = self.engine.get_elapsed()
        return self.messages.contextual_message(
            self.engine.get_current_zone(), time_in_current_zone(max(0.0, elapsed))
        )
