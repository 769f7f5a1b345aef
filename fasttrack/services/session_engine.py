"""
Session state machine for the single tracked fast.

States are ``idle`` and ``fasting``. Every mutation goes through the
write-through SessionStore before any effect is dispatched, so a crash between
the two leaves a resumable session. Effects are best-effort and may be
delivered zero or more times per transition.
"""

import time
from collections.abc import Callable

import structlog

from fasttrack.domain.models import FastingState, LiveSessionState, Profile, SessionStatus
from fasttrack.domain.zones import ZONES, Zone, zone_for, zone_progress
from fasttrack.errors import InvalidStateError
from fasttrack.services.effects import Collaborators, EffectDispatcher
from fasttrack.services.gamification import CompletionReport, GamificationEngine
from fasttrack.services.messages import MessageGenerator
from fasttrack.services.storage import (
    GOAL_DURATION_KEY,
    START_TIMESTAMP_KEY,
    STATE_KEY,
    SessionStore,
)

logger = structlog.get_logger(__name__)


class SessionEngine:
    """
    Owns the active-or-idle fasting session.

    Operations are synchronous and must be called from one scheduling domain
    (the event loop running the ticker). ``now`` arguments are epoch seconds;
    when omitted the injected clock is read.
    """

    def __init__(
        self,
        store: SessionStore,
        gamification: GamificationEngine,
        dispatcher: EffectDispatcher,
        collaborators: Collaborators | None = None,
        messages: MessageGenerator | None = None,
        clock: Callable[[], float] = time.time,
        live_update_every_seconds: int = 30,
    ) -> None:
        self.store = store
        self.gamification = gamification
        self.dispatcher = dispatcher
        self.collaborators = collaborators or Collaborators()
        self.messages = messages or MessageGenerator()
        self.clock = clock
        self.live_update_every_seconds = live_update_every_seconds
        self.logger = logger.bind(component="session_engine")
        self.last_completion: CompletionReport | None = None

        self.store.load()
        self._elapsed = 0.0
        if self.is_fasting:
            self._elapsed = self.clock() - self.get_start_timestamp()
            self.logger.info(
                "fast_resumed",
                start_timestamp=self.get_start_timestamp(),
                goal_seconds=self.get_goal(),
                elapsed_seconds=round(self._elapsed, 1),
            )

    # ------------------------------ Queries -------------------------------
    @property
    def state(self) -> FastingState:
        return FastingState(self.store.get(STATE_KEY))

    @property
    def is_fasting(self) -> bool:
        return self.state is FastingState.FASTING

    def get_elapsed(self) -> float:
        return self._elapsed

    def get_goal(self) -> float:
        return float(self.store.get(GOAL_DURATION_KEY))

    def get_start_timestamp(self) -> float:
        return float(self.store.get(START_TIMESTAMP_KEY))

    def get_current_zone(self) -> Zone:
        return zone_for(self._elapsed)

    def get_profile(self) -> Profile:
        return self.gamification.get_profile()

    def progress(self) -> float:
        return zone_progress(self._elapsed, self.get_goal())

    def remaining(self) -> float:
        return max(0.0, self.get_goal() - self._elapsed)

    def live_state(self) -> LiveSessionState:
        """Payload for the live activity."""
        return LiveSessionState(
            elapsed_seconds=self._elapsed,
            zone_name=self.get_current_zone().name,
            progress=self.progress(),
        )

    def status(self) -> SessionStatus:
        return SessionStatus(
            state=self.state,
            start_timestamp=self.get_start_timestamp(),
            goal_duration=self.get_goal(),
            elapsed_seconds=self._elapsed,
            zone_name=self.get_current_zone().name,
            progress=self.progress(),
        )

    # ---------------------------- Transitions -----------------------------
    def start(self, goal: float, now: float | None = None) -> SessionStatus:
        """Begin a fast with a goal of ``goal`` seconds."""
        if self.is_fasting:
            raise InvalidStateError("start a fast", self.state.value)
        if goal <= 0:
            raise ValueError(f"goal must be positive, got {goal}")

        now = self._now(now)
        self.store.update(
            {
                STATE_KEY: FastingState.FASTING.value,
                START_TIMESTAMP_KEY: now,
                GOAL_DURATION_KEY: float(goal),
            }
        )
        self._elapsed = 0.0
        self.logger.info("fast_started", start_timestamp=now, goal_seconds=goal)

        title, body = self.messages.notification_message(goal)
        self.dispatcher.dispatch(
            "schedule_completion_notification",
            self.collaborators.notifications.schedule_completion_notification,
            float(goal),
            title,
            body,
        )
        self.dispatcher.dispatch(
            "create_live_session",
            self.collaborators.live_session.create_live_session,
            float(goal),
            ZONES[0].name,
            0.0,
        )
        return self.status()

    def tick(self, now: float | None = None) -> SessionStatus | None:
        """Advance elapsed time; auto-completes the fast once the goal is reached."""
        if not self.is_fasting:
            return None

        now = self._now(now)
        self._elapsed = now - self.get_start_timestamp()

        if int(self._elapsed) % self.live_update_every_seconds == 0:
            self._publish_zone_update()

        observed = self.status()
        if self._elapsed >= self.get_goal():
            self.logger.info("fast_goal_reached", elapsed_seconds=round(self._elapsed, 1))
            self.end(now)
        return observed

    def end(self, now: float | None = None) -> CompletionReport | None:
        """End the fast. A no-op while idle."""
        if not self.is_fasting:
            self.logger.debug("end_ignored_while_idle")
            return None

        now = self._now(now)
        start = self.get_start_timestamp()
        final_elapsed = now - start

        report = None
        if start > 0:
            report = self.gamification.process_completed_fast(start, now)

        self.store.update(
            {
                STATE_KEY: FastingState.IDLE.value,
                START_TIMESTAMP_KEY: 0.0,
                GOAL_DURATION_KEY: 0.0,
            }
        )
        self._elapsed = 0.0
        self.last_completion = report

        if start > 0:
            self.dispatcher.dispatch(
                "persist_completed_interval",
                self.collaborators.health.persist_completed_interval,
                start,
                now,
            )
        self.dispatcher.dispatch(
            "cancel_scheduled_notification",
            self.collaborators.notifications.cancel_scheduled_notification,
        )
        self.dispatcher.dispatch(
            "end_live_session",
            self.collaborators.live_session.end_live_session,
            1.0,
            final_elapsed,
        )

        self.logger.info(
            "fast_ended",
            duration_seconds=round(final_elapsed, 1),
            new_badges=[badge.id for badge in report.newly_unlocked] if report else [],
        )
        return report

    def edit_start_time(self, new_start: float, now: float | None = None) -> SessionStatus:
        """Move the start of the running fast. Elapsed may become negative."""
        if not self.is_fasting:
            raise InvalidStateError("edit the start time", self.state.value)

        now = self._now(now)
        self.store.put(START_TIMESTAMP_KEY, float(new_start))
        self._elapsed = now - new_start
        self.logger.info(
            "fast_start_edited", start_timestamp=new_start, elapsed_seconds=round(self._elapsed, 1)
        )

        self._publish_zone_update()
        remaining = self.get_goal() - self._elapsed
        if remaining > 0:
            title, body = self.messages.notification_message(self.get_goal())
            self.dispatcher.dispatch(
                "reschedule_completion_notification",
                self._reschedule_notification,
                remaining,
                title,
                body,
            )
        return self.status()

    # ------------------------------ Helpers -------------------------------
    def _now(self, now: float | None) -> float:
        return self.clock() if now is None else float(now)

    def _publish_zone_update(self) -> None:
        live = self.live_state()
        self.dispatcher.dispatch(
            "update_live_session",
            self.collaborators.live_session.update_live_session,
            live.zone_name,
            live.progress,
            live.elapsed_seconds,
        )

    async def _reschedule_notification(self, fire_after: float, title: str, body: str) -> None:
        notifications = self.collaborators.notifications
        await notifications.cancel_scheduled_notification()
        await notifications.schedule_completion_notification(fire_after, title, body)
