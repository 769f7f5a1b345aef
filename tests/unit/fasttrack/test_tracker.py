"""
Tests for the composition root in `fasttrack/services/tracker.py`.

Covers:
- Starting fasts from explicit goals, named plans and the configured default
- Resume after restart, including the initial companion sync
- Ending, editing and the profile/badge queries
- File-backed storage wiring from StorageConfig
- Zone copy helpers
"""

import asyncio
import random
from pathlib import Path

import pytest

from fasttrack.config import AppConfig, StorageConfig, TrackerConfig
from fasttrack.domain.models import HOUR, FastingState
from fasttrack.services.effects import Collaborators
from fasttrack.services.messages import MessageType
from fasttrack.services.storage import MemoryStore
from fasttrack.services.tracker import FastingTracker

from fakes import T0, FakeClock, RecordingCollaborator


def _tracker(
    recorder: RecordingCollaborator,
    session_backend: MemoryStore | None = None,
    clock: FakeClock | None = None,
    default_plan: str = "16:8",
) -> FastingTracker:
    config = AppConfig(
        tracker=TrackerConfig(calendar_timezone="UTC", default_plan=default_plan),
    )
    return FastingTracker(
        config=config,
        collaborators=Collaborators(
            notifications=recorder,
            live_session=recorder,
            companion=recorder,
            health=recorder,
        ),
        clock=clock or FakeClock(),
        session_backend=session_backend or MemoryStore(),
        profile_backend=MemoryStore(),
        rng=random.Random(3),
    )


class TestStartFast:
    async def test_default_plan(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)
        try:
            status = await tracker.start_fast()

            assert status.goal_duration == 16 * HOUR
            assert tracker.ticker.is_running
        finally:
            await tracker.shutdown()

    async def test_configured_default_plan(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder, default_plan="omad")
        try:
            status = await tracker.start_fast()
            assert status.goal_duration == 23 * HOUR
        finally:
            await tracker.shutdown()

    async def test_named_plan(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)
        try:
            status = await tracker.start_fast(plan="18:6")
            assert status.goal_duration == 18 * HOUR
        finally:
            await tracker.shutdown()

    async def test_explicit_goal_wins(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)
        try:
            status = await tracker.start_fast(goal_seconds=HOUR, plan="20:4")
            assert status.goal_duration == HOUR
        finally:
            await tracker.shutdown()

    async def test_unknown_plan(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)

        with pytest.raises(ValueError, match="Unknown fasting plan"):
            await tracker.start_fast(plan="5:2")
        assert tracker.status().state is FastingState.IDLE


class TestLifecycle:
    async def test_end_fast_updates_profile(self, recorder: RecordingCollaborator) -> None:
        clock = FakeClock()
        tracker = _tracker(recorder, clock=clock)

        await tracker.start_fast(goal_seconds=72 * HOUR)
        clock.now = T0 + 48 * HOUR
        report = await tracker.end_fast()
        await tracker.shutdown()

        assert report is not None
        assert tracker.profile().total_fasts_completed == 1
        assert [badge.id for badge in tracker.unlocked_badges()] == [
            "first_fast",
            "24_hour_fast",
            "autophagy_unlocked",
        ]
        assert recorder.named("persist_completed_interval") == [(T0, T0 + 48 * HOUR)]
        assert not tracker.ticker.is_running

    async def test_shutdown_after_effect_cancelled_elsewhere(
        self, recorder: RecordingCollaborator
    ) -> None:
        tracker = _tracker(recorder)
        tracker.dispatcher.dispatch("hang", asyncio.sleep, 5)
        (hanging,) = [task for task in asyncio.all_tasks() if task.get_name() == "effect:hang"]
        hanging.cancel()

        await tracker.shutdown()

        assert tracker.dispatcher.pending_count == 0

    async def test_end_fast_while_idle(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)
        assert await tracker.end_fast() is None

    async def test_edit_start_time(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)
        try:
            await tracker.start_fast()
            status = await tracker.edit_start_time(T0 - 5000)

            assert status.elapsed_seconds == 5000
            assert status.goal_duration == 16 * HOUR
        finally:
            await tracker.shutdown()

    async def test_resume_restored_fast(self, recorder: RecordingCollaborator) -> None:
        backend = MemoryStore()
        first = _tracker(recorder, session_backend=backend)
        await first.start_fast()
        await first.shutdown()

        restarted_recorder = RecordingCollaborator()
        restarted = _tracker(
            restarted_recorder, session_backend=backend, clock=FakeClock(T0 + 5 * HOUR)
        )
        try:
            status = await restarted.resume()

            assert status.state is FastingState.FASTING
            assert status.elapsed_seconds == 5 * HOUR
            assert status.zone_name == "Catabolic"
            assert restarted.ticker.is_running
        finally:
            await restarted.shutdown()

        assert restarted_recorder.named("sync_context")[0] == ("fasting", T0, 16 * HOUR)

    async def test_resume_while_idle(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)

        status = await tracker.resume()
        await tracker.shutdown()

        assert status.state is FastingState.IDLE
        assert not tracker.ticker.is_running
        assert recorder.named("sync_context") == [("idle", 0.0, 0.0)]


class TestFileBackedTracker:
    async def test_state_survives_restart(self, tmp_path: Path) -> None:
        config = AppConfig(storage=StorageConfig(data_dir=str(tmp_path)))
        clock = FakeClock()

        tracker = FastingTracker(config=config, clock=clock)
        await tracker.start_fast(plan="16:8")
        await tracker.shutdown()

        assert config.storage.session_path.exists()

        clock.now = T0 + 20 * HOUR
        restarted = FastingTracker(config=config, clock=clock)
        report = await restarted.end_fast()
        await restarted.shutdown()

        assert report is not None
        assert report.duration_seconds == 20 * HOUR
        assert config.storage.profile_path.exists()
        assert FastingTracker(config=config, clock=clock).profile().total_fasts_completed == 1


class TestZoneCopy:
    def test_zone_message_mentions_current_zone(self, recorder: RecordingCollaborator) -> None:
        tracker = _tracker(recorder)
        assert "Anabolic" in tracker.zone_message(MessageType.MOTIVATIONAL)
        assert "Anabolic" in tracker.zone_message(MessageType.EDUCATIONAL)

    async def test_contextual_message_uses_time_in_zone(
        self, recorder: RecordingCollaborator
    ) -> None:
        clock = FakeClock()
        tracker = _tracker(recorder, clock=clock)
        try:
            await tracker.start_fast()
            await tracker.edit_start_time(T0 - (5 * HOUR + 30 * 60))

            message = tracker.contextual_message()

            assert "Catabolic" in message
            assert "1" in message and "30" in message
        finally:
            await tracker.shutdown()
