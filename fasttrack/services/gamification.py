"""
Streaks, totals and badge unlocks over the persisted profile.

The engine is the only writer of the Profile. Durability is at-least-once:
a failed write is reported in the CompletionReport but the in-memory profile
keeps the update, and the next successful write reconciles the record.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta, tzinfo

import structlog

from fasttrack.domain.badges import BADGES, Badge, BadgeCheck
from fasttrack.domain.models import Profile
from fasttrack.errors import PersistenceWriteError
from fasttrack.services.effects import Result
from fasttrack.services.storage import ProfileStore

logger = structlog.get_logger(__name__)


@dataclass
class CompletionReport:
    """Outcome of processing one completed fast."""

    start: float
    end: float
    duration_seconds: float
    profile: Profile
    newly_unlocked: list[Badge] = field(default_factory=list)
    persist_result: Result[None, PersistenceWriteError] = field(
        default_factory=lambda: Result.ok(None)
    )

    @property
    def persisted(self) -> bool:
        return self.persist_result.is_ok()


class GamificationEngine:
    """Turns completed sessions into streaks and unlocked badges."""

    def __init__(self, store: ProfileStore, tz: tzinfo | None = None) -> None:
        self.store = store
        self.tz = tz
        self.logger = logger.bind(component="gamification_engine")
        self._profile = store.load()

    def get_profile(self) -> Profile:
        return self._profile.model_copy(deep=True)

    def unlocked_badges(self) -> list[Badge]:
        """Unlocked badges in catalogue order."""
        return [badge for badge in BADGES if badge.id in self._profile.unlocked_badge_ids]

    def process_completed_fast(self, start: float, end: float) -> CompletionReport:
        duration = end - start
        profile = self._profile

        profile.total_fasts_completed += 1
        self._update_streak(end)

        check = BadgeCheck(
            total_fasts_completed=profile.total_fasts_completed,
            current_streak=profile.current_streak,
            duration_seconds=duration,
        )
        newly_unlocked = [
            badge for badge in BADGES if badge.is_earned(check) and profile.unlock_badge(badge.id)
        ]

        persist_result = self.store.save(profile)
        if persist_result.is_err():
            # In-memory profile stays authoritative; the next save reconciles
            self.logger.warning(
                "profile_persist_deferred", error=str(persist_result.unwrap_err())
            )

        self.logger.info(
            "fast_processed",
            duration_seconds=round(duration, 1),
            total_fasts=profile.total_fasts_completed,
            current_streak=profile.current_streak,
            longest_streak=profile.longest_streak,
            new_badges=[badge.id for badge in newly_unlocked],
        )

        return CompletionReport(
            start=start,
            end=end,
            duration_seconds=duration,
            profile=self.get_profile(),
            newly_unlocked=newly_unlocked,
            persist_result=persist_result,
        )

    def _update_streak(self, end: float) -> None:
        """Advance, keep or reset the streak for a fast completed at ``end``."""
        profile = self._profile
        completed_at = self._to_datetime(end)
        last = profile.last_fast_date

        if last is None:
            profile.current_streak = 1
        elif self._same_day(completed_at, last + timedelta(hours=24)):
            profile.current_streak += 1
        elif not self._same_day(completed_at, last):
            profile.current_streak = 1
        # Same calendar day as the last fast: streak unchanged

        profile.longest_streak = max(profile.longest_streak, profile.current_streak)
        profile.last_fast_date = completed_at

    def _to_datetime(self, timestamp: float) -> datetime:
        return datetime.fromtimestamp(timestamp, tz=UTC)

    def _calendar_date(self, moment: datetime):
        # tz=None means the system local timezone
        return moment.astimezone(self.tz).date()

    def _same_day(self, a: datetime, b: datetime) -> bool:
        return self._calendar_date(a) == self._calendar_date(b)
