"""Static badge catalogue with deterministic unlock rules."""

from collections.abc import Callable
from dataclasses import dataclass

from fasttrack.domain.models import HOUR
from fasttrack.domain.zones import AUTOPHAGY


@dataclass(frozen=True)
class BadgeCheck:
    """Inputs a badge rule is evaluated against after a completed fast."""

    total_fasts_completed: int
    current_streak: int
    duration_seconds: float


@dataclass(frozen=True)
class Badge:
    """A one-way achievement flag."""

    id: str
    name: str
    description: str
    icon: str
    color: str
    rule: Callable[[BadgeCheck], bool]

    def is_earned(self, check: BadgeCheck) -> bool:
        return self.rule(check)


BADGES: tuple[Badge, ...] = (
    Badge(
        id="first_fast",
        name="First Fast",
        description="Completed your first fast.",
        icon="play.circle",
        color="blue",
        rule=lambda c: c.total_fasts_completed == 1,
    ),
    Badge(
        id="7_day_streak",
        name="7-Day Warrior",
        description="Completed a 7-day fasting streak.",
        icon="flame.fill",
        color="orange",
        rule=lambda c: c.current_streak >= 7,
    ),
    Badge(
        id="30_day_streak",
        name="Month of Consistency",
        description="Completed a 30-day fasting streak.",
        icon="crown.fill",
        color="yellow",
        rule=lambda c: c.current_streak >= 30,
    ),
    Badge(
        id="10_fasts",
        name="Fast Follower",
        description="Completed 10 fasts.",
        icon="10.circle",
        color="green",
        rule=lambda c: c.total_fasts_completed >= 10,
    ),
    Badge(
        id="50_fasts",
        name="Fasting Fanatic",
        description="Completed 50 fasts.",
        icon="50.circle",
        color="teal",
        rule=lambda c: c.total_fasts_completed >= 50,
    ),
    Badge(
        id="24_hour_fast",
        name="24-Hour Club",
        description="Completed a 24-hour fast.",
        icon="clock.arrow.2.circlepath",
        color="purple",
        rule=lambda c: c.duration_seconds >= 24 * HOUR,
    ),
    Badge(
        id="autophagy_unlocked",
        name="Cellular Cleaner",
        description="Reached the Autophagy zone.",
        icon="atom",
        color="indigo",
        rule=lambda c: c.duration_seconds >= AUTOPHAGY.threshold_seconds,
    ),
)


def badge_for(badge_id: str) -> Badge | None:
    return next((badge for badge in BADGES if badge.id == badge_id), None)


def earned_badge_ids(check: BadgeCheck) -> set[str]:
    """Ids of every catalogue badge whose rule holds for ``check``."""
    return {badge.id for badge in BADGES if badge.is_earned(check)}
