"""
Domain models for fasting sessions and the lifetime profile.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation and for the durable JSON representation.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

HOUR = 3600.0


class FastingState(str, Enum):
    """States of the single tracked session."""

    IDLE = "idle"
    FASTING = "fasting"


class FastingPlan(BaseModel):
    """A named fasting goal preset (e.g. 16:8 means 16 hours fasting)."""

    model_config = ConfigDict(frozen=True)

    name: str
    duration_seconds: float = Field(gt=0.0)

    @property
    def duration_hours(self) -> int:
        return int(self.duration_seconds / HOUR)


DEFAULT_PLANS: tuple[FastingPlan, ...] = (
    FastingPlan(name="16:8", duration_seconds=16 * HOUR),
    FastingPlan(name="18:6", duration_seconds=18 * HOUR),
    FastingPlan(name="20:4", duration_seconds=20 * HOUR),
    FastingPlan(name="OMAD", duration_seconds=23 * HOUR),  # One Meal a Day
)


def plan_by_name(name: str) -> FastingPlan:
    """Look up a default plan by name (case-insensitive)."""
    for plan in DEFAULT_PLANS:
        if plan.name.lower() == name.strip().lower():
            return plan
    raise ValueError(f"Unknown fasting plan: {name}")


class Profile(BaseModel):
    """Durable lifetime aggregate of streaks, totals and unlocked badges."""

    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    total_fasts_completed: int = Field(default=0, ge=0)
    last_fast_date: datetime | None = None
    unlocked_badge_ids: set[str] = Field(default_factory=set)

    @model_validator(mode="after")
    def longest_covers_current(self) -> "Profile":
        if self.longest_streak < self.current_streak:
            raise ValueError("longest_streak must be >= current_streak")
        return self

    @field_serializer("unlocked_badge_ids")
    def _sorted_badges(self, badge_ids: set[str]) -> list[str]:
        return sorted(badge_ids)

    def unlock_badge(self, badge_id: str) -> bool:
        """Add a badge id. Returns True when it was not already unlocked."""
        if badge_id in self.unlocked_badge_ids:
            return False
        self.unlocked_badge_ids.add(badge_id)
        return True


class LiveSessionState(BaseModel):
    """Dynamic payload pushed to the live activity."""

    model_config = ConfigDict(frozen=True)

    elapsed_seconds: float
    zone_name: str
    progress: float = Field(ge=0.0, le=1.0)


class SessionStatus(BaseModel):
    """Point-in-time view of the session, returned by engine operations."""

    model_config = ConfigDict(frozen=True)

    state: FastingState
    start_timestamp: float
    goal_duration: float
    elapsed_seconds: float
    zone_name: str
    progress: float = Field(ge=0.0, le=1.0)

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, self.goal_duration - self.elapsed_seconds)
