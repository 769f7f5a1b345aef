"""
Metabolic zone catalogue and the pure zone calculator.

Thresholds are cumulative end boundaries measured from session start
(Anabolic ends at 4h, Catabolic at 12h, ...). While a fast has not yet crossed
the first threshold the first zone (Anabolic) is reported as current; that is a
fallback, not a threshold match, and ``time_in_current_zone`` relies on it.
"""

from pydantic import BaseModel, ConfigDict, Field

from fasttrack.domain.models import HOUR


class Zone(BaseModel):
    """A named phase of a fast."""

    model_config = ConfigDict(frozen=True)

    name: str
    threshold_seconds: float = Field(gt=0.0)
    color: str
    emoji: str
    trivia: tuple[str, ...] = ()
    benefits: tuple[str, ...] = ()


ANABOLIC = Zone(
    name="Anabolic",
    threshold_seconds=4 * HOUR,
    color="blue",
    emoji="🍽️",
    trivia=("Your body is digesting and absorbing nutrients.", "Insulin levels are high."),
    benefits=("Muscle growth and repair.", "Energy replenishment."),
)

CATABOLIC = Zone(
    name="Catabolic",
    threshold_seconds=12 * HOUR,
    color="cyan",
    emoji="⚡",
    trivia=(
        "Your body starts breaking down stored glycogen.",
        "Glucagon levels begin to rise.",
    ),
    benefits=("Glycogen depletion, preparing the body for fat burning.",),
)

FAT_BURNING = Zone(
    name="Fat Burning",
    threshold_seconds=16 * HOUR,
    color="teal",
    emoji="🔥",
    trivia=(
        "Your body is running out of glycogen and starts burning fat for fuel.",
        "This is the primary goal of many intermittent fasters.",
    ),
    benefits=("Increased fat oxidation.", "Weight loss."),
)

KETOSIS = Zone(
    name="Ketosis",
    threshold_seconds=24 * HOUR,
    color="green",
    emoji="🧠",
    trivia=(
        "Your body is now primarily using ketones for energy.",
        "Ketones are produced from the breakdown of fats in the liver.",
    ),
    benefits=("Improved insulin sensitivity.", "Enhanced cognitive function."),
)

AUTOPHAGY = Zone(
    name="Autophagy",
    threshold_seconds=48 * HOUR,
    color="yellow",
    emoji="♻️",
    trivia=(
        "Autophagy is the body's way of cleaning out damaged cells.",
        "This process is crucial for cellular repair and regeneration.",
    ),
    benefits=("Cellular cleansing and recycling.", "Reduced inflammation."),
)

DEEP_AUTOPHAGY = Zone(
    name="Deep Autophagy",
    threshold_seconds=72 * HOUR,
    color="orange",
    emoji="✨",
    trivia=(
        "Your body is in a deep state of cellular cleaning.",
        "Growth hormone levels are significantly elevated.",
    ),
    benefits=("Maximum cellular renewal.", "Potential for increased longevity."),
)

# Ordered by strictly increasing threshold
ZONES: tuple[Zone, ...] = (ANABOLIC, CATABOLIC, FAT_BURNING, KETOSIS, AUTOPHAGY, DEEP_AUTOPHAGY)


def zone_for(elapsed: float) -> Zone:
    """Return the zone entered at the last crossed boundary.

    Crossing a zone's threshold ends that zone, so the zone following the
    greatest crossed threshold is current. Past the final boundary the last
    zone stays current. With nothing crossed (including negative elapsed)
    the first zone is returned.
    """
    crossed = [zone for zone in ZONES if zone.threshold_seconds <= elapsed]
    if not crossed:
        return ZONES[0]
    last_crossed = max(crossed, key=lambda zone: zone.threshold_seconds)
    index = ZONES.index(last_crossed)
    return ZONES[min(index + 1, len(ZONES) - 1)]


def zone_progress(elapsed: float, goal: float) -> float:
    """Fraction of the goal completed, clamped to [0, 1]."""
    if goal <= 0:
        return 0.0
    return min(1.0, max(0.0, elapsed / goal))


def time_in_current_zone(elapsed: float) -> float:
    """Seconds spent since the boundary preceding the current zone."""
    index = ZONES.index(zone_for(elapsed))
    previous_threshold = ZONES[index - 1].threshold_seconds if index > 0 else 0.0
    return elapsed - previous_threshold


def next_zone(elapsed: float) -> Zone | None:
    """Zone that follows the current one, or None once the last zone is current."""
    index = ZONES.index(zone_for(elapsed))
    if index + 1 < len(ZONES):
        return ZONES[index + 1]
    return None


def zone_by_name(name: str) -> Zone:
    for zone in ZONES:
        if zone.name == name:
            return zone
    raise KeyError(name)
