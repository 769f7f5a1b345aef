"""
Template-based copy for notifications and zone encouragement.

Randomness comes from an injectable ``random.Random`` so callers (and tests)
can make the output deterministic.
"""

import random
from enum import Enum

from fasttrack.domain.models import HOUR
from fasttrack.domain.zones import Zone


class MessageType(str, Enum):
    MOTIVATIONAL = "motivational"
    EDUCATIONAL = "educational"


MOTIVATIONAL_TEMPLATES = (
    "You're doing amazing! Keep pushing forward with your {zone} journey.",
    "Your body is now experiencing the benefits of {zone}. Stay strong!",
    "Great work entering {zone}! Your dedication is paying off.",
    "You've reached {zone} - your body is thanking you for this commitment.",
    "Fantastic progress! You're in {zone} and unlocking incredible health benefits.",
)

EDUCATIONAL_TEMPLATES = (
    "During {zone}, your body is {process}. This helps with {benefit}.",
    "Right now in {zone}, {process} is happening, which supports {benefit}.",
    "Your {zone} phase means {process}, leading to {benefit}.",
    "In this {zone} stage, your body focuses on {process} for {benefit}.",
)

NOTIFICATION_TEMPLATES = (
    "🎉 Congratulations! You've completed your {hours}-hour fast! "
    "Your body has been through an amazing transformation.",
    "✨ Well done! {hours} hours of fasting complete. "
    "You've given your body the gift of healing time.",
    "🌟 Amazing achievement! Your {hours}-hour fast is done. "
    "Your cells are celebrating this reset!",
    "🔥 Incredible! You've finished {hours} hours of fasting. "
    "Your metabolic health is thanking you!",
)

NOTIFICATION_TITLES = (
    "Fasting Complete! 🎉",
    "Well Done! ✨",
    "Amazing Achievement! 🌟",
    "Incredible Work! 🔥",
)

CONTEXTUAL_TEMPLATES = (
    "You've been in {zone} for {hours}h {minutes}m. {emoji} {encouragement}",
    "{emoji} {hours} hours and {minutes} minutes into {zone} - {encouragement}",
    "Your body has been enjoying {zone} benefits for {hours}h {minutes}m. {encouragement}",
)

ENCOURAGEMENTS = (
    "Your cellular health is thanking you!",
    "Keep up this incredible journey!",
    "You're unlocking amazing metabolic benefits!",
    "Your future self will be grateful for this dedication!",
    "This commitment to wellness is inspiring!",
)

ZONE_PROCESSES: dict[str, tuple[str, ...]] = {
    "Anabolic": ("nutrient absorption", "protein synthesis", "muscle recovery"),
    "Catabolic": ("glycogen breakdown", "metabolic shifting", "hormone regulation"),
    "Fat Burning": ("fat oxidation", "ketone production", "metabolic flexibility"),
    "Ketosis": (
        "ketone utilization",
        "brain fuel optimization",
        "insulin sensitivity improvement",
    ),
    "Autophagy": ("cellular cleanup", "damaged protein removal", "mitochondrial renewal"),
    "Deep Autophagy": (
        "deep cellular regeneration",
        "growth hormone release",
        "longevity activation",
    ),
}

ZONE_BENEFITS: dict[str, tuple[str, ...]] = {
    "Anabolic": ("muscle maintenance", "energy replenishment", "recovery optimization"),
    "Catabolic": ("metabolic preparation", "fat burning readiness", "hormonal balance"),
    "Fat Burning": ("weight management", "metabolic health", "energy efficiency"),
    "Ketosis": ("mental clarity", "stable energy", "metabolic flexibility"),
    "Autophagy": ("cellular health", "inflammation reduction", "longevity support"),
    "Deep Autophagy": ("maximum renewal", "anti-aging benefits", "cellular optimization"),
}


def format_clock(seconds: float) -> str:
    """Render seconds as HH:MM:SS (negative values render as 00:00:00)."""
    total = max(0, int(seconds))
    return f"{total // 3600:02d}:{total // 60 % 60:02d}:{total % 60:02d}"


class MessageGenerator:
    """Picks and fills message templates."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def fasting_message(self, zone: Zone, message_type: MessageType) -> str:
        templates = (
            MOTIVATIONAL_TEMPLATES
            if message_type is MessageType.MOTIVATIONAL
            else EDUCATIONAL_TEMPLATES
        )
        template = self.rng.choice(templates)
        process = self.rng.choice(ZONE_PROCESSES.get(zone.name, ("metabolic optimization",)))
        benefit = self.rng.choice(ZONE_BENEFITS.get(zone.name, ("overall wellness",)))
        return template.format(zone=zone.name, process=process, benefit=benefit)

    def notification_message(self, duration_seconds: float) -> tuple[str, str]:
        """Title and body for the completion notification."""
        hours = int(duration_seconds / HOUR)
        body = self.rng.choice(NOTIFICATION_TEMPLATES).format(hours=hours)
        return self.rng.choice(NOTIFICATION_TITLES), body

    def contextual_message(self, zone: Zone, time_in_zone: float) -> str:
        seconds = max(0, int(time_in_zone))
        return self.rng.choice(CONTEXTUAL_TEMPLATES).format(
            zone=zone.name,
            emoji=zone.emoji,
            hours=seconds // 3600,
            minutes=seconds % 3600 // 60,
            encouragement=self.rng.choice(ENCOURAGEMENTS),
        )
