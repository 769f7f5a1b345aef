"""
End-to-end walkthrough of the fasting tracker on a simulated clock.

This script exercises:
1. Configuration loading and validation
2. Starting a fast from a plan and tracking zone changes
3. Editing the start time of a running fast
4. Auto-completion, streaks and badge unlocks over a simulated week

Run with: uv run python simulate_fast.py
"""

import asyncio
import tempfile

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters.console import console_collaborators
from fasttrack.config import AppConfig, StorageConfig, print_config_summary, validate_config
from fasttrack.domain.models import HOUR
from fasttrack.domain.zones import zone_for
from fasttrack.observability import configure_logging
from fasttrack.services.messages import MessageType, format_clock
from fasttrack.services.tracker import FastingTracker

console = Console()

DAY = 24 * HOUR
STEP = 30 * 60  # simulated seconds per tick


class SimulatedClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


async def run_single_fast(tracker: FastingTracker, clock: SimulatedClock) -> None:
    """Run one 16:8 fast to completion, printing each zone change."""

    console.print(Panel("⏱️ Simulating a 16:8 fast", style="blue"))

    status = await tracker.start_fast(plan="16:8")
    await tracker.ticker.stop()  # the simulation drives ticks itself
    console.print(f"Started: goal {format_clock(status.goal_duration)}, zone {status.zone_name}")

    # Pretend the user actually started 45 minutes earlier
    await tracker.edit_start_time(clock.now - 45 * 60)
    console.print(f"Start edited, elapsed now {format_clock(tracker.engine.get_elapsed())}")

    table = Table(title="Zone changes")
    table.add_column("Elapsed", style="cyan")
    table.add_column("Zone", style="magenta")
    table.add_column("Progress", style="green")

    last_zone = None
    while tracker.engine.is_fasting:
        observed = tracker.engine.tick(clock.advance(STEP))
        if observed and observed.zone_name != last_zone:
            last_zone = observed.zone_name
            table.add_row(
                format_clock(observed.elapsed_seconds),
                observed.zone_name,
                f"{observed.progress:.0%}",
            )
    await tracker.dispatcher.drain()

    console.print(table)
    report = tracker.engine.last_completion
    if report:
        console.print(f"✅ Fast complete after {format_clock(report.duration_seconds)}")
        for badge in report.newly_unlocked:
            console.print(f"🏅 {badge.name}: {badge.description}", style="yellow")


async def run_week(tracker: FastingTracker, clock: SimulatedClock) -> None:
    """Complete one fast per day for a week, then a 48-hour fast."""

    console.print(Panel("📅 Simulating a week of daily fasts", style="blue"))

    for day in range(1, 7):
        clock.advance(DAY - 16 * HOUR)
        tracker.engine.start(16 * HOUR)
        report = tracker.engine.end(clock.advance(16 * HOUR))
        await tracker.dispatcher.drain()
        if report:
            new = ", ".join(badge.name for badge in report.newly_unlocked) or "-"
            streak = report.profile.current_streak
            console.print(f"Day {day + 1}: streak {streak}, new badges: {new}")

    clock.advance(DAY)
    tracker.engine.start(72 * HOUR)
    report = tracker.engine.end(clock.advance(48 * HOUR))
    await tracker.dispatcher.drain()
    if report:
        zone = zone_for(report.duration_seconds)
        console.print(f"48h fast ended in zone {zone.name} {zone.emoji}")


def print_profile(tracker: FastingTracker) -> None:
    profile = tracker.profile()

    table = Table(title="Profile")
    table.add_column("Stat", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total fasts", str(profile.total_fasts_completed))
    table.add_row("Current streak", str(profile.current_streak))
    table.add_row("Longest streak", str(profile.longest_streak))
    console.print(table)

    badges = Table(title="Unlocked badges")
    badges.add_column("Badge", style="yellow")
    badges.add_column("Description")
    for badge in tracker.unlocked_badges():
        badges.add_row(badge.name, badge.description)
    console.print(badges)

    console.print(tracker.zone_message(MessageType.EDUCATIONAL), style="italic")


async def main() -> None:
    console.print(Panel("🍽️ Fasting Tracker Simulation", style="bold blue"))

    try:
        validate_config()
        print_config_summary()
    except Exception as e:
        console.print(f"❌ Configuration failed: {e}", style="red")
        return

    with tempfile.TemporaryDirectory() as data_dir:
        config = AppConfig(storage=StorageConfig(data_dir=data_dir))
        configure_logging(config.logging)

        clock = SimulatedClock(start=1_700_000_000.0)
        tracker = FastingTracker(
            config=config, collaborators=console_collaborators(console), clock=clock
        )

        try:
            await run_single_fast(tracker, clock)
            await run_week(tracker, clock)
            print_profile(tracker)
        finally:
            await tracker.shutdown()

    console.print("✅ Simulation finished", style="green")


if __name__ == "__main__":
    asyncio.run(main())
