"""
Console stand-ins for the platform collaborators.

Each class implements one of the outbound effect protocols by rendering the
call to a rich console, so the engine can be exercised end-to-end on a
desktop without notification, live activity, companion or health services.
"""

from datetime import datetime

import structlog
from rich.console import Console

from fasttrack.services.messages import format_clock

logger = structlog.get_logger(__name__)


class ConsoleNotificationScheduler:
    """Prints scheduled and cancelled completion notifications."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.scheduled: tuple[float, str, str] | None = None

    async def schedule_completion_notification(
        self, fire_after: float, title: str, body: str
    ) -> None:
        self.scheduled = (fire_after, title, body)
        self.console.print(f"🔔 Notification in {format_clock(fire_after)}: [bold]{title}[/bold]")
        self.console.print(f"   {body}", style="dim")

    async def cancel_scheduled_notification(self) -> None:
        if self.scheduled is None:
            return
        self.scheduled = None
        self.console.print("🔕 Scheduled notification cancelled", style="dim")


class ConsoleLiveSession:
    """Renders live activity updates as single console lines."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.goal: float | None = None

    async def create_live_session(
        self, goal: float, initial_zone: str, initial_progress: float
    ) -> None:
        self.goal = goal
        self.console.print(
            f"📱 Live activity started: goal {format_clock(goal)}, "
            f"zone {initial_zone}, {initial_progress:.0%}",
            style="cyan",
        )

    async def update_live_session(
        self, zone_name: str, progress: float, elapsed_seconds: float
    ) -> None:
        self.console.print(
            f"📱 {format_clock(elapsed_seconds)}  {zone_name:<15} {progress:6.1%}", style="cyan"
        )

    async def end_live_session(self, final_progress: float, elapsed_seconds: float) -> None:
        self.goal = None
        self.console.print(
            f"📱 Live activity ended at {format_clock(elapsed_seconds)} ({final_progress:.0%})",
            style="cyan",
        )


class LoggingCompanionSync:
    """Logs the context that would be pushed to a paired device."""

    def __init__(self) -> None:
        self.logger = logger.bind(component="companion_sync")
        self.last_context: dict[str, float | str] | None = None

    async def sync_context(
        self, state: str, start_timestamp: float, goal_duration: float
    ) -> None:
        self.last_context = {
            "fastingState": state,
            "fastingStartDate": start_timestamp,
            "fastingGoal": goal_duration,
        }
        self.logger.debug("companion_context_sent", **self.last_context)


class ConsoleHealthStore:
    """Prints the interval a health store would record."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def persist_completed_interval(self, start: float, end: float) -> None:
        started = datetime.fromtimestamp(start).strftime("%Y-%m-%d %H:%M")
        ended = datetime.fromtimestamp(end).strftime("%Y-%m-%d %H:%M")
        self.console.print(
            f"🩺 Health record saved: {started} → {ended} ({format_clock(end - start)})",
            style="green",
        )
