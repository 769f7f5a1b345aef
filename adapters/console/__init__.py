from rich.console import Console

from fasttrack.services.effects import Collaborators

from .collaborators import (
    ConsoleHealthStore,
    ConsoleLiveSession,
    ConsoleNotificationScheduler,
    LoggingCompanionSync,
)


def console_collaborators(console: Console | None = None) -> Collaborators:
    """Collaborators that render every effect to ``console``."""
    console = console or Console()
    return Collaborators(
        notifications=ConsoleNotificationScheduler(console),
        live_session=ConsoleLiveSession(console),
        companion=LoggingCompanionSync(),
        health=ConsoleHealthStore(console),
    )


__all__ = [
    "ConsoleHealthStore",
    "ConsoleLiveSession",
    "ConsoleNotificationScheduler",
    "LoggingCompanionSync",
    "console_collaborators",
]
