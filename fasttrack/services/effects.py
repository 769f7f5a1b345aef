"""
Outbound effects to external collaborators.

Key patterns:
- Protocol-based dependency injection for every collaborator
- Generic Result type for expected failures
- Fire-and-forget dispatch: each effect is an independent asyncio task with a
  timeout, and its failure is logged and discarded
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

import structlog

from fasttrack.errors import SideEffectDispatchError

logger = structlog.get_logger(__name__)

# Generic Result type for explicit error handling
ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)

_NOTHING = object()


class Result(Generic[ValueT, ErrorT]):
    """
    Explicit error handling without exceptions for expected failures.

    Why: Makes error paths visible in type system, forces handling decisions.
    When to use: When failure is expected business logic, not exceptional.
    """

    def __init__(self, value: Any = _NOTHING, error: ErrorT | None = None) -> None:
        if value is not _NOTHING and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is _NOTHING and error is None:
            raise ValueError("Result must have either value or error")
        self._value: ValueT | None = None if value is _NOTHING else value
        self._error: ErrorT | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error:
            raise self._error
        return self._value  # type: ignore

    def unwrap_or(self, default: ValueT) -> ValueT:
        return self._value if self._error is None else default  # type: ignore

    def unwrap_err(self) -> ErrorT:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error


class NotificationScheduler(Protocol):
    """Schedules the local "fast complete" notification."""

    async def schedule_completion_notification(
        self, fire_after: float, title: str, body: str
    ) -> None: ...

    async def cancel_scheduled_notification(self) -> None: ...


class LiveSessionPublisher(Protocol):
    """Publishes the in-progress fast to a live activity widget."""

    async def create_live_session(
        self, goal: float, initial_zone: str, initial_progress: float
    ) -> None: ...

    async def update_live_session(
        self, zone_name: str, progress: float, elapsed_seconds: float
    ) -> None: ...

    async def end_live_session(self, final_progress: float, elapsed_seconds: float) -> None: ...


class CompanionSync(Protocol):
    """Pushes the session context to a companion device."""

    async def sync_context(
        self, state: str, start_timestamp: float, goal_duration: float
    ) -> None: ...


class HealthStore(Protocol):
    """Records completed fasts in the platform health store."""

    async def persist_completed_interval(self, start: float, end: float) -> None: ...


class NullCollaborator:
    """Accepts every effect and does nothing. Default for unwired collaborators."""

    async def schedule_completion_notification(
        self, fire_after: float, title: str, body: str
    ) -> None:
        return None

    async def cancel_scheduled_notification(self) -> None:
        return None

    async def create_live_session(
        self, goal: float, initial_zone: str, initial_progress: float
    ) -> None:
        return None

    async def update_live_session(
        self, zone_name: str, progress: float, elapsed_seconds: float
    ) -> None:
        return None

    async def end_live_session(self, final_progress: float, elapsed_seconds: float) -> None:
        return None

    async def sync_context(
        self, state: str, start_timestamp: float, goal_duration: float
    ) -> None:
        return None

    async def persist_completed_interval(self, start: float, end: float) -> None:
        return None


@dataclass
class Collaborators:
    """The set of external collaborators the core talks to."""

    notifications: NotificationScheduler = field(default_factory=NullCollaborator)
    live_session: LiveSessionPublisher = field(default_factory=NullCollaborator)
    companion: CompanionSync = field(default_factory=NullCollaborator)
    health: HealthStore = field(default_factory=NullCollaborator)


class EffectDispatcher:
    """
    Issues collaborator calls as independent tasks.

    Design principles:
    - Never blocks the caller (the tick cadence keeps running)
    - Failures and timeouts are logged as SideEffectDispatchError and swallowed
    - Tasks are tracked so shutdown and tests can drain them
    """

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(component="effect_dispatcher")
        self._pending: set[asyncio.Task[Result[None, SideEffectDispatchError]]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def dispatch(
        self, name: str, call: Callable[..., Awaitable[None]], *args: Any, **kwargs: Any
    ) -> bool:
        """Schedule ``call(*args, **kwargs)``. Returns False when it was dropped."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.logger.warning("effect_dropped_no_event_loop", effect=name)
            return False

        task = loop.create_task(self._run(name, call, *args, **kwargs), name=f"effect:{name}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _run(
        self, name: str, call: Callable[..., Awaitable[None]], *args: Any, **kwargs: Any
    ) -> Result[None, SideEffectDispatchError]:
        try:
            await asyncio.wait_for(call(*args, **kwargs), timeout=self.timeout_seconds)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = SideEffectDispatchError(name, e)
            self.logger.warning("side_effect_dispatch_failed", effect=name, error=str(error))
            return Result.err(error)

        self.logger.debug("side_effect_dispatched", effect=name)
        return Result.ok(None)

    async def drain(self) -> list[Result[None, SideEffectDispatchError]]:
        """Wait for every in-flight effect, including ones scheduled while waiting."""
        results: list[Result[None, SideEffectDispatchError]] = []
        while self._pending:
            batch = list(self._pending)
            outcomes = await asyncio.gather(*batch, return_exceptions=True)
            for task, outcome in zip(batch, outcomes, strict=True):
                if isinstance(outcome, BaseException):
                    # Cancelled from outside; _run only raises on cancellation
                    effect = task.get_name().removeprefix("effect:")
                    outcome = Result.err(SideEffectDispatchError(effect, outcome))
                    self.logger.warning("side_effect_cancelled", effect=effect)
                results.append(outcome)
            self._pending.difference_update(batch)
        return results

    async def cancel_all(self) -> None:
        for task in list(self._pending):
            task.cancel()
        await asyncio.gather(*self._pending, return_exceptions=True)
