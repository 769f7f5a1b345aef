"""
Error taxonomy for the fasting tracker core.

- InvalidStateError: operation illegal in the current session state, surfaced to callers
- PersistenceWriteError: a durable write failed; logged, retried by the next write
- SideEffectDispatchError: an external collaborator failed; logged and discarded
"""


class FastTrackError(Exception):
    """Base class for all tracker errors."""


class InvalidStateError(FastTrackError):
    """Raised when a session operation is not allowed in the current state."""

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(f"cannot {operation} while {state}")
        self.operation = operation
        self.state = state


class PersistenceWriteError(FastTrackError):
    """A durable store could not be written."""

    def __init__(self, target: str, cause: BaseException) -> None:
        super().__init__(f"failed to persist {target}: {cause}")
        self.target = target
        self.cause = cause


class SideEffectDispatchError(FastTrackError):
    """An outbound collaborator call failed or timed out."""

    def __init__(self, effect: str, cause: BaseException) -> None:
        super().__init__(f"effect {effect} failed: {cause!r}")
        self.effect = effect
        self.cause = cause
