"""Custom exceptions for instance environment composition."""


class InstanceEnvError(Exception):
    """Base exception for all instance environment errors."""

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StrategyResolutionError(InstanceEnvError):
    """Raised when no environment strategy matches the execution context."""

    def __init__(self, handle: object) -> None:
        super().__init__(
            f"No environment strategy for {type(handle).__name__}",
            details={"handle_type": type(handle).__name__},
        )


class DatabaseUrlError(InstanceEnvError):
    """Raised when a bound service carries an unparseable database URI."""


class MessageLoadError(InstanceEnvError):
    """Raised when an application message file cannot be read."""
