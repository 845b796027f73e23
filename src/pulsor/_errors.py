"""Pulsor error hierarchy.

All pulsor-specific errors inherit from PulsorError for easy catching.
Validation and state errors always propagate to the caller of the failing
operation; errors raised inside bound callbacks never reach ``pulse()``.
"""


class PulsorError(Exception):
    """Base error for all pulsor operations.

    Args:
        message: Human-readable description.
        alias: The pulser alias involved, when known.
        index: Position in a ``bind_many`` batch that failed, when relevant.

    """

    def __init__(
        self,
        message: str = "",
        *,
        alias: str | None = None,
        index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.alias = alias
        self.index = index


class InvalidAliasError(PulsorError):
    """Alias is not a string, is blank after trimming, or exceeds 32 characters."""


class InvalidFunctionError(PulsorError):
    """A primary function or callback is not callable."""


class InvalidModeError(PulsorError):
    """The requested execution mode is not one of sync, async or auto."""


class AlreadyExistsError(PulsorError):
    """An alias is already registered and override was not requested."""


class NotFoundError(PulsorError):
    """No pulser is registered under the alias."""


class AlreadyBoundError(PulsorError):
    """The exact callback reference is already bound to the alias."""


class ConfigError(PulsorError):
    """Invalid or missing configuration."""
