from __future__ import annotations


class SentinelError(Exception):
    """Base class for classification errors."""


class UnknownType(SentinelError, KeyError):
    """An emergency type outside the catalog reached a component that needs its definition."""

    def __init__(self, emergency_type: object) -> None:
        self.emergency_type = emergency_type
        super().__init__(f"Unknown emergency type: {emergency_type!r}")

    def __str__(self) -> str:
        return self.args[0]


class AdvisoryUnavailable(SentinelError):
    """Advisory classifier is not configured or cannot be reached."""


class AdvisoryFailed(SentinelError):
    """Advisory classifier call errored, timed out or replied with garbage."""
