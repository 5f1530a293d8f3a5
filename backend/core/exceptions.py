from __future__ import annotations


class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    """Raised when a transit event or emission factor fails validation.

    ``reason`` is the machine-readable string surfaced to API callers.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InvalidInput(ValidationError):
    """Raised when the emission calculator receives out-of-range inputs."""


class FactorLoadError(AppError):
    """Raised when an emission factor dataset cannot be parsed."""


class StoreUnavailableError(AppError):
    """Raised when the configured storage backend cannot be reached."""
