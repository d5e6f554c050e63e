"""Exceptions raised by the farm state store and provider layer."""

from __future__ import annotations

__all__ = [
    "ConfirmationRequiredError",
    "FarmError",
    "FieldNotFoundError",
    "FieldValidationError",
    "ProviderError",
    "QuotaExceededError",
    "TaskGenerationError",
]


class FarmError(RuntimeError):
    """Base class for all farm assistant errors."""


class FieldValidationError(FarmError, ValueError):
    """Raised when field input is rejected before entering the store."""


class FieldNotFoundError(FarmError, KeyError):
    """Raised when an operation names a field that does not exist."""

    def __init__(self, field_id: str) -> None:
        super().__init__(f"field {field_id} not found")
        self.field_id = field_id

    def __str__(self) -> str:
        return f"field {self.field_id} not found"


class ConfirmationRequiredError(FarmError):
    """Raised when a destructive operation is attempted without confirmation."""


class ProviderError(FarmError):
    """Raised when the generative-AI provider fails or answers garbage."""


class QuotaExceededError(ProviderError):
    """Raised when the provider rejects a call because of rate limiting."""


class TaskGenerationError(ProviderError):
    """User-visible, retryable failure of analysis based task generation."""
