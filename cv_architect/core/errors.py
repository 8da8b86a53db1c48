"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses. Each subclass carries
the HTTP status the global handler answers with.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    max_bytes: int
    actual_bytes: int
    timeout_seconds: float
    file_type: str
    file_name_ext: str
    mime_type: str
    model: str
    provider: str
    history_id: str
    tab: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    http_status: ClassVar[int] = 400

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class FileTooLargeError(ValidationAppError):
    """Raised when an upload exceeds the configured size ceiling."""

    http_status = 413


class UnsupportedFormatError(ValidationAppError):
    """Raised for file types outside the allow-list, including legacy .doc."""

    http_status = 415


class NotFoundAppError(AppError):
    """Raised when a requested resource (history item, result) does not exist."""

    http_status = 404


class ConflictAppError(AppError):
    """Raised when a pipeline already has a request in flight."""

    http_status = 409


class PresentationBlockedError(AppError):
    """Raised when a printable report or document cannot be produced."""

    http_status = 500


class LLMAppError(AppError):
    """Raised when LLM provider/client operations fail."""

    http_status = 500


class MissingCredentialError(LLMAppError):
    """No API credential is configured for the provider."""


class PayloadRejectedError(LLMAppError):
    """The provider rejected the request content (too large or corrupt)."""

    http_status = 400


class QuotaExceededError(LLMAppError):
    """The provider's quota or rate limit was hit."""

    http_status = 429


class ServiceUnavailableError(LLMAppError):
    """The provider failed server-side."""

    http_status = 503


class MalformedResponseError(LLMAppError):
    """The provider answered with JSON that does not match the result schema."""

    http_status = 502


class UnknownLLMError(LLMAppError):
    """Any provider failure that matches no known category."""


class HeadshotAnalysisError(LLMAppError):
    """Generic failure of the headshot pipeline."""

    http_status = 502
