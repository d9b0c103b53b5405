"""
Error taxonomy for the travel companion.

Backend failures are classified exactly once, where the provider talks to the
inference API, into a closed set of kinds. Everything downstream (retry,
fallback, HTTP mapping) branches on ``BackendError.kind`` only.
"""

from __future__ import annotations

from enum import Enum

import httpx
import openai


class ErrorKind(str, Enum):
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    MODEL_UNAVAILABLE = "model_unavailable"
    SERVER = "server"
    NETWORK = "network"


_USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.AUTH: "Invalid API key. Please check your credentials.",
    ErrorKind.RATE_LIMIT: "Rate limit exceeded. Please try again later or use a smaller model.",
    ErrorKind.MODEL_UNAVAILABLE: "The requested model is not available.",
    ErrorKind.SERVER: "The inference service is experiencing issues. Please try again later.",
    ErrorKind.NETWORK: "Failed to reach the inference service.",
}


class CompanionError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(CompanionError):
    """A required input was missing or empty. Never retried."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class ProcessingError(CompanionError):
    """Model output could not be parsed into the expected shape."""


class BackendError(CompanionError):
    kind: ErrorKind = ErrorKind.SERVER

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def escalates_to_fallback(self) -> bool:
        return self.kind in (ErrorKind.RATE_LIMIT, ErrorKind.MODEL_UNAVAILABLE)


class AuthError(BackendError):
    kind = ErrorKind.AUTH


class RateLimitError(BackendError):
    kind = ErrorKind.RATE_LIMIT


class ModelUnavailableError(BackendError):
    kind = ErrorKind.MODEL_UNAVAILABLE


class ServerError(BackendError):
    kind = ErrorKind.SERVER


class NetworkError(BackendError):
    kind = ErrorKind.NETWORK


class GenerationError(CompanionError):
    """Terminal failure of one logical generation request."""

    def __init__(self, kind: ErrorKind, detail: str, attempts: int) -> None:
        self.kind = kind
        self.detail = detail
        self.attempts = attempts
        super().__init__(f"{_USER_MESSAGES[kind]} ({detail})")

    @property
    def user_message(self) -> str:
        return _USER_MESSAGES[self.kind]


def classify_openai_error(exc: Exception) -> BackendError:
    """Map an ``openai`` SDK exception onto the backend error taxonomy."""
    message = str(exc)
    if isinstance(exc, (openai.APITimeoutError, openai.APIConnectionError)):
        return NetworkError(message)

    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        code = getattr(exc, "code", None)
        if code == "model_not_found" or status == 404:
            return ModelUnavailableError(message, status)
        if status in (401, 403):
            return AuthError(message, status)
        if status == 429:
            return RateLimitError(message, status)
        return ServerError(message, status)

    if isinstance(exc, openai.APIError):
        return ServerError(message)
    if isinstance(exc, httpx.TransportError):
        return NetworkError(message)
    return ServerError(message)
