"""
Business Central API error taxonomy.

Every failure on the submission path (HTTP status, transport exception,
deadline) is classified into one of nine kinds so callers never branch
on raw httpx exceptions.
"""

import asyncio
from enum import Enum
from typing import Any

import httpx


class ApiErrorKind(str, Enum):
    """Closed set of API failure classifications."""
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"  # 401
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"  # 403
    NOT_FOUND = "NOT_FOUND"  # 404
    BAD_REQUEST = "BAD_REQUEST"  # 400
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"  # 429
    SERVER_ERROR = "SERVER_ERROR"  # 5xx
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


RETRYABLE_KINDS = frozenset({
    ApiErrorKind.NETWORK_ERROR,
    ApiErrorKind.TIMEOUT,
    ApiErrorKind.SERVER_ERROR,
    ApiErrorKind.RATE_LIMIT_EXCEEDED,
})

DEFAULT_MESSAGES = {
    ApiErrorKind.AUTHENTICATION_FAILED: "Authentication with Business Central failed",
    ApiErrorKind.AUTHORIZATION_FAILED: "Not authorized for this Business Central resource",
    ApiErrorKind.NOT_FOUND: "Business Central resource not found",
    ApiErrorKind.BAD_REQUEST: "Business Central rejected the request",
    ApiErrorKind.RATE_LIMIT_EXCEEDED: "Business Central rate limit exceeded",
    ApiErrorKind.SERVER_ERROR: "Business Central server error",
    ApiErrorKind.NETWORK_ERROR: "Could not reach Business Central",
    ApiErrorKind.TIMEOUT: "Request timeout",
    ApiErrorKind.UNKNOWN: "An unexpected error occurred",
}


class ClientConfigurationError(ValueError):
    """Raised when the API client is constructed with incomplete settings."""


class ApiError(Exception):
    """
    Structured API error.

    Carries only the classification, an optional HTTP status, a
    human-readable message and an optional details payload (typically
    the parsed error body). Transport internals are not exposed.
    """

    def __init__(
        self,
        kind: ApiErrorKind,
        message: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    @property
    def is_retryable(self) -> bool:
        return is_retryable(self.kind)

    def with_message(self, message: str) -> "ApiError":
        """Re-wrap with a business-level message, keeping the classification."""
        return ApiError(
            self.kind,
            message=message,
            status_code=self.status_code,
            details=self.details,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind.value}, status_code={self.status_code}, message={self.message!r})"


def is_retryable(kind: ApiErrorKind) -> bool:
    """True exactly for network errors, timeouts, 5xx and 429."""
    return kind in RETRYABLE_KINDS


def kind_for_status(status_code: int) -> ApiErrorKind:
    """Map an HTTP status code to an error kind."""
    if status_code == 401:
        return ApiErrorKind.AUTHENTICATION_FAILED
    if status_code == 403:
        return ApiErrorKind.AUTHORIZATION_FAILED
    if status_code == 404:
        return ApiErrorKind.NOT_FOUND
    if status_code == 400:
        return ApiErrorKind.BAD_REQUEST
    if status_code == 429:
        return ApiErrorKind.RATE_LIMIT_EXCEEDED
    if status_code >= 500:
        return ApiErrorKind.SERVER_ERROR
    return ApiErrorKind.UNKNOWN


def kind_for_error_code(code: str) -> ApiErrorKind:
    """Map a Business Central error code (e.g. ``BadRequest_NotFound``) to a kind."""
    upper = code.upper()

    if "AUTH" in upper or "UNAUTHORIZED" in upper:
        return ApiErrorKind.AUTHENTICATION_FAILED
    if "FORBIDDEN" in upper or "PERMISSION" in upper:
        return ApiErrorKind.AUTHORIZATION_FAILED
    if "NOT_FOUND" in upper or "NOTFOUND" in upper:
        return ApiErrorKind.NOT_FOUND
    if "BAD_REQUEST" in upper or "VALIDATION" in upper:
        return ApiErrorKind.BAD_REQUEST
    if "RATE_LIMIT" in upper or "THROTTLE" in upper:
        return ApiErrorKind.RATE_LIMIT_EXCEEDED
    return ApiErrorKind.UNKNOWN


def parse_error_body(response: httpx.Response) -> dict[str, Any]:
    """Parse an error body as JSON, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        return {"message": response.reason_phrase}
    if isinstance(body, dict):
        return body
    return {"body": body}


def _message_from_body(body: dict[str, Any]) -> str | None:
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(body.get("message"), str):
        return body["message"]
    return None


def classify(raw: Any) -> ApiError:
    """
    Classify any failure into an ApiError.

    Handles:
    - ``httpx.Response``: kind from the status code, parsed body as details
    - timeouts (``httpx.TimeoutException``, ``asyncio.TimeoutError``)
    - transport failures (``httpx.TransportError``, ``OSError``)
    - Business Central error payloads (``{"error": {"code", "message"}}``)
    - an existing ``ApiError`` (returned unchanged)
    Anything else becomes ``UNKNOWN``.
    """
    if isinstance(raw, ApiError):
        return raw

    if isinstance(raw, httpx.Response):
        body = parse_error_body(raw)
        kind = kind_for_status(raw.status_code)
        upstream = _message_from_body(body)
        message = f"Business Central API error: {upstream or raw.reason_phrase or DEFAULT_MESSAGES[kind]}"
        return ApiError(kind, message=message, status_code=raw.status_code, details=body)

    # httpx timeouts are transport errors too, so check them first
    if isinstance(raw, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ApiError(ApiErrorKind.TIMEOUT)

    if isinstance(raw, (httpx.TransportError, OSError)):
        return ApiError(ApiErrorKind.NETWORK_ERROR)

    if isinstance(raw, dict):
        error = raw.get("error")
        if isinstance(error, dict):
            code = str(error.get("code") or "")
            return ApiError(
                kind_for_error_code(code),
                message=error.get("message") or None,
                details=error,
            )
        return ApiError(ApiErrorKind.UNKNOWN, message=raw.get("message") or None, details=raw)

    return ApiError(ApiErrorKind.UNKNOWN, message=str(raw) or None)


def validate_payload(model: Any, payload: Any, message: str) -> Any:
    """
    Validate a 2xx response body into a wire model.

    A body the model rejects is an upstream contract failure and is
    raised as ``UNKNOWN`` carrying the given message.
    """
    try:
        return model.model_validate(payload)
    except ValueError as e:
        raise ApiError(
            ApiErrorKind.UNKNOWN,
            message=message,
            details=payload if isinstance(payload, dict) else None,
        ) from e
