"""
XeroML Errors

Exception hierarchy matching the API's error codes, and the mapping
from an HTTP error response to the matching exception.
"""

from typing import Any, Dict, Mapping, Optional, Type, Union

from .types import ErrorBody, ErrorDetail


class XeroMLConfigError(ValueError):
    """Raised locally when the client is misconfigured (e.g. missing API key)."""


class XeroMLError(Exception):
    """
    Base class for errors returned by the XeroML API.

    Attributes:
        status: HTTP status code
        code: Machine-readable error code
        message: Human-readable message
        request_id: Server request id, or "" when the server sent none
        details: Extra error context from the server, if any
    """

    status: int = 500
    code: str = "internal_error"
    message: str = "Internal server error."

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.request_id = request_id or ""
        self.details = details

    @classmethod
    def from_body(cls, body: Union[ErrorBody, Mapping[str, Any], None]):
        """Build the error from a response body, falling back to class defaults."""
        err = _error_detail(body)
        return cls(
            cls.status,
            _or_default(err.code, cls.code),
            _or_default(err.message, cls.message),
            err.request_id,
            err.details,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status}, code={self.code!r}, "
            f"message={self.message!r}, request_id={self.request_id!r})"
        )


class XeroMLAuthError(XeroMLError):
    status = 401
    code = "invalid_api_key"
    message = "Invalid or revoked API key."


class XeroMLCreditError(XeroMLError):
    status = 402
    code = "credits_exhausted"
    message = "Credits exhausted."


class XeroMLRateLimitError(XeroMLError):
    """Rate limit hit. `retry_after` is the wait in seconds before retrying."""

    status = 429
    code = "rate_limited"
    message = "Rate limit exceeded."

    DEFAULT_RETRY_AFTER = 60

    def __init__(self, *args, retry_after: Optional[int] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.retry_after = retry_after if retry_after is not None else self.DEFAULT_RETRY_AFTER

    @classmethod
    def from_body(cls, body, retry_after: Optional[int] = None):
        err = _error_detail(body)
        return cls(
            cls.status,
            _or_default(err.code, cls.code),
            _or_default(err.message, cls.message),
            err.request_id,
            err.details,
            retry_after=retry_after,
        )


class XeroMLValidationError(XeroMLError):
    status = 400
    code = "invalid_input"
    message = "Invalid input."


class XeroMLParseError(XeroMLError):
    status = 422
    code = "parse_failed"
    message = "Parse failed."


class XeroMLNotFoundError(XeroMLError):
    status = 404
    code = "session_not_found"
    message = "Session not found."


class XeroMLSessionEndedError(XeroMLError):
    status = 409
    code = "session_ended"
    message = "Session already ended."


class XeroMLTimeoutError(XeroMLError):
    status = 504
    code = "timeout"
    message = "Request timed out."


class XeroMLServerError(XeroMLError):
    """Catch-all for any status without a dedicated error class."""

    @classmethod
    def from_body(cls, body, status: Optional[int] = None):
        err = _error_detail(body)
        return cls(
            err.status or status or cls.status,
            _or_default(err.code, cls.code),
            _or_default(err.message, cls.message),
            err.request_id,
            err.details,
        )


ERRORS_BY_STATUS: Dict[int, Type[XeroMLError]] = {
    401: XeroMLAuthError,
    402: XeroMLCreditError,
    429: XeroMLRateLimitError,
    400: XeroMLValidationError,
    422: XeroMLParseError,
    404: XeroMLNotFoundError,
    409: XeroMLSessionEndedError,
    504: XeroMLTimeoutError,
}


def _error_detail(body: Union[ErrorBody, Mapping[str, Any], None]) -> ErrorDetail:
    """
    Extract the `error` object from a body, tolerating malformed input.

    Fields are read one at a time so a single bad field is dropped without
    losing the others.
    """
    if isinstance(body, ErrorBody):
        return body.error or ErrorDetail()
    if not isinstance(body, Mapping):
        return ErrorDetail()
    err = body.get("error")
    if not isinstance(err, Mapping):
        return ErrorDetail()

    code = err.get("code")
    message = err.get("message")
    request_id = err.get("request_id")
    details = err.get("details")
    return ErrorDetail(
        code=code if isinstance(code, str) else None,
        message=message if isinstance(message, str) else None,
        status=_int_or_none(err.get("status")),
        request_id=str(request_id) if request_id is not None else None,
        details=dict(details) if isinstance(details, Mapping) else None,
    )


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return None


def _or_default(value: Optional[str], default: str) -> str:
    """Keep any value the server sent, even an empty string."""
    return value if value is not None else default


def map_error(
    status: int,
    body: Union[ErrorBody, Mapping[str, Any], None],
    retry_after: Optional[int] = None,
) -> XeroMLError:
    """
    Map an HTTP error response to a typed XeroMLError.

    Every status maps to exactly one error class; statuses without a
    dedicated class become XeroMLServerError.

    Args:
        status: HTTP status code of the response
        body: Decoded error body ({"error": {...}}), possibly empty
        retry_after: Parsed Retry-After header in seconds, if present

    Returns:
        The error to raise
    """
    error_cls = ERRORS_BY_STATUS.get(status)
    if error_cls is None:
        return XeroMLServerError.from_body(body, status=status)
    if error_cls is XeroMLRateLimitError:
        return XeroMLRateLimitError.from_body(body, retry_after=retry_after)
    return error_cls.from_body(body)
