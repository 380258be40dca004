"""Exception hierarchy for the Tauros client."""

from __future__ import annotations

import httpx


class TaurosError(Exception):
    """Base class for every error raised by the Tauros client."""

    def __init__(self, message: str, response: httpx.Response | None = None):
        super().__init__(message)
        self.response = response


class ConfigurationError(TaurosError):
    """Raised when credentials are missing or malformed. Not retryable."""


class TransportError(TaurosError):
    """Raised on network failures, timeouts and unreadable HTTP responses."""


class ProtocolError(TaurosError):
    """Raised when the response body is not a parseable envelope."""

    def __init__(self, message: str, status_code: int, body: bytes):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BusinessError(TaurosError):
    """Raised when the exchange answers with ``success: false``."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SecurityError(BusinessError):
    """Invalid token or signature.

    Resending the same request cannot succeed; credentials must be fixed first.
    """
