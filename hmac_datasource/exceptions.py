"""
Custom exceptions for the HMAC data source client.
"""

from typing import Optional


class HMACClientError(Exception):
    """Base exception for HMAC client errors."""
    pass


class KeyDecodeError(HMACClientError):
    """Raised when the secret key is not valid base64."""
    pass


class NetworkError(HMACClientError):
    """Raised when the underlying HTTP transport fails."""
    pass


class QueryError(HMACClientError):
    """Raised when a resource query is malformed."""
    pass


class ConfigurationError(HMACClientError):
    """Raised when data source settings are invalid."""
    pass


class ResponseError(HMACClientError):
    """Raised when the server answers with an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
