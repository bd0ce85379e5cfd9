"""
HMAC-SHA256 request signing compatible with the observation API verifier.

The server recomputes a seven-line canonical message from the request and
the ``Date`` header, signs it with the client's decoded secret key, and
compares the result with the signature carried in ``Authorization``.
"""

import base64
import binascii
import datetime
import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict

from .constants import (
    CANONICAL_SEPARATOR,
    HEADER_AUTHORIZATION,
    HEADER_DATE,
    ISO_FORMAT,
    SIGNED_METHOD,
)
from .exceptions import KeyDecodeError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


def utc_now() -> datetime.datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def format_timestamp(instant: datetime.datetime) -> str:
    """
    Render an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=datetime.timezone.utc)
    instant = instant.astimezone(datetime.timezone.utc)
    return f"{instant.strftime(ISO_FORMAT)}.{instant.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class RoutingParams:
    """Credentials and scheme label for one data source instance."""
    auth_method: str
    client_id: str = field(repr=False)
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class SignableRequest:
    """The fields of a GET request covered by the signature."""
    timestamp: str
    path: str
    client_id: str
    method: str = SIGNED_METHOD
    content_type: str = ""
    service_headers: str = ""
    content_digest: str = ""

    def lines(self):
        # Order and empty placeholders are fixed by the server
        return [
            self.method,
            self.content_type,
            self.timestamp,
            self.path,
            self.service_headers,
            self.content_digest,
            self.client_id,
        ]


def canonical_message(timestamp: str, path: str, client_id: str) -> str:
    """
    Build the canonical message for a GET request.

    Args:
        timestamp: Formatted request timestamp (same value as the Date header)
        path: Request path including any query string, unescaped
        client_id: Raw client identifier

    Returns:
        Seven newline-joined fields with no trailing newline
    """
    request = SignableRequest(timestamp=timestamp, path=path, client_id=client_id)
    return CANONICAL_SEPARATOR.join(request.lines())


def decode_secret_key(secret_key: str) -> bytes:
    """
    Decode a base64 secret key.

    Raises:
        KeyDecodeError: If the key is empty or not valid base64
    """
    if not secret_key:
        raise KeyDecodeError("secret key is empty")
    try:
        return base64.b64decode(secret_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyDecodeError(f"secret key is not valid base64: {e}") from e


def sign(message: str, secret_key: str) -> str:
    """
    Sign a canonical message with HMAC-SHA256.

    Args:
        message: Canonical message
        secret_key: Base64-encoded secret key

    Returns:
        Base64-encoded digest (standard alphabet, padded)

    Raises:
        KeyDecodeError: If the key cannot be decoded
    """
    key = decode_secret_key(secret_key)
    mac = hmac.new(key, message.encode('utf-8'), hashlib.sha256)
    return base64.b64encode(mac.digest()).decode('ascii')


def authorization_header(auth_method: str, client_id: str, signature: str) -> str:
    """Compose the Authorization header value."""
    encoded_client_id = base64.b64encode(client_id.encode('utf-8')).decode('ascii')
    return f"{auth_method} {encoded_client_id}:{signature}"


def compose_headers(routing: RoutingParams, path: str, clock: Clock = utc_now) -> Dict[str, str]:
    """
    Sign a GET request for ``path`` and return its authentication headers.

    The clock is read exactly once; the resulting timestamp is used both in
    the signed message and as the Date header.

    Raises:
        KeyDecodeError: If the routing secret key cannot be decoded
    """
    timestamp = format_timestamp(clock())
    message = canonical_message(timestamp, path, routing.client_id)
    signature = sign(message, routing.secret_key)
    logger.debug(f"Signed GET {path} at {timestamp}")
    return {
        HEADER_DATE: timestamp,
        HEADER_AUTHORIZATION: authorization_header(
            routing.auth_method, routing.client_id, signature
        ),
    }
