"""
Unit tests for canonical message building, signing and header composition.
"""

import base64
import datetime
import hashlib
import hmac
from unittest.mock import Mock

import pytest

from hmac_datasource import (
    KeyDecodeError,
    RoutingParams,
    canonical_message,
    compose_headers,
    format_timestamp,
    sign,
)
from hmac_datasource.constants import HEADER_AUTHORIZATION, HEADER_DATE
from hmac_datasource.signing import SignableRequest, authorization_header, decode_secret_key

SECRET = base64.b64encode(b"test-secret-key").decode('ascii')
FIXED_TIME = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


class TestCanonicalMessage:
    """Test canonical message construction."""

    def test_message_shape(self):
        """Test the seven-line message with empty placeholders."""
        message = canonical_message("2024-01-01T00:00:00.000Z", "/sites", "abc")

        assert message == "GET\n\n2024-01-01T00:00:00.000Z\n/sites\n\n\nabc"
        assert len(message.split("\n")) == 7
        assert not message.endswith("\n")

    def test_path_with_query_is_verbatim(self):
        """Test that query strings are not re-encoded."""
        path = "/observations?from=2024-01-01T00%3A00%3A00.000Z&datastreamIds=d1"
        message = canonical_message("ts", path, "abc")

        assert message.split("\n")[3] == path

    def test_client_id_is_raw(self):
        """Test that the client id is not base64-encoded in the message."""
        message = canonical_message("ts", "/sites", "client@example")

        assert message.split("\n")[-1] == "client@example"

    def test_signable_request_fixed_fields(self):
        """Test the fixed method and empty fields."""
        request = SignableRequest(timestamp="ts", path="/sites", client_id="abc")

        assert request.method == "GET"
        assert request.content_type == ""
        assert request.service_headers == ""
        assert request.content_digest == ""


class TestFormatTimestamp:
    """Test timestamp rendering."""

    def test_millisecond_precision(self):
        instant = datetime.datetime(2025, 5, 25, 13, 24, 56, 789123, tzinfo=datetime.timezone.utc)

        assert format_timestamp(instant) == "2025-05-25T13:24:56.789Z"

    def test_whole_seconds(self):
        assert format_timestamp(FIXED_TIME) == "2024-01-01T00:00:00.000Z"

    def test_converts_to_utc(self):
        """Test that offset-aware instants are converted to UTC."""
        offset = datetime.timezone(datetime.timedelta(hours=2))
        instant = datetime.datetime(2024, 1, 1, 2, 0, tzinfo=offset)

        assert format_timestamp(instant) == "2024-01-01T00:00:00.000Z"

    def test_naive_is_utc(self):
        assert format_timestamp(datetime.datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000Z"


class TestSign:
    """Test HMAC-SHA256 signing."""

    def test_sign_matches_hmac(self):
        """Test signature against a direct HMAC computation."""
        message = "GET\n\n2024-01-01T00:00:00.000Z\n/sites\n\n\nabc"
        signature = sign(message, SECRET)

        expected = base64.b64encode(
            hmac.new(b"test-secret-key", message.encode('utf-8'), hashlib.sha256).digest()
        ).decode('ascii')
        assert signature == expected
        assert len(base64.b64decode(signature)) == 32

    def test_sign_is_deterministic(self):
        message = canonical_message("2024-01-01T00:00:00.000Z", "/sites", "abc")

        assert sign(message, SECRET) == sign(message, SECRET)

    def test_key_sensitivity(self):
        """Test that keys differing in one bit give different signatures."""
        key_a = base64.b64encode(b"\x00" * 32).decode('ascii')
        key_b = base64.b64encode(b"\x01" + b"\x00" * 31).decode('ascii')

        assert sign("message", key_a) != sign("message", key_b)

    def test_message_sensitivity(self):
        assert sign("message", SECRET) != sign("message.", SECRET)

    @pytest.mark.parametrize("key", ["not-base64!!", "abc", ""])
    def test_invalid_key(self, key):
        """Test that invalid keys are rejected rather than used as empty keys."""
        with pytest.raises(KeyDecodeError):
            sign("message", key)

    def test_decode_secret_key(self):
        assert decode_secret_key(SECRET) == b"test-secret-key"


class TestComposeHeaders:
    """Test Date and Authorization header composition."""

    @pytest.fixture
    def routing(self):
        return RoutingParams(auth_method="xCloud", client_id="abc", secret_key=SECRET)

    def test_headers(self, routing):
        """Test header values for a fixed clock."""
        headers = compose_headers(routing, "/sites", clock=lambda: FIXED_TIME)

        message = "GET\n\n2024-01-01T00:00:00.000Z\n/sites\n\n\nabc"
        assert headers[HEADER_DATE] == "2024-01-01T00:00:00.000Z"
        assert headers[HEADER_AUTHORIZATION] == f"xCloud YWJj:{sign(message, SECRET)}"

    def test_date_matches_signed_timestamp(self, routing):
        """Test that the Date header is the timestamp that was signed."""
        headers = compose_headers(routing, "/sites")

        message = canonical_message(headers[HEADER_DATE], "/sites", "abc")
        signature = headers[HEADER_AUTHORIZATION].split(":", 1)[1]
        assert signature == sign(message, SECRET)

    def test_clock_read_once(self, routing):
        clock = Mock(return_value=FIXED_TIME)

        compose_headers(routing, "/sites", clock=clock)

        clock.assert_called_once_with()

    def test_deterministic_for_fixed_clock(self, routing):
        first = compose_headers(routing, "/sites", clock=lambda: FIXED_TIME)
        second = compose_headers(routing, "/sites", clock=lambda: FIXED_TIME)

        assert first == second

    def test_invalid_key_propagates(self):
        routing = RoutingParams(auth_method="xCloud", client_id="abc", secret_key="not-base64!!")

        with pytest.raises(KeyDecodeError):
            compose_headers(routing, "/sites", clock=lambda: FIXED_TIME)

    def test_authorization_header(self):
        """Test that only the header carries the encoded client id."""
        assert authorization_header("xCloud", "abc", "c2ln") == "xCloud YWJj:c2ln"

    def test_routing_repr_hides_credentials(self, routing):
        text = repr(routing)

        assert SECRET not in text
        assert "abc" not in text
        assert "xCloud" in text
