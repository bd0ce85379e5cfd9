"""
HMAC Data Source Client

A Python client library that signs GET requests to the sensor observation
API (things, data streams and observations) with HMAC-SHA256, compatible
with the server-side verifier.

Example usage:
    from hmac_datasource import RoutingParams, list_things

    routing = RoutingParams("xCloud", "client-id", "c2VjcmV0LWtleQ==")
    response = list_things("https://api.example.com", routing)
"""

from .client import (
    list_data_streams,
    list_observations,
    list_things,
    request_resource,
    signed_get,
)
from .datasource import DataSource, HealthResult
from .exceptions import (
    HMACClientError,
    KeyDecodeError,
    NetworkError,
    QueryError,
    ConfigurationError,
    ResponseError
)
from .queries import (
    DataStreamsQuery,
    ObservationsQuery,
    ResourceQuery,
    ThingsQuery,
    build_path,
)
from .settings import PluginSettings
from .signing import (
    RoutingParams,
    canonical_message,
    compose_headers,
    format_timestamp,
    sign,
)

__version__ = "1.0.0"
__all__ = [
    "DataSource",
    "HealthResult",
    "PluginSettings",
    "RoutingParams",
    "ThingsQuery",
    "DataStreamsQuery",
    "ObservationsQuery",
    "ResourceQuery",
    "build_path",
    "canonical_message",
    "compose_headers",
    "format_timestamp",
    "sign",
    "signed_get",
    "request_resource",
    "list_things",
    "list_data_streams",
    "list_observations",
    "HMACClientError",
    "KeyDecodeError",
    "NetworkError",
    "QueryError",
    "ConfigurationError",
    "ResponseError"
]
