"""
Signed GET requests against the observation API.

Every function here is stateless: credentials, server URL and transport are
passed in on each call and the raw ``requests.Response`` is returned without
interpreting its status or body.
"""

import datetime
import logging
from typing import Any, Iterable, Optional

import requests

from .exceptions import NetworkError
from .queries import (
    DataStreamsQuery,
    ObservationsQuery,
    ResourceQuery,
    ThingsQuery,
    build_path,
)
from .signing import Clock, RoutingParams, compose_headers, utc_now

logger = logging.getLogger(__name__)


def signed_get(
    server_url: str,
    path: str,
    routing: RoutingParams,
    transport: Any = requests,
    clock: Clock = utc_now,
    timeout: Optional[float] = None,
) -> requests.Response:
    """
    Make an HMAC-signed GET request.

    Args:
        server_url: Scheme and host, optionally with a port
        path: Path and query string; signed verbatim
        routing: Auth method label and credentials
        transport: Object with a requests-style ``get`` (module or Session)
        clock: Zero-argument callable returning the signing instant
        timeout: Passed through to the transport

    Returns:
        requests.Response object, whatever its status

    Raises:
        KeyDecodeError: If the secret key is invalid; no request is made
        NetworkError: If the transport fails
    """
    headers = compose_headers(routing, path, clock=clock)
    url = server_url.rstrip('/') + path

    try:
        response = transport.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"HTTP request failed: {e}") from e

    logger.debug(f"GET {path} -> {response.status_code}")
    return response


def request_resource(
    query: ResourceQuery,
    server_url: str,
    routing: RoutingParams,
    base_path: str = "",
    **kwargs,
) -> requests.Response:
    """Build the path for ``query``, sign it and send it."""
    path = build_path(query, base_path)
    return signed_get(server_url, path, routing, **kwargs)


def list_things(server_url: str, routing: RoutingParams, base_path: str = "",
                **kwargs) -> requests.Response:
    """List all things (sites) associated with the account."""
    return request_resource(ThingsQuery(), server_url, routing, base_path, **kwargs)


def list_data_streams(server_url: str, routing: RoutingParams, thing_id: str,
                      base_path: str = "", **kwargs) -> requests.Response:
    """List the data streams of a single thing."""
    return request_resource(
        DataStreamsQuery(thing_id), server_url, routing, base_path, **kwargs
    )


def list_observations(
    server_url: str,
    routing: RoutingParams,
    datastream_ids: Iterable[str],
    from_: datetime.datetime,
    until: datetime.datetime,
    base_path: str = "",
    **kwargs,
) -> requests.Response:
    """
    List observations of one or more data streams within ``[from_, until]``.

    Raises:
        QueryError: If ``datastream_ids`` is empty
    """
    query = ObservationsQuery(tuple(datastream_ids), from_, until)
    return request_resource(query, server_url, routing, base_path, **kwargs)
