"""
Resource queries supported by the observation API.

Each query kind carries only the fields its endpoint needs; ``build_path``
turns any of them into the request path that is both signed and sent.
"""

import datetime
from dataclasses import dataclass
from typing import Tuple, Union
from urllib.parse import urlencode

from .constants import (
    INDEX_PATH,
    QUERY_COLLECTION,
    QUERY_END,
    QUERY_PATH,
    QUERY_ROOT,
    QUERY_START,
    QUERY_TAGS,
)
from .exceptions import QueryError
from .signing import format_timestamp


@dataclass(frozen=True)
class ThingsQuery:
    """All things (sites) visible to the account."""


@dataclass(frozen=True)
class DataStreamsQuery:
    """Data streams belonging to one thing."""
    thing_id: str

    def __post_init__(self):
        if not self.thing_id:
            raise QueryError("thing_id cannot be empty")


@dataclass(frozen=True)
class ObservationsQuery:
    """Observations of one or more data streams between two instants."""
    datastream_ids: Tuple[str, ...]
    from_: datetime.datetime
    until: datetime.datetime

    def __post_init__(self):
        if isinstance(self.datastream_ids, str):
            raise QueryError("datastream_ids must be a sequence of ids, not a string")
        ids = tuple(self.datastream_ids)
        if not ids:
            raise QueryError("datastream_ids must contain at least one id")
        object.__setattr__(self, 'datastream_ids', ids)

    def query_string(self) -> str:
        # Parameter order is covered by the signature
        pairs = [
            (QUERY_START, format_timestamp(self.from_)),
            (QUERY_END, format_timestamp(self.until)),
        ]
        pairs.extend((QUERY_TAGS, datastream_id) for datastream_id in self.datastream_ids)
        return urlencode(pairs)


ResourceQuery = Union[ThingsQuery, DataStreamsQuery, ObservationsQuery]


def build_path(query: ResourceQuery, base_path: str = "") -> str:
    """
    Build the request path for a resource query.

    Args:
        query: One of the resource query kinds
        base_path: Optional prefix such as ``/xcloud/data-export``

    Returns:
        Path (and query string, for observations) relative to the server URL
    """
    base_path = base_path.strip('/')
    if base_path:
        base_path = f"/{base_path}"
    if isinstance(query, ThingsQuery):
        return f"{base_path}/{INDEX_PATH}"
    if isinstance(query, DataStreamsQuery):
        # Singular "site"; the plural form makes the server fail with a 5xx
        return f"{base_path}/{QUERY_ROOT}/{query.thing_id}/{QUERY_COLLECTION}"
    if isinstance(query, ObservationsQuery):
        return f"{base_path}/{QUERY_PATH}?{query.query_string()}"
    raise QueryError(f"unsupported resource query: {type(query).__name__}")
