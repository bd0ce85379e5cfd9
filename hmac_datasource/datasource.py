"""
Data source facade used by the query layer.

A ``DataSource`` binds one instance's settings to a ``requests.Session`` and
turns raw API responses into models, observation series and health results.
"""

import datetime
import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional

import requests

from . import client
from .exceptions import HMACClientError, ResponseError
from .models import DataStream, Observation, ObservationSeries, Thing, ThingWithDataStreams
from .settings import PluginSettings
from .signing import Clock, utc_now

logger = logging.getLogger(__name__)


@dataclass
class HealthResult:
    """Outcome of a data source health check."""
    ok: bool
    message: str


class DataSource:
    """
    Observation API data source for a single configured instance.

    Wraps the stateless request functions with the instance's settings and
    its own HTTP session.
    """

    def __init__(self, settings: PluginSettings, session: Optional[requests.Session] = None,
                 clock: Clock = utc_now):
        """
        Initialize data source.

        Args:
            settings: Instance settings, including credentials
            session: HTTP session to reuse; a new one is created if omitted
            clock: Signing time source
        """
        self.settings = settings
        self.session = session or requests.Session()
        self.clock = clock

    def _request_kwargs(self):
        return {
            'base_path': self.settings.base_path,
            'transport': self.session,
            'clock': self.clock,
            'timeout': self.settings.timeout,
        }

    def _decode(self, response: requests.Response) -> Any:
        """Check the status of a response and decode its JSON body."""
        if response.status_code != 200:
            raise ResponseError(
                f"request failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ResponseError(
                f"could not decode response: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _decode_list(self, response: requests.Response, model) -> List[Any]:
        """Decode a JSON array response into ``model`` instances."""
        payload = self._decode(response)
        if not isinstance(payload, list):
            raise ResponseError("response is not a list",
                                status_code=response.status_code, body=response.text)
        try:
            return [model.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ResponseError(
                f"could not decode {model.__name__}: {e!r}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    def get_things(self) -> List[Thing]:
        """Fetch all things for the account."""
        response = client.list_things(
            self.settings.server_url, self.settings.routing, **self._request_kwargs()
        )
        return self._decode_list(response, Thing)

    def get_data_streams(self, thing_id: str) -> List[DataStream]:
        """Fetch the data streams of one thing."""
        response = client.list_data_streams(
            self.settings.server_url, self.settings.routing, thing_id,
            **self._request_kwargs()
        )
        return self._decode_list(response, DataStream)

    def get_resources(self) -> List[ThingWithDataStreams]:
        """Fetch every thing together with its data streams."""
        return [
            ThingWithDataStreams(thing=thing, data_streams=self.get_data_streams(thing.id))
            for thing in self.get_things()
        ]

    def query_observations(
        self,
        thing_id: str,
        from_: datetime.datetime,
        until: datetime.datetime,
    ) -> List[ObservationSeries]:
        """
        Fetch observations of all data streams of a thing within a time range.

        NaN readings are dropped; streams whose payload cannot be decoded or
        that have no remaining readings are left out.

        Returns:
            One series per data stream, named after the data stream
        """
        data_streams = self.get_data_streams(thing_id)
        if not data_streams:
            return []
        names = {stream.id: stream.name for stream in data_streams}

        response = client.list_observations(
            self.settings.server_url,
            self.settings.routing,
            [stream.id for stream in data_streams],
            from_,
            until,
            **self._request_kwargs()
        )
        payload = self._decode(response)
        if not isinstance(payload, dict):
            raise ResponseError("observations response is not an object",
                                status_code=response.status_code, body=response.text)

        result = []
        for datastream_id, items in payload.items():
            try:
                observations = [Observation.from_dict(item) for item in items]
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping observations for {datastream_id}: {e}")
                continue

            series = ObservationSeries(
                datastream_id=datastream_id,
                name=names.get(datastream_id, datastream_id),
            )
            for observation in observations:
                if math.isnan(observation.value):
                    continue
                series.times.append(observation.timestamp)
                series.values.append(observation.value)
            if len(series):
                result.append(series)
        return result

    def check_health(self) -> HealthResult:
        """Check that the settings are complete and the API accepts our signature."""
        missing = self.settings.missing_fields()
        if missing:
            return HealthResult(ok=False, message=missing[0])

        try:
            things = self.get_things()
        except ResponseError as e:
            logger.warning(f"Health check failed: {e}")
            return HealthResult(ok=False, message=f"Request failed: {e.body or e}")
        except (HMACClientError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Health check failed: {e}")
            return HealthResult(ok=False, message=f"Request failed: {e}")

        if not things:
            return HealthResult(ok=False, message="No root nodes found")
        return HealthResult(ok=True, message="Data source is working")

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
