"""
Response models for the observation API.

The schemas follow the SensorThings-style payloads returned by the API.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping


@dataclass
class Location:
    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Location":
        return cls(
            latitude=float(data.get('latitude', 0.0)),
            longitude=float(data.get('longitude', 0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'latitude': self.latitude, 'longitude': self.longitude}


@dataclass
class Thing:
    """A site or sensor platform."""
    id: str
    name: str = ""
    description: str = ""
    locations: List[Location] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Thing":
        return cls(
            id=str(data['id']),
            name=data.get('name') or "",
            description=data.get('description') or "",
            locations=[Location.from_dict(item) for item in data.get('location') or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'location': [location.to_dict() for location in self.locations],
        }


@dataclass
class UnitOfMeasurement:
    name: str = ""
    symbol: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnitOfMeasurement":
        return cls(name=data.get('name') or "", symbol=data.get('symbol') or "")


@dataclass
class DataStream:
    """A named series of observations belonging to one thing."""
    id: str
    name: str = ""
    description: str = ""
    unit_of_measurement: UnitOfMeasurement = field(default_factory=UnitOfMeasurement)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DataStream":
        return cls(
            id=str(data['id']),
            name=data.get('name') or "",
            description=data.get('description') or "",
            unit_of_measurement=UnitOfMeasurement.from_dict(
                data.get('unitOfMeasurement') or {}
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'unitOfMeasurement': {
                'name': self.unit_of_measurement.name,
                'symbol': self.unit_of_measurement.symbol,
            },
        }


@dataclass
class Observation:
    """A single reading; ``phenomenon_time`` is epoch milliseconds."""
    value: float
    phenomenon_time: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Observation":
        value = data['value']
        return cls(
            value=float('nan') if value is None else float(value),
            phenomenon_time=int(data['phenomenonTime']),
        )

    @property
    def timestamp(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(
            self.phenomenon_time / 1000, tz=datetime.timezone.utc
        )


@dataclass
class ThingWithDataStreams:
    """A thing together with its data streams, as shown in query editors."""
    thing: Thing
    data_streams: List[DataStream] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'thing': self.thing.to_dict(),
            'dataStreams': [stream.to_dict() for stream in self.data_streams],
        }


@dataclass
class ObservationSeries:
    """Time/value columns for one data stream."""
    datastream_id: str
    name: str
    times: List[datetime.datetime] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def __len__(self):
        return len(self.values)
