"""
Pydantic schemas to validate loader inputs and rendering outputs.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrackSample(BaseModel):
    """
    One time-stamped position report of a flight track.

    Altitude is kept in feet, as reported by the source.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: datetime
    lat: float
    lon: float
    alt: float = 0.0
    gspeed: Optional[float] = None
    vspeed: Optional[float] = None
    track: Optional[float] = None
    squawk: Optional[str] = None
    callsign: Optional[str] = None
    source: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # naive timestamps would not compare against aware ones
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class FlightTrack(BaseModel):
    """
    One flight: identifier plus its time-ascending samples.
    """
    model_config = ConfigDict(frozen=True)

    flight_id: str
    callsign: Optional[str] = None
    samples: list[TrackSample] = Field(default_factory=list)

    @property
    def real_span(self) -> Optional[tuple[datetime, datetime]]:
        """First and last sample timestamps, or None for an empty track."""
        if not self.samples:
            return None
        return self.samples[0].timestamp, self.samples[-1].timestamp


class Position(BaseModel):
    """
    Interpolated position, height converted to metres.
    """
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float
    height_m: float


class EntityFrame(BaseModel):
    """
    Per-flight record handed to the rendering sink on each tick.
    """
    entity_id: str
    position: Optional[Position]
    visible: bool
    altitude_band: Optional[int] = None
    trail_length_m: float = 0.0


class Frame(BaseModel):
    """
    Everything a rendering sink needs for one tick.
    """
    simulation_instant: Optional[datetime]
    compressed_time: Optional[datetime]
    progress: float
    multiplier: float
    playing: bool
    entities: list[EntityFrame]


class MappedFlight(BaseModel):
    """
    A flight's real span and its projection onto the animation clock.
    """
    flight_id: str
    real_start: datetime
    real_end: datetime
    compressed_start: datetime
    compressed_end: datetime
    n_samples: int


class TimelineInfo(BaseModel):
    """
    Summary of the computed global timeline for the loaded batch.
    """
    earliest_start: datetime
    latest_end: datetime
    animation_start: datetime
    animation_duration: float
    real_duration_hours: float
    flights: list[MappedFlight]


class ViewerDistance(BaseModel):
    """
    Camera height above the globe, as reported by the client.
    """
    viewer_distance: float
