# flightsync/analysis/types.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class GlobalSpan:
    """
    Union of the real-time spans of every flight in a batch.

    Parameters
    ----------
    earliest_start : datetime
        First sample timestamp across all flights.
    latest_end : datetime
        Last sample timestamp across all flights.
    """
    earliest_start: datetime
    latest_end: datetime

    @property
    def real_duration_ms(self) -> float:
        return (self.latest_end - self.earliest_start) / timedelta(milliseconds=1)


@dataclass(frozen=True)
class AnimationClock:
    """
    Compressed time base shared by every flight of a session.

    Parameters
    ----------
    animation_start : datetime
        Compressed instant at which playback begins.
    animation_duration : float
        Length of the whole animation, in seconds.
    """
    animation_start: datetime
    animation_duration: float

    @property
    def animation_end(self) -> datetime:
        return self.animation_start + timedelta(seconds=self.animation_duration)


@dataclass(frozen=True)
class GlobalTimeline:
    """
    Global span and animation clock computed together for one batch.
    """
    span: GlobalSpan
    clock: AnimationClock
    n_flights: int

    @property
    def real_duration_hours(self) -> float:
        return self.span.real_duration_ms / (1000 * 60 * 60)


@dataclass(frozen=True)
class MappedInterval:
    """
    A flight's real span projected onto the animation clock.

    Parameters
    ----------
    compressed_start : datetime
        Compressed instant of the flight's first sample.
    compressed_end : datetime
        Compressed instant of the flight's last sample.
    """
    compressed_start: datetime
    compressed_end: datetime

    @property
    def duration(self) -> float:
        return (self.compressed_end - self.compressed_start).total_seconds()
