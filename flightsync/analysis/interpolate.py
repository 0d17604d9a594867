"""
Per-flight interpolation on the compressed animation clock.

Each flight's real span is projected onto a sub-interval of the animation,
its samples are placed proportionally to their own timestamps inside that
sub-interval, and positions between samples are linear in compressed time.
"""

from __future__ import annotations
from bisect import bisect_right
from datetime import datetime, timedelta
from typing import Iterable, Optional

from flightsync.analysis.errors import TooFewSamples
from flightsync.analysis.types import AnimationClock, GlobalSpan, GlobalTimeline, MappedInterval
from flightsync.utils.geo import altitude_band, feet_to_metres, path_length
from flightsync.utils.log import get_logger
from flightsync.utils.validate import EntityFrame, FlightTrack, Position

logger = get_logger(__name__)


def _fraction(offset: timedelta, total: timedelta) -> float:
    if total <= timedelta(0):
        return 0.0
    return min(max(offset / total, 0.0), 1.0)


def map_interval(
    real_span: tuple[datetime, datetime],
    span: GlobalSpan,
    clock: AnimationClock,
) -> MappedInterval:
    """
    Project a flight's real span onto the animation clock.

    A single-instant global span maps every flight to the animation start.
    """
    real_start, real_end = real_span
    global_real = span.latest_end - span.earliest_start
    start_fraction = _fraction(real_start - span.earliest_start, global_real)
    end_fraction = _fraction(real_end - span.earliest_start, global_real)
    return MappedInterval(
        compressed_start=clock.animation_start + timedelta(seconds=start_fraction * clock.animation_duration),
        compressed_end=clock.animation_start + timedelta(seconds=end_fraction * clock.animation_duration),
    )


class TrackInterpolator:
    """
    Position of one flight at any compressed instant.

    Holds no reference to shared mutable state: given the same compressed
    time, evaluation order across flights does not matter.
    """
    def __init__(self, track: FlightTrack, timeline: GlobalTimeline) -> None:
        if len(track.samples) < 2:
            raise TooFewSamples(track.flight_id, len(track.samples))

        self.flight_id = track.flight_id
        self.animation_end = timeline.clock.animation_end

        self.real_span: tuple[datetime, datetime] = track.real_span
        real_start, real_end = self.real_span
        self.mapped = map_interval((real_start, real_end), timeline.span, timeline.clock)

        # sorted sample index on the compressed clock
        compressed = self.mapped.compressed_end - self.mapped.compressed_start
        real = real_end - real_start
        self.times: list[datetime] = [
            self.mapped.compressed_start + compressed * _fraction(s.timestamp - real_start, real)
            for s in track.samples
        ]
        self.times[0] = self.mapped.compressed_start
        self.times[-1] = self.mapped.compressed_end

        self.positions: list[Position] = [
            Position(lat=s.lat, lon=s.lon, height_m=feet_to_metres(s.alt))
            for s in track.samples
        ]

    def __repr__(self) -> str:
        return (
            f"TrackInterpolator({self.flight_id!r}, "
            f"{self.mapped.compressed_start.isoformat()} -> {self.mapped.compressed_end.isoformat()})"
        )

    def is_visible(self, t: datetime) -> bool:
        return self.mapped.compressed_start <= t <= self.animation_end

    def position_at(self, t: datetime) -> Optional[Position]:
        """
        Interpolated position at compressed time `t`.

        Returns None before the flight starts and after the whole animation
        ends. Between the flight's end and the animation end the last
        position is held.
        """
        if not self.is_visible(t):
            return None
        if t >= self.mapped.compressed_end:
            return self.positions[-1]

        right = bisect_right(self.times, t)
        left = right - 1
        t0 = self.times[left]
        if t0 == t:
            return self.positions[left]

        frac = (t - t0) / (self.times[right] - t0)
        a, b = self.positions[left], self.positions[right]
        return Position(
            lat=a.lat + (b.lat - a.lat) * frac,
            lon=a.lon + (b.lon - a.lon) * frac,
            height_m=a.height_m + (b.height_m - a.height_m) * frac,
        )

    def trail(self, t: datetime) -> list[Position]:
        """
        Path drawn so far: every sample placed at or before `t`, plus the
        interpolated head.
        """
        head = self.position_at(t)
        if head is None:
            return []
        points = self.positions[:bisect_right(self.times, t)]
        if not points or points[-1] != head:
            points.append(head)
        return points

    def trail_length_m(self, t: datetime) -> float:
        return path_length([(p.lat, p.lon) for p in self.trail(t)])

    def frame(self, t: datetime) -> EntityFrame:
        """
        Render record for this flight at compressed time `t`.
        """
        position = self.position_at(t)
        if position is None:
            return EntityFrame(entity_id=self.flight_id, position=None, visible=False)
        return EntityFrame(
            entity_id=self.flight_id,
            position=position,
            visible=True,
            altitude_band=altitude_band(position.height_m),
            trail_length_m=self.trail_length_m(t),
        )


def position_at(track: FlightTrack, timeline: GlobalTimeline, t: datetime) -> Optional[Position]:
    """
    One-off evaluation of a flight's position; see TrackInterpolator.position_at.
    """
    return TrackInterpolator(track, timeline).position_at(t)


def build_interpolators(
    tracks: Iterable[FlightTrack],
    timeline: GlobalTimeline,
) -> list[TrackInterpolator]:
    """
    Build one interpolator per animatable flight.

    Flights with fewer than two samples are skipped with a warning.
    """
    interpolators: list[TrackInterpolator] = []
    for track in tracks:
        try:
            interpolators.append(TrackInterpolator(track, timeline))
        except TooFewSamples as e:
            logger.warning("Skipping flight: %s", e)
    return interpolators
