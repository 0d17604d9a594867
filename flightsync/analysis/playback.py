"""
Playback session: one batch of flights on one driving clock.

Wires the timeline, the per-flight interpolators and the rate controller
together and turns each clock tick into a Frame for a rendering sink.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional, Sequence

from flightsync.analysis.config import PlaybackConfig
from flightsync.analysis.interpolate import TrackInterpolator, build_interpolators
from flightsync.analysis.rate import RateController, check_base_distance
from flightsync.analysis.timeline import Timeline
from flightsync.analysis.types import GlobalTimeline
from flightsync.utils.log import get_logger
from flightsync.utils.validate import FlightTrack, Frame, MappedFlight, TimelineInfo

logger = get_logger(__name__)


class Playback:
    """
    Stateful session driving every loaded flight from a single clock.
    """
    def __init__(self, cfg: PlaybackConfig) -> None:
        self.cfg = cfg
        self.timeline = Timeline(cfg)
        self.rate = RateController(self.timeline.clock, cfg.min_multiplier, cfg.max_multiplier)
        self.tracks: list[FlightTrack] = []
        self.interpolators: list[TrackInterpolator] = []

    @property
    def clock(self):
        return self.timeline.clock

    @property
    def is_playing(self) -> bool:
        return self.timeline.is_playing

    def load(self, tracks: Sequence[FlightTrack], now: Optional[datetime] = None) -> GlobalTimeline:
        """
        Present a new batch: drop any previous state and recompute from scratch.
        """
        self.reset()
        global_timeline = self.timeline.compute(tracks, now=now)
        self.tracks = list(tracks)
        self.interpolators = build_interpolators(self.tracks, global_timeline)
        logger.info(
            "Session ready: %d of %d flights animated, lead-in ends at %s",
            len(self.interpolators),
            len(self.tracks),
            global_timeline.clock.animation_start.isoformat(),
        )
        return global_timeline

    def play(self, viewer_distance: Optional[float] = None) -> None:
        """
        Start the animation; `viewer_distance` becomes the 1x rate baseline.

        A rejected distance raises InvalidInput before anything starts.
        """
        if viewer_distance is not None:
            check_base_distance(viewer_distance)
        self.timeline.start_animation()
        if viewer_distance is not None:
            self.rate.capture_base(viewer_distance)

    def stop(self) -> None:
        self.timeline.stop_animation()

    def reset(self) -> None:
        self.timeline.reset()
        self.rate.release()
        self.tracks = []
        self.interpolators = []

    def update_rate(self, viewer_distance: float) -> float:
        return self.rate.update_rate(viewer_distance)

    def tick(self, wall_seconds: float) -> Frame:
        """
        Advance the clock and evaluate every flight at the new instant.
        """
        return self.frame_at(self.clock.tick(wall_seconds))

    def frame_at(self, t: Optional[datetime]) -> Frame:
        # one snapshot of `t` shared by every flight keeps them in lockstep
        entities = [interp.frame(t) for interp in self.interpolators] if t is not None else []
        return Frame(
            simulation_instant=self.timeline.real_time_at(t) if t is not None else None,
            compressed_time=t,
            progress=self.timeline.progress(),
            multiplier=self.clock.multiplier,
            playing=self.is_playing,
            entities=entities,
        )

    def info(self) -> Optional[TimelineInfo]:
        """
        Summary of the current global timeline and each flight's mapping.
        """
        global_timeline = self.timeline.global_timeline
        if global_timeline is None:
            return None
        flights = []
        for interp in self.interpolators:
            real_start, real_end = interp.real_span
            flights.append(MappedFlight(
                flight_id=interp.flight_id,
                real_start=real_start,
                real_end=real_end,
                compressed_start=interp.mapped.compressed_start,
                compressed_end=interp.mapped.compressed_end,
                n_samples=len(interp.positions),
            ))
        return TimelineInfo(
            earliest_start=global_timeline.span.earliest_start,
            latest_end=global_timeline.span.latest_end,
            animation_start=global_timeline.clock.animation_start,
            animation_duration=global_timeline.clock.animation_duration,
            real_duration_hours=global_timeline.real_duration_hours,
            flights=flights,
        )
