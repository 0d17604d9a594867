"""
Global timeline: derive one compressed animation clock from many flights.

Every flight's real span is folded into a single global span, which is then
squeezed by a scale factor (with a floor) into the animation duration. The
Timeline object owns the driving clock and the play/stop/reset lifecycle.
"""

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from flightsync.analysis.clock import DrivingClock
from flightsync.analysis.config import PlaybackConfig
from flightsync.analysis.errors import AlreadyPlaying, InvalidInput, NotInitialized
from flightsync.analysis.types import AnimationClock, GlobalSpan, GlobalTimeline
from flightsync.utils.log import get_logger
from flightsync.utils.validate import FlightTrack

logger = get_logger(__name__)


def compute_global_timeline(
    tracks: Sequence[FlightTrack],
    scale_factor: float = 30_000,
    min_duration: float = 30.0,
    lead_in: float = 2.0,
    now: Optional[datetime] = None,
) -> GlobalTimeline:
    """
    Compute the global span and compressed animation clock for a batch.

    Parameters
    ----------
    tracks
        Flights to animate together; each may hold any number of samples.
    scale_factor
        Real milliseconds per compressed second.
    min_duration
        Floor (s) on the animation duration.
    lead_in
        Seconds between `now` and the animation start.
    now
        Reference instant; defaults to the current UTC time.

    Returns
    -------
    GlobalTimeline
        Span, animation clock and the number of flights considered.

    Raises
    ------
    InvalidInput
        If `tracks` is empty, no track has any sample, or the resulting
        duration is not positive.
    """
    if not tracks:
        raise InvalidInput("No flights provided for timeline calculation")
    if scale_factor <= 0:
        raise InvalidInput(f"scale_factor must be positive, got {scale_factor}")

    earliest_start: Optional[datetime] = None
    latest_end: Optional[datetime] = None
    for track in tracks:
        span = track.real_span
        if span is None:
            continue
        start, end = span
        if earliest_start is None or start < earliest_start:
            earliest_start = start
        if latest_end is None or end > latest_end:
            latest_end = end

    if earliest_start is None or latest_end is None:
        raise InvalidInput("Could not determine valid global timeline from flight data")

    span = GlobalSpan(earliest_start, latest_end)
    animation_duration = max(span.real_duration_ms / scale_factor, min_duration)
    if animation_duration <= 0:
        raise InvalidInput("Single-instant batch needs a positive min_duration")
    if now is None:
        now = datetime.now(timezone.utc)
    clock = AnimationClock(now + timedelta(seconds=lead_in), animation_duration)
    timeline = GlobalTimeline(span, clock, len(tracks))

    logger.info(
        "Global timeline calculated: %.1f hours (%s to %s) will animate over %.1f seconds for %d flights",
        timeline.real_duration_hours,
        earliest_start.isoformat(),
        latest_end.isoformat(),
        animation_duration,
        len(tracks),
    )
    return timeline


class Timeline:
    """
    Owns the driving clock and the global timeline of the current batch.
    """
    def __init__(self, cfg: PlaybackConfig, clock: Optional[DrivingClock] = None) -> None:
        self.cfg = cfg
        self.clock = clock if clock is not None else DrivingClock()
        self.global_timeline: Optional[GlobalTimeline] = None
        self.is_playing = False

    def compute(self, tracks: Sequence[FlightTrack], now: Optional[datetime] = None) -> GlobalTimeline:
        """
        Compute a fresh global timeline for `tracks`, replacing any previous one.
        """
        self.global_timeline = compute_global_timeline(
            tracks,
            scale_factor=self.cfg.scale_factor,
            min_duration=self.cfg.min_duration,
            lead_in=self.cfg.lead_in,
            now=now,
        )
        return self.global_timeline

    def start_animation(self) -> None:
        """
        Configure the clock for the global timeline and start playing.

        Raises
        ------
        NotInitialized
            If no global timeline has been computed.
        AlreadyPlaying
            If the animation is already running.
        """
        if self.global_timeline is None:
            raise NotInitialized("No global timeline available. Calculate timeline first.")
        if self.is_playing:
            raise AlreadyPlaying("Animation is already running")

        clock = self.global_timeline.clock
        self.clock.configure(clock.animation_start, clock.animation_end)
        self.is_playing = True
        logger.info(
            "Global animation started: %.2f seconds covering %s to %s",
            clock.animation_duration,
            self.global_timeline.span.earliest_start.isoformat(),
            self.global_timeline.span.latest_end.isoformat(),
        )

    def stop_animation(self) -> None:
        self.clock.pause()
        self.is_playing = False
        logger.info("Global animation stopped")

    def reset(self) -> None:
        """
        Stop, forget the global timeline and clear the clock bounds.
        """
        self.stop_animation()
        self.global_timeline = None
        self.clock.clear()
        logger.info("Timeline reset")

    def progress(self) -> float:
        """
        Animation progress as a percentage (0-100), or 0 if not animating.
        """
        if not self.is_playing or self.global_timeline is None or self.clock.current_time is None:
            return 0.0
        clock = self.global_timeline.clock
        elapsed = (self.clock.current_time - clock.animation_start).total_seconds()
        return max(0.0, min(100.0, elapsed / clock.animation_duration * 100))

    def real_time_at(self, compressed_time: datetime) -> Optional[datetime]:
        """
        Map a compressed instant back to the real-world instant it stands for.
        """
        if self.global_timeline is None:
            return None
        span = self.global_timeline.span
        clock = self.global_timeline.clock

        elapsed = (compressed_time - clock.animation_start).total_seconds()
        if elapsed < 0:
            return span.earliest_start
        if elapsed >= clock.animation_duration:
            return span.latest_end
        fraction = elapsed / clock.animation_duration
        return span.earliest_start + (span.latest_end - span.earliest_start) * fraction
