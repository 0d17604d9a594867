# flightsync/analysis/clock.py

"""
Driving clock: the only mutable time state of a playback session.

The timeline configures its bounds, the rate controller sets its multiplier
and the rendering sink advances it once per tick. Everything else reads it.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Optional


class DrivingClock:
    """
    Clamped clock advancing compressed time by wall time times a multiplier.
    """
    def __init__(self) -> None:
        self.start_time: Optional[datetime] = None
        self.stop_time: Optional[datetime] = None
        self.current_time: Optional[datetime] = None
        self.multiplier: float = 1.0
        self.should_animate: bool = False

    def configure(self, start: datetime, stop: datetime) -> None:
        """
        Set the playback bounds and rewind to the start at unit rate.
        """
        self.start_time = start
        self.stop_time = stop
        self.current_time = start
        self.multiplier = 1.0
        self.should_animate = True

    def pause(self) -> None:
        self.should_animate = False

    def clear(self) -> None:
        """
        Drop the bounds and the current time.
        """
        self.start_time = None
        self.stop_time = None
        self.current_time = None
        self.multiplier = 1.0
        self.should_animate = False

    def tick(self, wall_seconds: float) -> Optional[datetime]:
        """
        Advance by `wall_seconds` of real observation time.

        Returns the current compressed time after the advance. This value is
        the snapshot every flight is evaluated at for this tick.
        """
        if not self.should_animate or self.current_time is None:
            return self.current_time
        if wall_seconds > 0:
            self.current_time += timedelta(seconds=wall_seconds * self.multiplier)
        if self.stop_time is not None and self.current_time > self.stop_time:
            self.current_time = self.stop_time
        return self.current_time

    @property
    def finished(self) -> bool:
        return (
            self.current_time is not None
            and self.stop_time is not None
            and self.current_time >= self.stop_time
        )
