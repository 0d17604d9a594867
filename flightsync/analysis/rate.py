"""
Distance-adaptive playback rate.

Seen from further away, the same screen motion covers more ground, so the
clock has to run faster for flights to keep the same apparent speed. The
multiplier scales with viewer distance relative to the distance recorded
when playback began.
"""

from __future__ import annotations
import math
from typing import Optional

from flightsync.analysis.clock import DrivingClock
from flightsync.analysis.errors import InvalidInput
from flightsync.utils.log import get_logger

logger = get_logger(__name__)


def check_base_distance(distance: float) -> float:
    """
    Return `distance` if it can serve as the 1x baseline, else raise InvalidInput.
    """
    if not distance > 0 or not math.isfinite(distance):
        raise InvalidInput(f"Base viewer distance must be positive and finite, got {distance}")
    return distance


def rate_multiplier(
    current_distance: float,
    base_distance: float,
    min_multiplier: float = 0.01,
    max_multiplier: float = 100.0,
) -> float:
    """
    Clamp `current_distance / base_distance` into [min_multiplier, max_multiplier].
    """
    check_base_distance(base_distance)
    return max(min_multiplier, min(max_multiplier, current_distance / base_distance))


class RateController:
    """
    Feeds the distance-derived multiplier into the driving clock.
    """
    def __init__(
        self,
        clock: DrivingClock,
        min_multiplier: float = 0.01,
        max_multiplier: float = 100.0,
    ) -> None:
        self.clock = clock
        self.min_multiplier = min_multiplier
        self.max_multiplier = max_multiplier
        self.base_distance: Optional[float] = None

    def capture_base(self, distance: float) -> None:
        """
        Record the reference distance for 1x speed. Called once per playback.
        """
        self.base_distance = check_base_distance(distance)
        logger.info("Rate baseline captured at viewer distance %.0f", distance)

    def release(self) -> None:
        self.base_distance = None

    def update_rate(self, current_distance: float) -> float:
        """
        Set the clock multiplier for the current viewer distance.

        Returns the multiplier in effect. Outside playback, or for a NaN
        distance, nothing changes and the last multiplier is returned.
        """
        if not self.clock.should_animate or self.base_distance is None:
            return self.clock.multiplier
        if math.isnan(current_distance):
            logger.warning("Ignoring NaN viewer distance")
            return self.clock.multiplier
        self.clock.multiplier = rate_multiplier(
            current_distance,
            self.base_distance,
            self.min_multiplier,
            self.max_multiplier,
        )
        return self.clock.multiplier
