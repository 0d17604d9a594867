# flightsync/analysis/errors.py

"""
Exceptions raised by the timeline, interpolation and playback layers.
"""


class FlightSyncError(Exception):
    """Base class for flightsync errors."""


class InvalidInput(FlightSyncError):
    """Raised when a flight batch or its timestamps cannot be used."""


class TooFewSamples(FlightSyncError):
    """Raised when a track has fewer than two samples and cannot be animated."""

    def __init__(self, flight_id: str, n_samples: int) -> None:
        super().__init__(f"Flight {flight_id} has {n_samples} sample(s), need at least 2")
        self.flight_id = flight_id
        self.n_samples = n_samples


class AlreadyPlaying(FlightSyncError):
    """Raised when starting an animation that is already running."""


class NotInitialized(FlightSyncError):
    """Raised when playing before a global timeline has been computed."""
