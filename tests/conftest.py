"""Shared fixtures for flightsync tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

import pytest

from flightsync.analysis.config import PlaybackConfig
from flightsync.utils.validate import FlightTrack, TrackSample

T0: datetime = datetime(2024, 5, 16, 6, 0, 0, tzinfo=timezone.utc)
NOW: datetime = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_track(
    flight_id: str,
    offsets_s: Sequence[float],
    lats: Sequence[float] | None = None,
    lons: Sequence[float] | None = None,
    alts_ft: Sequence[float] | None = None,
) -> FlightTrack:
    """Build a track with samples at T0 + each offset."""
    n: int = len(offsets_s)
    lats = lats if lats is not None else [22.0 + i * 0.5 for i in range(n)]
    lons = lons if lons is not None else [114.0 + i * 0.5 for i in range(n)]
    alts_ft = alts_ft if alts_ft is not None else [1000.0 * (i + 1) for i in range(n)]
    samples = [
        TrackSample(timestamp=T0 + timedelta(seconds=off), lat=lat, lon=lon, alt=alt)
        for off, lat, lon, alt in zip(offsets_s, lats, lons, alts_ft)
    ]
    return FlightTrack(flight_id=flight_id, samples=samples)


@pytest.fixture
def scenario_tracks() -> list[FlightTrack]:
    """A spans [T0, T0+1h], B spans [T0+30min, T0+1.5h]."""
    return [
        make_track("A", [0.0, 3600.0], lats=[22.0, 23.0], lons=[114.0, 115.0], alts_ft=[0.0, 10000.0]),
        make_track("B", [1800.0, 5400.0], lats=[30.0, 31.0], lons=[120.0, 121.0], alts_ft=[5000.0, 5000.0]),
    ]


@pytest.fixture
def scenario_cfg() -> PlaybackConfig:
    """Scale chosen so 5,400,000 real ms compress to 1500 s."""
    return PlaybackConfig(scale_factor=3600, min_duration=30.0)
