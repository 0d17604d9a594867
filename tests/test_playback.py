"""Tests for the playback session wiring timeline, clock and interpolators."""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import NOW, T0, make_track
from flightsync.analysis.config import PlaybackConfig
from flightsync.analysis.errors import AlreadyPlaying, InvalidInput, NotInitialized
from flightsync.analysis.playback import Playback
from flightsync.utils.validate import FlightTrack


def test_load_builds_interpolators(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure loading computes the timeline and skips unanimatable flights."""
    playback = Playback(scenario_cfg)
    tl = playback.load(scenario_tracks + [make_track("solo", [100.0])], now=NOW)
    assert tl.clock.animation_duration == pytest.approx(1500.0)
    assert [i.flight_id for i in playback.interpolators] == ["A", "B"]

    info = playback.info()
    assert info.earliest_start == T0
    assert [f.flight_id for f in info.flights] == ["A", "B"]
    assert (info.flights[1].compressed_start - info.animation_start).total_seconds() == pytest.approx(500.0)


def test_tick_emits_synchronized_frame(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure one tick evaluates every flight at the same compressed instant."""
    playback = Playback(scenario_cfg)
    playback.load(scenario_tracks, now=NOW)
    playback.play()

    frame = playback.tick(750.0)
    assert frame.playing
    assert frame.compressed_time == NOW + timedelta(seconds=752)
    assert frame.simulation_instant == T0 + timedelta(seconds=2700)
    assert frame.progress == pytest.approx(50.0)

    by_id = {e.entity_id: e for e in frame.entities}
    assert by_id["A"].visible and by_id["B"].visible
    assert by_id["A"].position.lat == pytest.approx(22.75)
    assert by_id["B"].position.lat == pytest.approx(30.25)
    assert by_id["A"].altitude_band == 0
    assert by_id["A"].trail_length_m > 0


def test_rate_follows_viewer_distance(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure zooming out speeds up every flight together."""
    playback = Playback(scenario_cfg)
    playback.load(scenario_tracks, now=NOW)
    assert playback.update_rate(500_000.0) == 1.0

    playback.play(viewer_distance=150_000.0)
    assert playback.update_rate(300_000.0) == pytest.approx(2.0)
    frame = playback.tick(100.0)
    assert frame.multiplier == pytest.approx(2.0)
    assert frame.compressed_time == NOW + timedelta(seconds=202)


def test_stop_freezes_and_play_twice_raises(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure stop freezes the clock and double play is refused."""
    playback = Playback(scenario_cfg)
    playback.load(scenario_tracks, now=NOW)
    playback.play()
    with pytest.raises(AlreadyPlaying):
        playback.play()
    playback.tick(10.0)
    playback.stop()
    frame = playback.tick(10.0)
    assert not frame.playing
    assert frame.compressed_time == NOW + timedelta(seconds=12)


def test_reset_requires_reload(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure reset discards the session until a batch is loaded again."""
    playback = Playback(scenario_cfg)
    playback.load(scenario_tracks, now=NOW)
    playback.play(viewer_distance=1000.0)
    playback.reset()
    playback.reset()
    assert playback.info() is None
    assert playback.interpolators == []
    frame = playback.tick(1.0)
    assert frame.entities == []
    assert frame.simulation_instant is None
    with pytest.raises(NotInitialized):
        playback.play()


def test_load_new_batch_recomputes(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure a new batch replaces the old timeline entirely."""
    playback = Playback(scenario_cfg)
    playback.load(scenario_tracks, now=NOW)
    playback.play()
    tl = playback.load([make_track("C", [0.0, 36_000.0])], now=NOW)
    assert not playback.is_playing
    assert tl.clock.animation_duration == pytest.approx(10_000.0)
    assert [i.flight_id for i in playback.interpolators] == ["C"]


def test_load_empty_batch_rejected(scenario_cfg: PlaybackConfig) -> None:
    """Ensure an empty batch fails without leaving a timeline behind."""
    playback = Playback(scenario_cfg)
    with pytest.raises(InvalidInput):
        playback.load([])
    assert playback.info() is None


def test_rejected_distance_does_not_start(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure an unusable baseline distance leaves the session stopped and playable."""
    playback = Playback(scenario_cfg)
    playback.load(scenario_tracks, now=NOW)
    with pytest.raises(InvalidInput):
        playback.play(viewer_distance=0.0)
    assert not playback.is_playing
    assert playback.rate.base_distance is None
    playback.play(viewer_distance=150_000.0)
    assert playback.is_playing


def test_failed_load_drops_previous_batch(scenario_tracks: list[FlightTrack], scenario_cfg: PlaybackConfig) -> None:
    """Ensure a rejected batch does not leave the old flights behind."""
    playback = Playback(scenario_cfg)
    playback.load(scenario_tracks, now=NOW)
    with pytest.raises(InvalidInput):
        playback.load([FlightTrack(flight_id="empty")])
    assert playback.tracks == []
    assert playback.interpolators == []
    assert playback.info() is None
