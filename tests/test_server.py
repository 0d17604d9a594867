"""Tests for the HTTP control and frame surface."""

from __future__ import annotations

import time

from fastapi.testclient import TestClient

from flightsync.analysis.config import PlaybackConfig
from flightsync.server import create_app
from flightsync.utils.validate import FlightTrack


def _cfg() -> PlaybackConfig:
    return PlaybackConfig(scale_factor=3600, min_duration=30.0, ready_timeout=0.01)


def test_status(scenario_tracks: list[FlightTrack]) -> None:
    """Ensure the health endpoint answers."""
    with TestClient(create_app(scenario_tracks, _cfg())) as client:
        assert client.get("/api/status").json() == {"status": "ok"}


def test_timeline(scenario_tracks: list[FlightTrack]) -> None:
    """Ensure the timeline endpoint reports each flight's mapping."""
    with TestClient(create_app(scenario_tracks, _cfg())) as client:
        body = client.get("/api/timeline").json()
        assert body["animation_duration"] == 1500.0
        assert [f["flight_id"] for f in body["flights"]] == ["A", "B"]


def test_timeline_uninitialized() -> None:
    """Ensure an app without flights reports the missing timeline."""
    with TestClient(create_app([], _cfg())) as client:
        assert client.get("/api/timeline").status_code == 409
        assert client.post("/api/play").status_code == 409
        assert client.post("/api/reset").status_code == 400


def test_play_frame_rate_stop(scenario_tracks: list[FlightTrack]) -> None:
    """Ensure the control boundary drives the session."""
    with TestClient(create_app(scenario_tracks, _cfg())) as client:
        assert client.post("/api/ready").json() == {"ready": True}

        resp = client.post("/api/play", json={"viewer_distance": 150000.0})
        assert resp.status_code == 200
        frame = resp.json()
        assert frame["playing"] is True
        assert frame["progress"] == 0.0
        assert {e["entity_id"]: e["visible"] for e in frame["entities"]} == {"A": True, "B": False}

        assert client.post("/api/play", json={"viewer_distance": 150000.0}).status_code == 409

        rate = client.post("/api/rate", json={"viewer_distance": 300000.0}).json()
        assert rate == {"multiplier": 2.0}

        frame = client.get("/api/frame").json()
        assert frame["multiplier"] == 2.0
        assert len(frame["entities"]) == 2

        stopped = client.post("/api/stop").json()
        assert stopped["playing"] is False
        assert client.post("/api/rate", json={"viewer_distance": 900000.0}).json() == {"multiplier": 2.0}


def test_play_without_ready_signal(scenario_tracks: list[FlightTrack]) -> None:
    """Ensure play proceeds after the readiness deadline."""
    with TestClient(create_app(scenario_tracks, _cfg())) as client:
        assert client.post("/api/play").json()["playing"] is True


def test_reset_recomputes(scenario_tracks: list[FlightTrack]) -> None:
    """Ensure reset rebuilds the timeline so play works again."""
    with TestClient(create_app(scenario_tracks, _cfg())) as client:
        client.post("/api/ready")
        client.post("/api/play")
        body = client.post("/api/reset").json()
        assert [f["flight_id"] for f in body["flights"]] == ["A", "B"]
        assert client.get("/api/frame").json()["playing"] is False
        assert client.post("/api/play").status_code == 200


def test_play_uninitialized_answers_without_waiting() -> None:
    """Ensure play without a timeline fails fast instead of waiting for readiness."""
    cfg = PlaybackConfig(ready_timeout=30.0)
    with TestClient(create_app([], cfg)) as client:
        started = time.monotonic()
        assert client.post("/api/play").status_code == 409
        assert time.monotonic() - started < 5.0


def test_play_rejected_distance_can_retry(scenario_tracks: list[FlightTrack]) -> None:
    """Ensure a bad baseline distance returns 400 and leaves play available."""
    with TestClient(create_app(scenario_tracks, _cfg())) as client:
        client.post("/api/ready")
        assert client.post("/api/play", json={"viewer_distance": 0.0}).status_code == 400
        assert client.get("/api/frame").json()["playing"] is False
        assert client.post("/api/play", json={"viewer_distance": 150000.0}).status_code == 200
