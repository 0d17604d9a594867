# flightsync/server.py
"""
FastAPI server for the flightsync CLI.

Exposes the playback controls and per-tick frames to a browser globe client.
"""

import asyncio
import time
from typing import Optional

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from flightsync.utils.log import get_logger
from flightsync.utils.validate import FlightTrack, Frame, TimelineInfo, ViewerDistance
from flightsync.utils.wait import wait_for_signal
from flightsync.analysis.config import PlaybackConfig
from flightsync.analysis.errors import AlreadyPlaying, InvalidInput, NotInitialized
from flightsync.analysis.playback import Playback

logger = get_logger(__name__)


def _advance(request: Request) -> Frame:
    """
    Tick the session clock by the wall time elapsed since the previous frame.
    """
    state = request.app.state
    now = time.monotonic()
    elapsed = 0.0 if state.last_tick is None else now - state.last_tick
    state.last_tick = now
    return state.playback.tick(elapsed)


def create_app(flights: list[FlightTrack], cfg: Optional[PlaybackConfig] = None) -> FastAPI:
    """
    Build a FastAPI instance bound to a batch of flights.
    """
    cfg = cfg or PlaybackConfig.default()
    app = FastAPI()
    app.state.cfg = cfg
    app.state.flights = flights
    app.state.playback = Playback(cfg)
    app.state.ready = asyncio.Event()
    app.state.last_tick = None

    if flights:
        app.state.playback.load(flights)
    else:
        logger.warning("No flights loaded, timeline is not initialized")

    @app.exception_handler(NotInitialized)
    async def not_initialized(request: Request, exc: NotInitialized) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(AlreadyPlaying)
    async def already_playing(request: Request, exc: AlreadyPlaying) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidInput)
    async def invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/api/status", response_class=JSONResponse)
    async def status() -> JSONResponse:
        return JSONResponse(status_code=200, content={"status": "ok"})

    @app.get("/api/timeline", response_model=TimelineInfo)
    async def get_timeline(request: Request):
        """
        return the global timeline and each flight's mapped interval.
        """
        info = request.app.state.playback.info()
        if info is None:
            raise NotInitialized("No global timeline available. Load flights first.")
        return info

    @app.post("/api/ready", response_class=JSONResponse)
    async def ready(request: Request) -> JSONResponse:
        """
        the client globe has finished moving the camera and loading tiles.
        """
        request.app.state.ready.set()
        return JSONResponse(status_code=200, content={"ready": True})

    @app.post("/api/play", response_model=Frame)
    async def play(request: Request, body: Optional[ViewerDistance] = None):
        state = request.app.state
        if state.playback.timeline.global_timeline is None:
            raise NotInitialized("No global timeline available. Load flights first.")
        await wait_for_signal(state.ready, state.cfg.ready_timeout, what="globe readiness")
        state.playback.play(body.viewer_distance if body is not None else None)
        state.last_tick = None
        return _advance(request)

    @app.post("/api/stop", response_model=Frame)
    async def stop(request: Request):
        request.app.state.playback.stop()
        return _advance(request)

    @app.post("/api/reset", response_model=TimelineInfo)
    async def reset(request: Request):
        """
        discard the session and recompute the timeline from the loaded flights.
        """
        state = request.app.state
        state.playback.reset()
        state.last_tick = None
        state.playback.load(state.flights)
        return state.playback.info()

    @app.post("/api/rate", response_class=JSONResponse)
    async def rate(request: Request, body: ViewerDistance) -> JSONResponse:
        multiplier = request.app.state.playback.update_rate(body.viewer_distance)
        return JSONResponse(status_code=200, content={"multiplier": multiplier})

    @app.get("/api/frame", response_model=Frame)
    async def frame(request: Request):
        return _advance(request)

    return app
