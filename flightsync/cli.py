#!/usr/bin/env python3
"""
CLI entry point for the flightsync toolkit.

Defines the following commands:
  flightsync timeline SRC... [--preset NAME] [--scale N] [--min-duration S] [--limit N]
  flightsync play SRC... [--distance M]
  flightsync serve SRC... [--port 8000]
  flightsync version
"""

import sys
import time
from argparse import ArgumentParser, Namespace
from importlib.metadata import PackageNotFoundError, version as _get_version

import uvicorn
from rich.console import Console
from rich.live import Live
from rich.table import Table

from flightsync.utils.log import enable_json_log, get_logger
from flightsync.utils.validate import Frame
from flightsync.server import create_app
from flightsync.parsers import fr24
from flightsync.analysis.config import PlaybackConfig
from flightsync.analysis.playback import Playback

logger = get_logger(__name__)
console = Console()


def _build_config(args: Namespace) -> PlaybackConfig:
    """
    Start from the named preset and apply any explicit overrides.
    """
    cfg = PlaybackConfig.preset(args.preset)
    if args.scale is not None:
        cfg.scale_factor = args.scale
    if args.min_duration is not None:
        cfg.min_duration = args.min_duration
    return cfg


def timeline(sources: list[str], cfg: PlaybackConfig, limit: int | None) -> None:
    """
    Compute the global timeline and print each flight's mapped interval.

    Parameters
    ----------
    sources
        Flight-track JSON files or directories containing them.
    cfg
        Playback configuration.
    limit
        Keep only the N chronologically first flights.
    """
    logger.info("Timeline: sources=%s, scale=%s, limit=%s", sources, cfg.scale_factor, limit)
    playback = Playback(cfg)
    playback.load(fr24.load_flights(sources, limit))
    info = playback.info()

    table = Table(title=f"{info.real_duration_hours:.1f} h of traffic in {info.animation_duration:.1f} s")
    table.add_column("flight")
    table.add_column("real start")
    table.add_column("real end")
    table.add_column("anim start (s)", justify="right")
    table.add_column("anim end (s)", justify="right")
    table.add_column("samples", justify="right")
    for fl in info.flights:
        table.add_row(
            fl.flight_id,
            fl.real_start.isoformat(),
            fl.real_end.isoformat(),
            f"{(fl.compressed_start - info.animation_start).total_seconds():.2f}",
            f"{(fl.compressed_end - info.animation_start).total_seconds():.2f}",
            str(fl.n_samples),
        )
    console.print(table)


def _render(frame: Frame) -> Table:
    sim = frame.simulation_instant.isoformat() if frame.simulation_instant else "--"
    table = Table(title=f"Simulation time {sim}  ({frame.progress:.0f}%, x{frame.multiplier:.2f})")
    table.add_column("flight")
    table.add_column("lat", justify="right")
    table.add_column("lon", justify="right")
    table.add_column("height (m)", justify="right")
    table.add_column("trail (km)", justify="right")
    for e in frame.entities:
        if not e.visible:
            continue
        table.add_row(
            e.entity_id,
            f"{e.position.lat:.4f}",
            f"{e.position.lon:.4f}",
            f"{e.position.height_m:.0f}",
            f"{e.trail_length_m / 1000:.1f}",
        )
    return table


def play(sources: list[str], cfg: PlaybackConfig, limit: int | None, distance: float | None) -> None:
    """
    Animate the flights in the terminal until the animation ends or Ctrl-C.

    Parameters
    ----------
    sources
        Flight-track JSON files or directories containing them.
    cfg
        Playback configuration.
    limit
        Keep only the N chronologically first flights.
    distance
        Viewer distance used as the 1x rate baseline.
    """
    playback = Playback(cfg)
    playback.load(fr24.load_flights(sources, limit))
    # wait out the lead-in so the first frame lands on the animation start
    time.sleep(cfg.lead_in)
    playback.play(distance)

    last = time.monotonic()
    try:
        with Live(_render(playback.tick(0.0)), console=console, refresh_per_second=10) as live:
            while not playback.clock.finished:
                time.sleep(cfg.tick_interval)
                now = time.monotonic()
                live.update(_render(playback.tick(now - last)))
                last = now
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        playback.stop()


def serve(sources: list[str], cfg: PlaybackConfig, limit: int | None, port: int) -> None:
    """
    Spin up FastAPI+Uvicorn to drive a browser globe client.

    Parameters
    ----------
    sources
        Flight-track JSON files or directories containing them.
    cfg
        Playback configuration.
    limit
        Keep only the N chronologically first flights.
    port
        Port on which to serve HTTP.
    """
    logger.info("Serve: sources=%s, port=%d", sources, port)
    app = create_app(fr24.load_flights(sources, limit), cfg)
    uvicorn.run(app, host="127.0.0.1", port=port)


def version() -> None:
    """
    Print the installed flightsync package version.
    """
    try:
        ver = _get_version("flightsync")
    except PackageNotFoundError:
        ver = "unknown"
    logger.info("flightsync version %s", ver)


def _add_common(p: ArgumentParser) -> None:
    p.add_argument("sources", nargs="+", help="Flight-track JSON files or directories.")
    p.add_argument(
        "--preset", choices=["default", "extended", "overview"], default="default",
        help="Named playback configuration.",
    )
    p.add_argument("--scale", type=float, help="Real milliseconds per animation second.")
    p.add_argument("--min-duration", type=float, help="Minimum animation length in seconds.")
    p.add_argument("--limit", type=int, help="Animate only the N earliest flights.")


def parse_args(argv: list[str] | None = None) -> Namespace:
    """
    Parse command-line arguments and return the populated namespace.
    """
    parser = ArgumentParser(prog="flightsync")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # flightsync timeline
    p = subparsers.add_parser("timeline", help="Print the global timeline.")
    _add_common(p)

    # flightsync play
    p = subparsers.add_parser("play", help="Animate flights in the terminal.")
    _add_common(p)
    p.add_argument("--distance", type=float, help="Viewer distance (m) for 1x speed.")

    # flightsync serve
    p = subparsers.add_parser("serve", help="Serve via FastAPI + Uvicorn.")
    _add_common(p)
    p.add_argument(
        "--port", type=int, default=8000, help="Port number to serve on."
    )

    # flightsync version
    subparsers.add_parser("version", help="Show flightsync version and exit.")

    return parser.parse_args(argv)


def main() -> None:
    """
    Entry point: dispatch to the selected subcommand.
    """
    args = parse_args()
    enable_json_log(args.command)
    match args.command:
        case "timeline":
            timeline(args.sources, _build_config(args), args.limit)
        case "play":
            play(args.sources, _build_config(args), args.limit, args.distance)
        case "serve":
            serve(args.sources, _build_config(args), args.limit, args.port)
        case "version":
            version()
        case _:
            sys.exit(1)


if __name__ == "__main__":
    main()
