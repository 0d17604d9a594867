"""
FlightRadar24 parser: turn flight-track JSON exports into FlightTrack records.

The flight-tracks endpoint returns `[{"fr24_id": ..., "tracks": [...]}]`,
one file per flight. Files are loaded, validated, and sorted chronologically
by their first sample.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from pydantic import ValidationError

from flightsync.analysis.errors import InvalidInput
from flightsync.utils.log import get_logger
from flightsync.utils.validate import FlightTrack, TrackSample

logger = get_logger(__name__)


def parse_flight_track(payload: Any, flight_id: Optional[str] = None) -> FlightTrack:
    """
    Build a FlightTrack from a decoded flight-tracks response.

    Parameters
    ----------
    payload
        Either the raw response list or its single flight object.
    flight_id
        Fallback identifier when the payload carries no `fr24_id`.

    Raises
    ------
    InvalidInput
        If the payload has the wrong shape or a sample fails validation
        (e.g. an unparseable timestamp).
    """
    if isinstance(payload, list):
        if not payload:
            raise InvalidInput("Flight data is missing or invalid")
        payload = payload[0]
    if not isinstance(payload, dict):
        raise InvalidInput(f"Expected a flight object, got {type(payload).__name__}")

    tracks = payload.get("tracks")
    if not isinstance(tracks, list):
        raise InvalidInput("Flight tracks are missing")

    fid = payload.get("fr24_id") or flight_id
    if not fid:
        raise InvalidInput("Flight has no identifier")
    try:
        samples = [TrackSample.model_validate(t) for t in tracks]
    except ValidationError as e:
        raise InvalidInput(f"Invalid sample in flight {fid}: {e}") from e

    callsign = payload.get("callsign") or next((s.callsign for s in samples if s.callsign), None)
    return FlightTrack(flight_id=str(fid), callsign=callsign, samples=samples)


def load_flight_file(file_path: Path) -> FlightTrack:
    """
    Read and parse one flight-track JSON file; the file stem is the fallback id.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidInput(f"{file_path} is not valid JSON: {e}") from e
    return parse_flight_track(payload, flight_id=file_path.stem)


def _iter_files(sources: Iterable[str | Path]) -> Iterator[Path]:
    for src in sources:
        path = Path(src)
        if path.is_dir():
            yield from sorted(path.rglob("*.json"))
        else:
            yield path


def load_flights(sources: Iterable[str | Path], limit: Optional[int] = None) -> list[FlightTrack]:
    """
    Load flight files and directories of `*.json` files.

    Files that cannot be read or parsed, and flights without samples, are
    logged and skipped. The result is sorted by first sample timestamp and
    truncated to the `limit` earliest flights.
    """
    flights: list[FlightTrack] = []
    n_files = 0
    for file_path in _iter_files(sources):
        n_files += 1
        try:
            flight = load_flight_file(file_path)
        except (OSError, InvalidInput) as e:
            logger.error("Error loading %s: %s", file_path, e)
            continue
        if not flight.samples:
            logger.warning("Skipping %s: flight %s has no samples", file_path, flight.flight_id)
            continue
        flights.append(flight)

    flights.sort(key=lambda fl: fl.samples[0].timestamp)
    if limit is not None:
        flights = flights[:limit]
    logger.info("Successfully loaded %d of %d flight data files", len(flights), n_files)
    return flights
