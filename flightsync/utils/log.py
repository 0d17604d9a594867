"""
Logging setup for flightsync.

Every module logger is a child of the `flightsync` package logger, which
owns the handlers:
- console output via Rich, attached on first use
- JSON-lines file output, switched on by the CLI for long-running commands
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

PACKAGE_LOGGER = "flightsync"

# commands whose logs are also persisted as `<command>.log`
JSON_LOGGED_COMMANDS = ("serve",)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record, UTC ISO-8601 timestamps.
    """
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level":     record.levelname,
            "logger":    record.name,
            "where":     f"{record.module}:{record.lineno}",
            "message":   record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _package_logger() -> logging.Logger:
    pkg = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in pkg.handlers):
        pkg.addHandler(RichHandler(rich_tracebacks=True, show_path=False))
        pkg.setLevel(logging.INFO)
    return pkg


def get_logger(name: str, level: int | str = logging.INFO) -> logging.Logger:
    """
    Return the logger for a flightsync module.

    Names outside the package (e.g. `__main__`) are nested under it so they
    share its handlers.

    Parameters
    ----------
    name
        Logger name (typically __name__).
    level
        Log level (int or string), defaults to INFO.
    """
    _package_logger()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger


def enable_json_log(command: str, directory: Optional[Path] = None) -> Optional[Path]:
    """
    Persist package logs as JSON lines to `<directory>/<command>.log`.

    Only commands listed in JSON_LOGGED_COMMANDS are logged to file; repeated
    calls for the same file attach a single handler.

    Returns
    -------
    Path or None
        The log file, or None when `command` is not file-logged.
    """
    if command not in JSON_LOGGED_COMMANDS:
        return None
    path = ((directory or Path.cwd()) / f"{command}.log").resolve()
    pkg = _package_logger()
    for handler in pkg.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == path:
            return path
    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setFormatter(JSONFormatter())
    pkg.addHandler(file_handler)
    return path
