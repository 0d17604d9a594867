# flightsync/utils/wait.py

"""
Race a readiness signal against a deadline.
"""

import asyncio

from flightsync.utils.log import get_logger

logger = get_logger(__name__)


async def wait_for_signal(signal: asyncio.Event, timeout: float, what: str = "signal") -> bool:
    """
    Wait until `signal` is set or `timeout` seconds pass, whichever is first.

    A timeout is not an error: the caller proceeds either way.

    Returns
    -------
    bool
        True if the signal fired, False on timeout.
    """
    if signal.is_set():
        return True
    try:
        await asyncio.wait_for(signal.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Timed out after %.1fs waiting for %s, proceeding anyway", timeout, what)
        return False
    return True
