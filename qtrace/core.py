"""core.py - The process-wide Logger used by ``q()``, ``@trace`` and QHandler.

Initialisation order:
    ``configure()`` installs a Logger explicitly and may be called at start-up
    (or again later, e.g. in tests, to swap the sink). If nothing has been
    configured by the time something is logged, ``get_logger()`` builds a
    default Logger writing to ``FileSink(default_path())``. Both paths run
    under one module lock, so the default is built at most once and a
    concurrent ``configure()`` either wins outright or replaces it afterwards.
"""

import logging
import threading
from typing import Optional

from .logger import DEFAULT_HEADER_INTERVAL, Interval, Logger
from .sink import FileSink

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_shared: Optional[Logger] = None
# The Logger built here around a default FileSink; its file is closed when
# another Logger replaces it.
_owned: Optional[Logger] = None


def _replace(new: Optional[Logger]) -> Optional[Logger]:
    """Swap in ``new`` and close the replaced Logger if this module built it.

    Must be called with ``_lock`` held.
    """
    global _shared
    previous, _shared = _shared, new
    if previous is not None and previous is _owned and previous is not new:
        previous.close()
        logger.debug("closed default qtrace log file %s", previous.sink.path)
    return previous


def configure(sink=None, header_interval: Interval = DEFAULT_HEADER_INTERVAL) -> Logger:
    """Build a Logger and install it as the shared one.

    Args:
        sink: Writable destination. Defaults to a FileSink on ``<tmp>/q``,
            which is closed again when a later ``configure()`` or
            ``install()`` replaces this Logger. A caller-supplied sink is
            never closed.
        header_interval: ``timedelta`` or seconds between repeated headers.

    Returns:
        The newly installed Logger.

    Raises:
        InvalidConfigurationError: If ``header_interval`` is invalid. The
            previously installed Logger stays in place.
    """
    global _owned
    new = Logger(sink if sink is not None else FileSink(), header_interval)
    with _lock:
        _replace(new)
        if sink is None:
            _owned = new
    logger.debug("installed shared qtrace logger writing to %r", new.sink)
    return new


def install(new: Optional[Logger]) -> Optional[Logger]:
    """Install an existing Logger as the shared one; return the previous one.

    ``install(None)`` clears the shared Logger so the next ``get_logger()``
    builds a fresh default.
    """
    with _lock:
        return _replace(new)


def get_logger() -> Logger:
    """Return the shared Logger, building the default one on first use."""
    global _shared, _owned
    with _lock:
        if _shared is None:
            _shared = _owned = Logger(FileSink())
            logger.debug("built default qtrace logger")
        return _shared


def set_header_interval(interval: Interval) -> None:
    """Change the header interval of the shared Logger.

    Raises:
        InvalidConfigurationError: If ``interval`` is invalid.
    """
    get_logger().set_header_interval(interval)
