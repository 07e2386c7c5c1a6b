"""logger.py - The stateful core of qtrace.

Logger decides, for every call, whether the body line needs a context header
in front of it, writes the result to its sink and remembers the call for next
time.

Header semantics:
    A body line is preceded by a header line IFF any of the following holds:

    - This is the first call on this Logger.
    - The previous call came from a different file.
    - The previous call came from a different function.
    - At least ``header_interval`` has passed since the previous call.

    The line number is deliberately ignored, so several calls from one
    function in quick succession share a single header.

Thread-safety:
    One ``threading.Lock`` guards the previous call, the interval and the
    sink. Deciding, writing and updating happen inside one critical section,
    so a header and its body line are never split by another thread's output
    and two threads can't both skip a header based on the same stale state.
"""

import logging
import math
import threading
from datetime import datetime, timedelta, timezone
from numbers import Real
from typing import Any, Callable, Optional, Tuple, Union

from .callsite import CallSite
from .errors import InvalidConfigurationError, PoisonedStateError, SinkWriteError
from .fmt import Formatter

logger = logging.getLogger(__name__)

DEFAULT_HEADER_INTERVAL = timedelta(seconds=2)

Interval = Union[timedelta, Real]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_interval(interval: Interval) -> timedelta:
    """Normalise ``interval`` to a non-negative timedelta.

    Numbers are taken as seconds.

    Raises:
        InvalidConfigurationError: If ``interval`` is negative, not finite,
            too large for a timedelta or not a duration at all.
    """
    if isinstance(interval, timedelta):
        value = interval
    elif isinstance(interval, Real) and not isinstance(interval, bool):
        try:
            seconds = float(interval)
            if not math.isfinite(seconds):
                raise InvalidConfigurationError(
                    f"header interval must be finite, got {interval!r}"
                )
            value = timedelta(seconds=seconds)
        except InvalidConfigurationError:
            raise
        except (OverflowError, ValueError) as exc:
            raise InvalidConfigurationError(
                f"header interval out of range: {interval!r}"
            ) from exc
    else:
        raise InvalidConfigurationError(
            f"header interval must be a timedelta or seconds, got {interval!r}"
        )
    if value < timedelta(0):
        raise InvalidConfigurationError(
            f"header interval must be >= 0, got {value!r}"
        )
    return value


class Logger:
    """Writes marker, literal and expression lines to a sink.

    Attributes:
        _sink: Anything with a ``write(str)`` method. ``flush()`` is called
            after every line when the sink provides it.
        _formatter (Formatter): Builds header and body lines.
        _header_interval (timedelta): Minimum gap between calls from the
            same scope before a header is repeated.
        _prev: ``(datetime, CallSite)`` of the last successful call, or
            ``None`` before the first one.
        _clock: Zero-argument callable returning the current aware datetime.

    Example:
        >>> import io
        >>> sink = io.StringIO()
        >>> log = Logger(sink)
        >>> log.log_literal(42, CallSite("app.py", "app.main", 3))
        >>> sink.getvalue().splitlines()[1]
        '> 42'
    """

    def __init__(
        self,
        sink,
        header_interval: Interval = DEFAULT_HEADER_INTERVAL,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialise the logger.

        Args:
            sink: Writable text destination owned by this Logger from now on.
                Nothing else should write to it while the Logger is in use.
            header_interval: ``timedelta`` or seconds. Defaults to 2 seconds.
            clock: Source of the current time. Defaults to UTC now. Tests
                inject a fake clock here.

        Raises:
            InvalidConfigurationError: If ``header_interval`` is negative.
        """
        self._sink = sink
        self._formatter = Formatter()
        self._header_interval = _as_interval(header_interval)
        self._clock = clock or _utc_now
        self._prev: Optional[Tuple[datetime, CallSite]] = None
        self._poisoned = False
        self._lock = threading.Lock()

    # ---------------------------------------------------------------------- #
    # Configuration
    # ---------------------------------------------------------------------- #

    @property
    def header_interval(self) -> timedelta:
        with self._lock:
            return self._header_interval

    def set_header_interval(self, interval: Interval) -> None:
        """Replace the header interval; applies from the next call on.

        Raises:
            InvalidConfigurationError: If ``interval`` is negative. The
                previous value is kept.
            PoisonedStateError: If the logger has been poisoned.
        """
        value = _as_interval(interval)
        with self._lock:
            self._check_poisoned()
            self._header_interval = value
        logger.debug("header interval set to %s", value)

    @property
    def previous(self) -> Optional[Tuple[datetime, CallSite]]:
        """The time and site of the last successful call, if any."""
        with self._lock:
            return self._prev

    @property
    def sink(self):
        return self._sink

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def close(self) -> None:
        """Close the sink if it has a ``close()`` method.

        Only call this on a Logger that owns a sink nobody else uses.
        """
        with self._lock:
            close = getattr(self._sink, "close", None)
            if close is not None:
                close()

    # ---------------------------------------------------------------------- #
    # Logging operations
    # ---------------------------------------------------------------------- #

    def log_marker(self, call_site: CallSite) -> None:
        """Record that execution reached ``call_site``."""
        self._write_log_line(call_site, self._formatter.marker())

    def log_literal(self, value: Any, call_site: CallSite) -> None:
        """Record a literal ``value`` at ``call_site``."""
        self._write_log_line(call_site, self._formatter.literal(value))

    def log_expr(self, value: Any, expr_text: str, call_site: CallSite) -> None:
        """Record that ``expr_text`` evaluated to ``value`` at ``call_site``."""
        self._write_log_line(call_site, self._formatter.expr(value, expr_text))

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _check_poisoned(self) -> None:
        if self._poisoned:
            raise PoisonedStateError(
                "logger was interrupted during a previous write; "
                "create a new Logger"
            )

    def _decide_header(self, now: datetime, call_site: CallSite) -> Optional[str]:
        """Return a header line for ``call_site`` if one is needed, else None.

        Must be called with ``self._lock`` held.
        """
        if self._prev is not None:
            prev_time, prev_site = self._prev
            if (
                now - prev_time < self._header_interval
                and prev_site.same_scope(call_site)
            ):
                return None
        return self._formatter.header(now, call_site)

    def _write_log_line(self, call_site: CallSite, log_line: str) -> None:
        """Write ``log_line`` to the sink, prefixed by a header if needed.

        The body is formatted by the caller before the lock is taken, so a
        failing ``repr()`` never reaches this point and leaves no trace.

        Raises:
            SinkWriteError: If the sink rejects the write. State is unchanged.
            PoisonedStateError: If a previous call was interrupted mid-update.
        """
        with self._lock:
            self._check_poisoned()
            now = self._clock()
            header = self._decide_header(now, call_site)
            if header is not None:
                text = f"{header}\n{log_line}\n"
            else:
                text = f"{log_line}\n"

            try:
                try:
                    self._sink.write(text)
                    flush = getattr(self._sink, "flush", None)
                    if flush is not None:
                        flush()
                except Exception as exc:
                    # OSError, ValueError on a closed file, TypeError on a
                    # bytes sink: _prev is untouched, so the logger stays usable.
                    raise SinkWriteError(
                        f"unable to write to log sink {self._sink!r}"
                    ) from exc
                self._prev = (now, call_site)
            except Exception:
                raise
            except BaseException:
                # KeyboardInterrupt and friends between write and update: the
                # sink and _prev may disagree from here on.
                self._poisoned = True
                logger.error(
                    "qtrace logger poisoned while writing at %r", call_site
                )
                raise
