"""qtrace/__init__.py - Public API for the qtrace package.

qtrace is a quick-and-dirty tracing aid. Drop ``q()`` anywhere in a program
to record that execution got there, or what a value was, in a compact log
stream. Consecutive calls from the same function share one context header
until the function changes or the header interval (2 seconds by default)
elapses.

Quick start:
    from qtrace import q, trace

    q()                          # execution reached here
    q(user)                      # log a value, returns it
    q(a + b, expr="a + b")       # log an expression with its text

    @trace
    def hello(name): ...         # log every call and its result

    # Follow the output from another terminal:
    #   tail -f /tmp/q

    # Send output somewhere else, or change the header interval
    import io, qtrace
    qtrace.configure(sink=io.StringIO(), header_interval=0.5)

Exported names:
    q:                   Log a marker, literal or expression at the caller.
    trace:               Decorator that logs each call and its return value.
    configure:           Install the shared Logger with a given sink/interval.
    get_logger:          Return the shared Logger, building the default one.
    set_header_interval: Change the shared Logger's header interval.
    Logger:              The thread-safe header-suppressing writer.
    Formatter:           Pure header/body line formatting.
    CallSite:            (file, function, line) identifying a log call.
    FileSink:            Lazily-opened append-mode file destination.
    QHandler:            logging.Handler routing records into qtrace.
"""

from .callsite import CallSite
from .core import configure, get_logger, install, set_header_interval
from .errors import (
    InvalidConfigurationError,
    PoisonedStateError,
    QTraceError,
    SinkWriteError,
)
from .fmt import Formatter
from .handler import QHandler
from .instrument import q, trace
from .logger import DEFAULT_HEADER_INTERVAL, Logger
from .sink import FileSink, default_path

__all__ = [
    "q",
    "trace",
    "configure",
    "get_logger",
    "install",
    "set_header_interval",
    "Logger",
    "Formatter",
    "CallSite",
    "FileSink",
    "default_path",
    "QHandler",
    "DEFAULT_HEADER_INTERVAL",
    "QTraceError",
    "SinkWriteError",
    "PoisonedStateError",
    "InvalidConfigurationError",
]
__version__ = "0.1.0"
