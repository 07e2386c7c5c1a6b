"""errors.py - Exception types raised by qtrace."""


class QTraceError(Exception):
    """Base class for every error raised by qtrace itself."""


class SinkWriteError(QTraceError):
    """Writing a log line to the sink failed.

    The original ``OSError``/``ValueError`` is chained as ``__cause__``.
    The Logger's session state is left untouched when this is raised.
    """


class PoisonedStateError(QTraceError):
    """The Logger was interrupted mid-update and its state can't be trusted."""


class InvalidConfigurationError(QTraceError, ValueError):
    """A configuration value was rejected, e.g. a negative header interval."""
