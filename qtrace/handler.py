"""handler.py - Route standard ``logging`` records into qtrace.

QHandler lets existing ``logging`` calls show up in the qtrace stream next to
``q()`` lines, with the same header semantics::

    import logging
    from qtrace import QHandler

    logging.getLogger().addHandler(QHandler())
    logging.getLogger("app").info("job started")

    # [20:05:32 app/jobs.py app.run:12]
    # > 'job started'

Records emitted by qtrace's own loggers are skipped, since writing them back
into the Logger that produced them would re-enter its lock.
"""

import logging
from typing import Optional

from .callsite import CallSite, relative_path
from .core import get_logger
from .logger import Logger


def _not_from_qtrace(record: logging.LogRecord) -> bool:
    """False for records from the ``qtrace`` logger or one of its children."""
    return not (record.name == "qtrace" or record.name.startswith("qtrace."))


class QHandler(logging.Handler):
    """A logging.Handler that writes each record as a qtrace literal line.

    Thread-safety:
        ``logging.Handler`` serialises ``emit()`` with its own lock, and the
        Logger serialises writes to the sink, so QHandler adds no locking of
        its own.

    Attributes:
        _logger (Logger | None): Target Logger. ``None`` means the shared
            one, looked up on every record so that a later ``configure()``
            is picked up.
    """

    def __init__(self, logger: Optional[Logger] = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._logger = logger
        self.addFilter(_not_from_qtrace)

    @property
    def target(self) -> Logger:
        return self._logger if self._logger is not None else get_logger()

    def emit(self, record: logging.LogRecord) -> None:
        """Write ``record``'s message as a literal line at the record's site."""
        try:
            self.target.log_literal(record.getMessage(), self.call_site(record))
        except Exception:
            self.handleError(record)

    @staticmethod
    def call_site(record: logging.LogRecord) -> CallSite:
        """Build the CallSite a record was logged from.

        The function path is the logger name followed by the function, e.g.
        ``"app.jobs.run"`` for ``logging.getLogger("app.jobs")`` inside
        ``run()``.
        """
        return CallSite(
            file_path=relative_path(record.pathname),
            function_path=f"{record.name}.{record.funcName}",
            line_number=record.lineno,
        )
