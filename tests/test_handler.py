"""test_handler.py - Tests for QHandler, the stdlib logging bridge.

Covers:
    - Records are written as literal lines of the formatted message
    - The call site comes from the record (path, logger name + function, line)
    - Records from one function share a header, like q() calls
    - Without an explicit Logger, the shared one is used
    - Records from qtrace's own loggers are filtered out
    - Sink failures go through Handler.handleError instead of propagating
"""

import io
import logging

import pytest

import qtrace
from qtrace.callsite import CallSite
from qtrace.handler import QHandler
from qtrace.logger import Logger


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_record(
    msg: str,
    level: int = logging.INFO,
    args=(),
    name: str = "app.jobs",
    func: str = "run",
    lineno: int = 12,
) -> logging.LogRecord:
    """Create a minimal LogRecord for testing."""
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="/srv/app/jobs.py",
        lineno=lineno,
        msg=msg,
        args=args,
        exc_info=None,
        func=func,
    )


class BrokenSink:
    def write(self, text):
        raise OSError("disk full")


# ---------------------------------------------------------------------------
# emit()
# ---------------------------------------------------------------------------


class TestEmit:
    def setup_method(self):
        self.sink = io.StringIO()
        self.handler = QHandler(Logger(self.sink))

    def test_emit_writes_literal_of_message(self):
        self.handler.handle(_make_record("fetched %d records", args=(42,)))
        assert self.sink.getvalue().splitlines()[-1] == "> 'fetched 42 records'"

    def test_emit_header_uses_record_call_site(self):
        self.handler.handle(_make_record("job started"))
        header = self.sink.getvalue().splitlines()[0]
        assert header.endswith(" /srv/app/jobs.py app.jobs.run:12]")

    def test_records_from_same_function_share_header(self):
        self.handler.handle(_make_record("one", lineno=12))
        self.handler.handle(_make_record("two", lineno=13))
        self.handler.handle(_make_record("three", func="cleanup", lineno=40))
        lines = self.sink.getvalue().splitlines()
        assert len(lines) == 5
        assert lines[1:3] == ["> 'one'", "> 'two'"]
        assert lines[3].endswith(" app.jobs.cleanup:40]")

    def test_qtrace_records_are_filtered(self):
        self.handler.handle(_make_record("internal", name="qtrace.logger"))
        self.handler.handle(_make_record("internal", name="qtrace"))
        assert self.sink.getvalue() == ""

    @pytest.mark.parametrize("name", ["qtrace_demo", "qtracer", "app.qtrace"])
    def test_similarly_named_loggers_are_not_filtered(self, name):
        self.handler.handle(_make_record("kept", name=name))
        assert self.sink.getvalue().splitlines()[-1] == "> 'kept'"

    def test_sink_failure_is_handled(self, monkeypatch):
        handler = QHandler(Logger(BrokenSink()))
        handled = []
        monkeypatch.setattr(handler, "handleError", handled.append)
        record = _make_record("lost")
        handler.handle(record)
        assert handled == [record]


# ---------------------------------------------------------------------------
# call_site()
# ---------------------------------------------------------------------------


class TestCallSite:
    def test_call_site_from_record(self):
        site = QHandler.call_site(_make_record("x", name="svc", func="main", lineno=7))
        assert site == CallSite("/srv/app/jobs.py", "svc.main", 7)


# ---------------------------------------------------------------------------
# Integration with logging.getLogger()
# ---------------------------------------------------------------------------


class TestIntegration:
    def setup_method(self):
        self.sink = io.StringIO()
        self._previous = qtrace.install(Logger(self.sink))
        self.logger = logging.getLogger("qhandler_integration_test")
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()
        self.logger.propagate = False
        self.handler = QHandler()
        self.logger.addHandler(self.handler)

    def teardown_method(self):
        self.logger.removeHandler(self.handler)
        qtrace.install(self._previous)

    def test_default_handler_writes_to_shared_logger(self):
        self.logger.info("job started")
        lines = self.sink.getvalue().splitlines()
        assert lines[-1] == "> 'job started'"
        assert "qhandler_integration_test.test_default_handler_writes_to_shared_logger:" in lines[0]

    def test_handler_level_filters_records(self):
        self.handler.setLevel(logging.WARNING)
        self.logger.info("quiet")
        self.logger.warning("loud")
        assert self.sink.getvalue().splitlines()[-1] == "> 'loud'"
        assert "quiet" not in self.sink.getvalue()

    def test_handler_and_q_interleave_in_one_stream(self):
        qtrace.q("from q")
        self.logger.info("from logging")
        body = [l for l in self.sink.getvalue().splitlines() if not l.startswith("[")]
        assert body == ["> 'from q'", "> 'from logging'"]


@pytest.mark.parametrize("level", [logging.DEBUG, logging.ERROR])
def test_emit_ignores_level_for_formatting(level):
    sink = io.StringIO()
    QHandler(Logger(sink)).handle(_make_record("msg", level=level))
    assert sink.getvalue().splitlines()[-1] == "> 'msg'"
