"""
Tests for the Logger class.
"""

import collections
import logging
from io import StringIO

import pytest

from pipepair.log import LogConfig, Logger, LoggerFactory


def _extra(record):
    return getattr(record, "__pipepair__extra")


@pytest.mark.unit
class TestExtraFields:
    """Test structured extras on records."""

    def test_extra_kept_off_record_attributes(self, root_lg, collector):
        """Test extras live in __pipepair__extra, not on the record itself."""
        root_lg.info("sent", extra={"value": 3})
        record = collector.records[-1]
        assert _extra(record) == {"value": 3}
        assert not hasattr(record, "value")

    def test_reserved_names_allowed(self, root_lg, collector):
        """Test extras may reuse LogRecord attribute names."""
        root_lg.info("x", extra={"name": "n", "message": "m"})
        assert _extra(collector.records[-1]) == {"name": "n", "message": "m"}

    def test_prepopulated_extra_merged(self):
        """Test logger-wide extras are merged with per-call extras."""
        lg = Logger("test_pre", LogConfig(level=logging.DEBUG), extra={"pair": 1})
        record = lg.makeRecord("test_pre", logging.INFO, "f", 1, "m", (), None, extra={"v": 2})
        assert _extra(record) == {"pair": 1, "v": 2}

    def test_ordered_dict_preserved(self):
        """Test OrderedDict extras stay ordered."""
        lg = Logger("test_ord", LogConfig(level=logging.DEBUG))
        extra = collections.OrderedDict([("z", 1), ("a", 2)])
        record = lg.makeRecord("test_ord", logging.INFO, "f", 1, "m", (), None, extra=extra)
        assert isinstance(_extra(record), collections.OrderedDict)
        assert list(_extra(record)) == ["z", "a"]


@pytest.mark.unit
class TestLevels:
    """Test level handling."""

    def test_trace(self):
        """Test trace() logs below DEBUG when enabled."""
        stream = StringIO()
        lg = LoggerFactory.create_root(
            LogConfig.from_params("trace", colors=False), stream=stream
        )
        lg.trace("fine detail")
        assert "[T] fine detail" in stream.getvalue()

    def test_trace_filtered_at_debug(self, root_lg, collector):
        """Test trace() is dropped at DEBUG level."""
        root_lg.trace("fine detail")
        assert "fine detail" not in collector.messages()

    def test_disabled_logs_nothing(self):
        """Test a disabled logger emits no records."""
        stream = StringIO()
        lg = LoggerFactory.create(
            "test_disabled", LogConfig.from_params(False, colors=False), stream=stream
        )
        lg.error("not shown")
        assert lg.disabled
        assert stream.getvalue() == ""

    def test_disabled_setter(self, root_lg, collector):
        """Test logging can be switched off at runtime."""
        root_lg.disabled = True
        root_lg.info("hidden")
        root_lg.disabled = False
        root_lg.info("shown")
        assert collector.messages() == ["shown"]


@pytest.mark.unit
class TestFormatErrors:
    """Test errors while building a record are reported, not raised."""

    def test_reported_to_stderr(self, capsys):
        """Test a record that cannot be built writes a diagnostic to stderr."""
        lg = Logger("test_fmt", LogConfig(level=logging.DEBUG))
        lg.info("value", extra=[1])  # type: ignore[arg-type]
        err = capsys.readouterr().err
        assert err.startswith("LOG_FORMAT_ERROR [test_fmt]: TypeError")

    def test_location_trace_attached(self):
        """Test the caller trace is attached when location is enabled."""
        lg = Logger("test_loc", LogConfig(level=logging.DEBUG, location=2))
        records = []
        handler = logging.Handler()
        handler.emit = records.append  # type: ignore[method-assign]
        lg.addHandler(handler)
        lg.info("here")
        assert getattr(records[0], "__pipepair__pathnames")[0].endswith("test_logger.py")
