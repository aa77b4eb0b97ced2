"""Unit tests for the log formatters."""

import logging
import sys

import pytest

from prewarm_logging.formatters import ConsoleFormatter, LogfmtFormatter, render_pairs


def make_record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="prewarm.test",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRenderPairs:
    """Tests for key=value rendering."""

    def test_plain_values(self):
        assert render_pairs([("port", 19876), ("file", "manage.py")]) == "port=19876 file=manage.py"

    def test_quotes_spaces(self):
        assert render_pairs([("msg", 'say "hi" now')]) == 'msg="say \\"hi\\" now"'

    def test_booleans_lowercase(self):
        assert render_pairs([("ready", True), ("indexing", False)]) == "ready=true indexing=false"


class TestLogfmtFormatter:
    """Tests for LogfmtFormatter."""

    def test_format(self):
        """Test level, component, message and context are rendered."""
        line = LogfmtFormatter().format(make_record("Server ready", port=19876))

        assert line.startswith("level=INFO ts=")
        assert 'component=prewarm.test msg="Server ready" port=19876' in line

    def test_exception(self):
        """Test tracebacks are kept on one line."""
        try:
            raise ValueError("bad bundle")
        except ValueError:
            record = make_record("Patch failed", level=logging.ERROR)
            record.exc_info = sys.exc_info()

        line = LogfmtFormatter().format(record)

        assert "\n" not in line
        assert "ValueError: bad bundle" in line


class TestConsoleFormatter:
    """Tests for ConsoleFormatter."""

    def test_info(self):
        """Test info lines carry only a timestamp prefix."""
        line = ConsoleFormatter().format(make_record("Waiting for server"))

        assert line.endswith("] Waiting for server")
        assert line.startswith("[")

    @pytest.mark.parametrize("level,name", [
        (logging.WARNING, "WARNING"),
        (logging.ERROR, "ERROR"),
    ])
    def test_level_prefix(self, level, name):
        """Test warnings and errors name their level."""
        line = ConsoleFormatter().format(make_record("Patch pattern not found", level=level))

        assert f"] {name}: Patch pattern not found" in line

    def test_context(self):
        """Test extra context is appended."""
        line = ConsoleFormatter().format(make_record("Installing extensions", count=2))

        assert line.endswith("Installing extensions count=2")
