"""Tests for the print-based logger."""

import io

import pytest

from wormnet.utils import get_logger, set_level


@pytest.fixture(autouse=True)
def restore_level():
    previous = set_level("INFO")
    yield
    set_level(previous)


class TestLogger:
    def test_header_and_message(self, capsys):
        get_logger("cleaning").info("Kept %d of %d edges", 3, 5)
        out = capsys.readouterr().out
        assert "wormnet:cleaning INFO" in out
        assert "Kept 3 of 5 edges" in out

    def test_compact(self, capsys):
        get_logger("metrics", compact=True).warning("No pairs")
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("wormnet:metrics WARNING")
        assert lines[0].endswith("No pairs")

    def test_debug_hidden_by_default(self, capsys):
        get_logger("graph").debug("details")
        assert capsys.readouterr().out == ""

    def test_set_level(self, capsys):
        log = get_logger("graph")
        assert set_level("warning") == "INFO"
        log.info("hidden")
        log.error("shown")
        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            set_level("VERBOSE")

    def test_extra_stream(self, capsys):
        stream = io.StringIO()
        get_logger("export", out=stream).info("%d records", 4)
        assert "4 records" in stream.getvalue()
        assert "4 records" in capsys.readouterr().out

    def test_literal_percent_without_args(self, capsys):
        get_logger("export").info("100% retained")
        assert "100% retained" in capsys.readouterr().out
