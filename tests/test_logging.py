"""
Tests for docmirror.logging.

Tests cover:
- JSON logs on stderr carrying the bound source path
- Quiet defaults when a library caller never configures logging
"""

import json

import structlog

from conftest import FakeChecker
from docmirror.generator import generate_for_path
from docmirror.logging import LogContext, configure_logging, ensure_configured, get_logger


def _events(text):
    return [json.loads(line) for line in text.splitlines() if line.strip()]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_events_go_to_stderr(self, capsys, make_tree, output_root):
        configure_logging(level="INFO", json_format=True)
        root = make_tree({"pkg/mod.src": ""})

        generate_for_path(FakeChecker(), root, output_root, source_suffix=".src")

        captured = capsys.readouterr()
        assert captured.out == ""
        events = _events(captured.err)
        assert [e["event"] for e in events] == [
            "doc_walk_started",
            "doc_written",
            "doc_walk_completed",
        ]
        written = events[1]
        assert written["source"] == "pkg/mod.src"
        assert written["module"] == "pkg.mod"
        assert written["level"] == "info"
        assert "timestamp" in written
        assert "source" not in events[2]

    def test_level_filters_debug(self, capsys):
        configure_logging(level="INFO", json_format=True)

        get_logger(__name__).debug("doc_record_built")

        assert capsys.readouterr().err == ""

    def test_log_context_unbinds_on_exit(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        logger = get_logger(__name__)

        with LogContext(source="a.py"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = _events(capsys.readouterr().err)
        assert inside["source"] == "a.py"
        assert "source" not in outside


class TestLibraryDefaults:
    """Tests for logging when configure_logging was never called."""

    def test_generate_for_path_is_quiet(self, capsys, make_tree, output_root):
        root = make_tree({"mod.src": ""})

        generate_for_path(FakeChecker(), root, output_root, source_suffix=".src")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "doc_written" not in captured.err
        assert structlog.is_configured()

    def test_existing_configuration_kept(self, capsys):
        configure_logging(level="DEBUG", json_format=True)

        ensure_configured()
        get_logger(__name__).debug("still_debug")

        assert _events(capsys.readouterr().err)[0]["event"] == "still_debug"
