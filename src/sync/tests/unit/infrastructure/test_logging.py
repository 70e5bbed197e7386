"""Unit tests for logging configuration."""

import logging

import structlog

from infrastructure.logging import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_output_without_tty(self, monkeypatch):
        """Production output is rendered as JSON."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setattr("sys.stdout.isatty", lambda: False)

        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_forced_color_uses_console_renderer(self, monkeypatch):
        """FORCE_COLOR switches to the development renderer."""
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_debug_enables_debug_level(self, monkeypatch):
        """debug=True lets debug events through."""
        monkeypatch.setenv("FORCE_COLOR", "1")

        configure_logging(debug=True)

        wrapper = structlog.get_config()["wrapper_class"]
        assert wrapper is structlog.make_filtering_bound_logger(logging.DEBUG)

