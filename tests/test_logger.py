"""Tests for logger.py — setup_logging() and JsonFormatter.

Covers:
- CLI mode logging (stderr handler, optional file handler)
- MCP mode logging (file only, never stdout)
- Level resolution: debug flag > LOG_LEVEL > settings level > mode default
- JSON formatter output
- mcp library logger silencing

Strategy: Mock logging.basicConfig to verify setup_logging passes correct args,
since pytest's log capture plugin interferes with actual basicConfig calls.
"""

import json
import logging
import sys
from unittest.mock import patch

from config_sync.logger import (
    DEFAULT_MCP_LOG_FILE,
    JsonFormatter,
    setup_logging,
)

# ---------------------------------------------------------------------------
# setup_logging tests
# ---------------------------------------------------------------------------


class TestSetupLogging:
    """Tests for setup_logging()."""

    @patch("config_sync.logger.logging.basicConfig")
    def test_cli_mode_logs_to_stderr(self, mock_basic):
        """CLI mode passes StreamHandler(stderr) to basicConfig."""
        setup_logging(mode="cli")

        mock_basic.assert_called_once()
        handlers = mock_basic.call_args[1]["handlers"]
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr

    @patch("config_sync.logger.logging.basicConfig")
    def test_mcp_mode_logs_to_file(self, mock_basic, tmp_path):
        """MCP mode passes filename to basicConfig."""
        log_file = str(tmp_path / "mcp.log")
        setup_logging(mode="mcp", log_file=log_file)

        kwargs = mock_basic.call_args[1]
        assert kwargs["filename"] == log_file
        assert "handlers" not in kwargs

    @patch("config_sync.logger.logging.basicConfig")
    def test_mcp_mode_default_log_file(self, mock_basic):
        setup_logging(mode="mcp")
        assert mock_basic.call_args[1]["filename"] == DEFAULT_MCP_LOG_FILE

    @patch("config_sync.logger.logging.basicConfig")
    def test_mcp_mode_log_file_env(self, mock_basic, monkeypatch, tmp_path):
        monkeypatch.setenv("LOG_FILE", str(tmp_path / "env.log"))
        setup_logging(mode="mcp")
        assert mock_basic.call_args[1]["filename"] == str(tmp_path / "env.log")

    @patch("config_sync.logger.logging.basicConfig")
    def test_debug_overrides_level(self, mock_basic, monkeypatch):
        """debug=True beats LOG_LEVEL."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(mode="cli", debug=True)
        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("config_sync.logger.logging.basicConfig")
    def test_env_log_level_beats_settings_level(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        setup_logging(mode="cli", level="DEBUG")
        assert mock_basic.call_args[1]["level"] == logging.ERROR

    @patch("config_sync.logger.logging.basicConfig")
    def test_settings_level_used(self, mock_basic):
        setup_logging(mode="cli", level="WARNING")
        assert mock_basic.call_args[1]["level"] == logging.WARNING

    @patch("config_sync.logger.logging.basicConfig")
    def test_default_levels(self, mock_basic):
        setup_logging(mode="cli")
        assert mock_basic.call_args[1]["level"] == logging.INFO
        setup_logging(mode="mcp")
        assert mock_basic.call_args[1]["level"] == logging.WARNING

    @patch("config_sync.logger.logging.basicConfig")
    def test_unknown_level_falls_back_to_info(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "CHATTY")
        setup_logging(mode="cli")
        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("config_sync.logger.logging.basicConfig")
    def test_cli_mode_with_log_file(self, mock_basic, tmp_path):
        """CLI mode with log_file creates both stderr and file handlers."""
        setup_logging(mode="cli", log_file=str(tmp_path / "cli.log"))

        handlers = mock_basic.call_args[1]["handlers"]
        file_handlers = [
            h for h in handlers if isinstance(h, logging.FileHandler)
        ]
        assert len(handlers) == 2
        assert len(file_handlers) == 1
        for h in file_handlers:
            h.close()

    @patch("config_sync.logger.logging.basicConfig")
    def test_json_format_uses_json_formatter(self, mock_basic):
        setup_logging(mode="cli", debug_format="json")

        handlers = mock_basic.call_args[1]["handlers"]
        assert isinstance(handlers[0].formatter, JsonFormatter)

    @patch("config_sync.logger.logging.basicConfig")
    def test_mcp_library_silenced(self, _mock_basic):
        """Non-DEBUG mode silences the mcp library logger."""
        setup_logging(mode="cli")
        assert logging.getLogger("mcp").level == logging.WARNING


# ---------------------------------------------------------------------------
# JsonFormatter tests
# ---------------------------------------------------------------------------


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, msg="Hello %s", args=("world",), exc_info=None):
        return logging.LogRecord(
            name="config_sync.sync.copier",
            level=logging.INFO,
            pathname="copier.py",
            lineno=1,
            msg=msg,
            args=args,
            exc_info=exc_info,
        )

    def test_basic_output(self):
        data = json.loads(
            JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S").format(self._record())
        )
        assert "ts" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "config_sync.sync.copier"
        assert data["msg"] == "Hello world"

    def test_includes_exception(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        output = JsonFormatter().format(
            self._record("Failed", (), exc_info)
        )
        data = json.loads(output)
        assert "ValueError" in data["exc"]
        assert "\n" not in output
