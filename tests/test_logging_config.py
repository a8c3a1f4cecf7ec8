"""Tests for structlog configuration."""

import json
import logging
from unittest.mock import patch

import structlog

from svckit.log import LogOptions
from svckit.logging_config import configure_logging


def read_lines(path):
    return [line for line in path.read_text().splitlines() if line]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output_to_file(self, tmp_path):
        """Test that JSON events are written to the configured file."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", output_paths=[str(out)], error_output_paths=[]))

        structlog.get_logger("test").info("user_created", user_id=42)

        lines = read_lines(out)
        assert len(lines) == 1
        event = json.loads(lines[0])
        assert event["event"] == "user_created"
        assert event["user_id"] == 42
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filtering(self, tmp_path):
        """Test that events below the level are dropped."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", level="warning", output_paths=[str(out)]))

        logger = structlog.get_logger("test")
        logger.info("dropped")
        logger.warning("kept")

        events = [json.loads(line)["event"] for line in read_lines(out)]
        assert events == ["kept"]
        assert logging.root.level == logging.WARNING

    def test_caller_information(self, tmp_path):
        """Test that caller details are added unless disabled."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", output_paths=[str(out)]))
        structlog.get_logger("test").info("with_caller")

        event = json.loads(read_lines(out)[0])
        assert event["func_name"] == "test_caller_information"
        assert "lineno" in event

    def test_disable_caller(self, tmp_path):
        """Test that disable_caller drops caller details."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", disable_caller=True, output_paths=[str(out)]))
        structlog.get_logger("test").info("no_caller")

        event = json.loads(read_lines(out)[0])
        assert "func_name" not in event

    def test_logger_name(self, tmp_path):
        """Test that the configured name is attached to events."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", name="orders", output_paths=[str(out)]))
        structlog.get_logger("test").info("named")

        assert json.loads(read_lines(out)[0])["logger"] == "orders"

    def test_error_output_paths(self, tmp_path):
        """Test that error events are copied to the error outputs."""
        out = tmp_path / "app.log"
        err = tmp_path / "error.log"
        configure_logging(
            LogOptions(format="json", output_paths=[str(out)], error_output_paths=[str(err)])
        )

        logger = structlog.get_logger("test")
        logger.info("fine")
        logger.error("broken")

        assert [json.loads(line)["event"] for line in read_lines(out)] == ["fine", "broken"]
        assert [json.loads(line)["event"] for line in read_lines(err)] == ["broken"]

    def test_exception_rendered(self, tmp_path):
        """Test that tracebacks are rendered into JSON events."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", output_paths=[str(out)]))

        try:
            raise ValueError("boom")
        except ValueError:
            structlog.get_logger("test").exception("failed")

        event = json.loads(read_lines(out)[0])
        assert "ValueError: boom" in event["exception"]

    def test_disable_stacktrace(self, tmp_path):
        """Test that disable_stacktrace drops tracebacks."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", disable_stacktrace=True, output_paths=[str(out)]))

        try:
            raise ValueError("boom")
        except ValueError:
            structlog.get_logger("test").exception("failed")

        event = json.loads(read_lines(out)[0])
        assert "exception" not in event

    def test_development_adds_stack_to_errors(self, tmp_path):
        """Test that development mode attaches stacks to error events."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="json", development=True, output_paths=[str(out)]))

        structlog.get_logger("test").error("failed")

        assert "stack" in json.loads(read_lines(out)[0])

    def test_console_output(self, tmp_path):
        """Test that console format writes readable lines."""
        out = tmp_path / "app.log"
        configure_logging(LogOptions(format="console", output_paths=[str(out)]))

        structlog.get_logger("test").info("console_event", key="value")

        line = read_lines(out)[0]
        assert "console_event" in line
        assert "key=value" in line

    @patch("svckit.logging_config.get_settings")
    def test_defaults_from_settings(self, mock_get_settings):
        """Test that settings supply the options when none are given."""
        mock_get_settings.return_value.log = LogOptions(level="error", output_paths=["stdout"])

        configure_logging()

        assert logging.root.level == logging.ERROR
        mock_get_settings.assert_called_once()
