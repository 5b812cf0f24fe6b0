"""
Tests for logging_manager module.

Tests FolioLogger file output and registry mirroring, the CLI error
helpers, and the safe_logger / NullLogger pair that provide null-safe
logging throughout the codebase.
"""
from unittest.mock import MagicMock

import click
import pytest

from folio.core.exceptions import ContentLoadError
from folio.core.logging_manager import (
    FolioLogger,
    NullLogger,
    handle_cli_error,
    safe_logger,
)
from folio.core.registry import LogRegistry


@pytest.fixture
def folio_logger(tmp_path):
    return FolioLogger(tmp_path / "logs", "test")


class TestFolioLogger:
    """Tests for FolioLogger."""

    def test_creates_log_dir(self, tmp_path):
        """The log directory is created on demand."""
        log_dir = tmp_path / "nested" / "logs"
        FolioLogger(log_dir, "loader")
        assert log_dir.is_dir()

    def test_operation_written_to_component_log(self, folio_logger):
        """Operations land in <component>.log as JSON details."""
        folio_logger.log_operation("validate_content", {"records": 19})
        text = (folio_logger.log_dir / "test.log").read_text(encoding="utf-8")
        assert 'OPERATION - validate_content: {"records": 19}' in text

    def test_errors_go_to_error_log(self, folio_logger):
        """log_error writes the error and its context to errors.log."""
        folio_logger.log_error(ValueError("bad"), {"file": "post.md"})
        text = (folio_logger.log_dir / "errors.log").read_text(encoding="utf-8")
        assert "ERROR - ValueError: bad" in text
        assert "Context: file=post.md" in text

    def test_debug_and_info_not_in_error_log(self, folio_logger):
        folio_logger.log_debug("step", {"n": 1})
        folio_logger.log_info("done")
        assert (folio_logger.log_dir / "errors.log").read_text(encoding="utf-8") == ""
        text = (folio_logger.log_dir / "test.log").read_text(encoding="utf-8")
        assert 'DEBUG - step: {"n": 1}' in text
        assert "INFO - done" in text

    def test_registry_mirror(self, tmp_path):
        """With a registry, records are mirrored in memory."""
        registry = LogRegistry(max_logs=10)
        logger = FolioLogger(tmp_path / "logs", "mirror", registry=registry)
        logger.log_warning("Slow content directory", {"seconds": 3})
        logger.log_error(RuntimeError("boom"))

        levels = [entry.level for entry in registry.get_logs()]
        assert "warning" in levels
        assert "error" in levels
        assert registry.get_logs(level="warning")[0].context["component"] == "mirror"

    def test_reinit_does_not_duplicate_handlers(self, tmp_path):
        """Creating the same component twice keeps one set of handlers."""
        FolioLogger(tmp_path / "logs", "again")
        second = FolioLogger(tmp_path / "logs", "again")
        assert len(second.main_logger.handlers) == 2
        assert len(second.error_logger.handlers) == 1

    def test_log_cli_error(self, folio_logger):
        """CLI errors are logged and rendered as one short line."""
        message = folio_logger.log_cli_error(ContentLoadError("Content directory not found: x"))
        assert message == "❌ ContentLoadError: Content directory not found: x"
        text = (folio_logger.log_dir / "errors.log").read_text(encoding="utf-8")
        assert "Context: source=cli" in text

    def test_log_cli_error_with_traceback(self, folio_logger):
        try:
            raise ValueError("deep")
        except ValueError as exc:
            message = folio_logger.log_cli_error(exc, show_traceback=True)
        assert message.startswith("❌ ValueError: deep\n\n")
        assert "Traceback" in message


class TestHandleCliError:
    """Tests for handle_cli_error."""

    def test_logs_echoes_and_exits(self, capsys):
        logger = MagicMock(spec=FolioLogger)
        logger.log_cli_error.return_value = "❌ ContentLoadError: missing"
        ctx = click.Context(click.Command("validate"), obj={"logger": logger, "verbose": False})

        with pytest.raises(SystemExit) as excinfo:
            handle_cli_error(ctx, ContentLoadError("missing"), "validate_content", {"dir": "x"})

        assert excinfo.value.code == 1
        error, context = logger.log_cli_error.call_args[0]
        assert context == {"operation": "validate_content", "dir": "x"}
        assert "❌ ContentLoadError: missing" in capsys.readouterr().err

    def test_without_logger(self, capsys):
        """A missing logger falls back to the null logger."""
        ctx = click.Context(click.Command("validate"), obj={})
        with pytest.raises(SystemExit) as excinfo:
            handle_cli_error(ctx, ValueError("oops"), "validate", exit_code=2)
        assert excinfo.value.code == 2
        assert "❌ ValueError: oops" in capsys.readouterr().err


class TestNullLogger:
    """Tests for NullLogger class."""

    def test_methods_are_no_ops(self):
        """Every logging method accepts its arguments and does nothing."""
        logger = NullLogger()
        logger.log_operation("op", {"key": "value"})
        logger.log_error(ValueError("x"), {"context": "test"})
        logger.log_debug("debug", {"key": "value"})
        logger.log_info("info")
        logger.log_warning("warning", {"key": "value"})

    def test_log_cli_error_returns_formatted(self):
        result = NullLogger().log_cli_error(ValueError("test error"))
        assert result == "❌ ValueError: test error"


class TestSafeLogger:
    """Tests for safe_logger function."""

    def test_returns_logger_when_provided(self):
        mock_logger = MagicMock(spec=FolioLogger)
        assert safe_logger(mock_logger) is mock_logger

    def test_returns_null_logger_when_none(self):
        assert isinstance(safe_logger(None), NullLogger)

    def test_null_logger_is_singleton(self):
        assert safe_logger(None) is safe_logger(None)

    def test_delegates_calls(self):
        """Calls reach the wrapped logger unchanged."""
        mock_logger = MagicMock(spec=FolioLogger)
        details = {"file": "post.md", "line": 3}
        safe_logger(mock_logger).log_operation("lint", details)
        mock_logger.log_operation.assert_called_once_with("lint", details)

    def test_with_real_logger(self, folio_logger):
        assert safe_logger(folio_logger) is folio_logger
        safe_logger(folio_logger).log_info("test message")
