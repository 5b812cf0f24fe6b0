#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Centralized logging for Folio validation and aggregation runs.

Each component (validate, contact, loader, ...) gets a FolioLogger that
writes a rotating `<component>.log`, shares a rotating `errors.log` with
every other component, and echoes warnings to the console. An optional
LogRegistry receives the same records in memory so a running site can
expose recent log lines through its diagnostics endpoint.

Validators accept `logger=None`; `safe_logger()` turns that into a
NullLogger so call sites never branch on it.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

# --- Third party imports ---
import click

if TYPE_CHECKING:
    from folio.core.registry import LogRegistry


FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ERROR_LOG_NAME = "errors.log"


def _rotating_handler(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Handler:
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _fresh_logger(name: str, level: int) -> logging.Logger:
    """A non-propagating logger stripped of handlers from earlier instances."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    return logger


def _render(label: str, message: str, details: Optional[Dict[str, Any]]) -> str:
    if not details:
        return f"{label} - {message}"
    return f"{label} - {message}: {json.dumps(details, default=str)}"


class FolioLogger:
    """
    Structured logger for one Folio component.

    Attributes:
        log_dir: Directory holding the component log and errors.log
        component_name: Component identifier, used in logger names and file names
        main_logger: Everything from DEBUG up, plus the console at WARNING
        error_logger: ERROR records only, shared file across components
        registry: Optional in-memory mirror
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "folio",
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
        registry: Optional["LogRegistry"] = None,
    ) -> None:
        """
        Args:
            log_dir: Directory for log files (created if missing)
            component_name: e.g. 'validate', 'contact', 'loader'
            max_bytes: Size at which a log file rotates
            backup_count: Rotated files kept per log
            registry: In-memory registry that also receives every record
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.registry = registry

        self.log_dir.mkdir(parents=True, exist_ok=True)
        prefix = f"folio.{component_name}"
        self.main_logger = _fresh_logger(f"{prefix}.operations", logging.DEBUG)
        self.error_logger = _fresh_logger(f"{prefix}.errors", logging.ERROR)
        self._attach_handlers()

    def _attach_handlers(self) -> None:
        self.main_logger.addHandler(
            _rotating_handler(
                self.log_dir / f"{self.component_name}.log",
                logging.DEBUG,
                self.max_bytes,
                self.backup_count,
            )
        )
        self.error_logger.addHandler(
            _rotating_handler(
                self.log_dir / ERROR_LOG_NAME,
                logging.ERROR,
                self.max_bytes,
                self.backup_count,
            )
        )

        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        self.main_logger.addHandler(console)

        if self.registry is not None:
            from folio.core.registry import RegistryHandler

            mirror = RegistryHandler(self.registry, component=self.component_name)
            self.main_logger.addHandler(mirror)
            self.error_logger.addHandler(mirror)

    # --- Level methods ---

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Record a finished operation (validation run, aggregation, import)."""
        self.main_logger.info(f"OPERATION - {operation}: {json.dumps(details or {}, default=str)}")

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.debug(_render("DEBUG", message, details))

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.info(_render("INFO", message, details))

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.main_logger.warning(_render("WARNING", message, details))

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Write an exception to errors.log.

        The context becomes a `Context: k=v, ...` line. A traceback is
        appended when the call happens while the exception is being handled.
        """
        lines = [f"ERROR - {type(error).__name__}: {error}"]
        if context:
            lines.append("Context: " + ", ".join(f"{key}={value}" for key, value in context.items()))
        if sys.exc_info()[0] is not None:
            lines.append("Traceback:\n" + traceback.format_exc().rstrip())
        self.error_logger.error("\n".join(lines))

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log an error raised under a CLI command and return its console line.

        Examples:
            >>> logger.log_cli_error(ContentLoadError("Content directory not found"))
            '❌ ContentLoadError: Content directory not found'
        """
        self.log_error(error, context or {"source": "cli"})
        return format_cli_error(error, show_traceback)


def format_cli_error(error: Exception, show_traceback: bool = False) -> str:
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback:
        message += "\n\n" + traceback.format_exc()
    return message


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log a command failure, print one line to stderr and exit.

    The logger and verbose flag come from `ctx.obj`; with --verbose the
    traceback is printed as well.
    """
    obj = ctx.obj or {}
    context: Dict[str, Any] = {"operation": operation, **(additional_context or {})}
    message = safe_logger(obj.get("logger")).log_cli_error(
        error, context, show_traceback=obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


class NullLogger:
    """Accepts every FolioLogger call and drops it."""

    def _ignore(self, *args: Any, **kwargs: Any) -> None:
        return None

    log_operation = log_debug = log_info = log_warning = log_error = _ignore

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return format_cli_error(error, show_traceback)


_NULL_LOGGER = NullLogger()


def safe_logger(logger: Optional[FolioLogger]) -> FolioLogger:
    """The given logger, or the shared NullLogger for None."""
    return logger if logger is not None else _NULL_LOGGER  # type: ignore[return-value]
