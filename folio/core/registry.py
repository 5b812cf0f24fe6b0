#!/usr/bin/env python3
"""
registry.py
-----------
In-memory registries of recent application errors and log records.

Both registries are bounded ring buffers (newest first) meant for
diagnostics: an admin endpoint or the CLI can ask "what went wrong in the
last hour?" without reading log files. They are plain instances; callers
that want process-wide state create one and pass it around.

Components:
    - ErrorContext / ApplicationError: Structured error records
    - ErrorRegistry: Records errors, maps exceptions, notifies listeners
    - LogRegistry: Records log entries with level/time/text filtering
    - RegistryHandler: logging.Handler feeding a LogRegistry
    - ErrorFormatter: Renders errors for users, APIs and developers

Usage:
    errors = ErrorRegistry()
    try:
        deliver(submission)
    except ExternalServiceError as e:
        record = errors.handle_exception(e, ErrorContext(operation="contact"))
        payload = ErrorFormatter.format_api_error(record)

Neither registry is thread-safe; multi-threaded hosts must serialize
access.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import traceback
import uuid
from collections import deque
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional, Union

# --- Local imports ---
from folio.configs import REGISTRY
from folio.core.exceptions import ContentValidationError, ExternalServiceError, FolioError
from folio.models.enums import ErrorType, Severity
from folio.utils.dates import parse_date, to_iso_string

logger = logging.getLogger(__name__)

ErrorListener = Callable[["ApplicationError"], None]
Clock = Callable[[], datetime]

LOG_LEVELS = ("debug", "info", "warning", "error")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id(prefix: str, now: datetime) -> str:
    return f"{prefix}_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


def _since(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid 'since' timestamp: {value!r}")
    return parsed


# ----- Records -----


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened. `timestamp` is stamped when recorded."""

    operation: str
    timestamp: Optional[str] = None
    user_agent: Optional[str] = None
    path: Optional[str] = None
    additional: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"operation": self.operation, "timestamp": self.timestamp}
        if self.user_agent:
            data["userAgent"] = self.user_agent
        if self.path:
            data["path"] = self.path
        if self.additional:
            data["additional"] = self.additional
        return data


@dataclass(frozen=True)
class ApplicationError:
    id: str
    type: ErrorType
    severity: Severity
    message: str
    context: ErrorContext
    details: List[Dict[str, Any]] = field(default_factory=list)
    stack_trace: Optional[str] = None
    retryable: bool = False

    @property
    def recorded_at(self) -> Optional[datetime]:
        return parse_date(self.context.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "details": self.details,
            "context": self.context.to_dict(),
            "stackTrace": self.stack_trace,
            "retryable": self.retryable,
        }


@dataclass(frozen=True)
class LogEntry:
    id: str
    level: str
    message: str
    timestamp: str
    data: Any = None
    context: Dict[str, Any] = field(default_factory=dict)

    def matches_text(self, term: str) -> bool:
        needle = term.casefold()
        if needle in self.message.casefold():
            return True
        if self.data is None:
            return False
        return needle in json.dumps(self.data, default=str).casefold()


# ----- Error registry -----


class ErrorRegistry:
    """
    Bounded, newest-first store of ApplicationErrors.

    Listeners run synchronously after each record; a listener that raises
    is logged and skipped, the error is still recorded.
    """

    def __init__(self, max_errors: int = REGISTRY.max_errors, clock: Optional[Clock] = None):
        self.max_errors = max_errors
        self.clock = clock or _utcnow
        self._errors: Deque[ApplicationError] = deque(maxlen=max_errors)
        self._listeners: List[ErrorListener] = []

    def __len__(self) -> int:
        return len(self._errors)

    def create_error(
        self,
        error_type: Union[ErrorType, str],
        message: str,
        context: ErrorContext,
        severity: Union[Severity, str] = Severity.MEDIUM,
        details: Optional[List[Dict[str, Any]]] = None,
        stack_trace: Optional[str] = None,
        retryable: bool = False,
    ) -> ApplicationError:
        """
        Build, record and return an ApplicationError.

        Raises:
            ValueError: On an unknown error type or severity
        """
        now = self.clock()
        error = ApplicationError(
            id=_new_id("err", now),
            type=ErrorType(error_type),
            severity=Severity(severity),
            message=message,
            context=replace(context, timestamp=to_iso_string(now)),
            details=list(details or []),
            stack_trace=stack_trace,
            retryable=retryable,
        )
        self._record(error)
        return error

    def handle_exception(
        self, exc: BaseException, context: Optional[ErrorContext] = None
    ) -> ApplicationError:
        """
        Record an exception, classified by the Folio exception hierarchy.

        FolioErrors keep their type, severity and retryability; anything
        else is recorded as a high-severity, non-retryable system error.
        """
        context = context or ErrorContext(operation="unknown")
        stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        if not isinstance(exc, FolioError):
            return self.create_error(
                ErrorType.SYSTEM,
                str(exc) or type(exc).__name__,
                context,
                severity=Severity.HIGH,
                stack_trace=stack_trace,
                retryable=False,
            )

        details: List[Dict[str, Any]] = []
        if isinstance(exc, ContentValidationError):
            details = list(exc.details)
            if exc.context:
                context = replace(context, additional={**exc.context, **context.additional})
        elif isinstance(exc, ExternalServiceError) and exc.status_code:
            details = [
                {
                    "field": "statusCode",
                    "message": f"HTTP {exc.status_code}",
                    "code": "HTTP_ERROR",
                    "value": exc.status_code,
                }
            ]

        return self.create_error(
            exc.error_type,
            str(exc),
            context,
            severity=exc.severity,
            details=details,
            stack_trace=stack_trace,
            retryable=exc.retryable,
        )

    def _record(self, error: ApplicationError) -> None:
        self._errors.appendleft(error)
        for listener in list(self._listeners):
            try:
                listener(error)
            except Exception:
                logger.exception("Error listener %r failed for %s", listener, error.id)

    def get_errors(
        self,
        error_type: Optional[Union[ErrorType, str]] = None,
        severity: Optional[Union[Severity, str]] = None,
        since: Optional[Union[str, datetime]] = None,
        limit: Optional[int] = None,
    ) -> List[ApplicationError]:
        """Recorded errors, newest first, narrowed by the given filters."""
        since_dt = _since(since)
        errors = list(self._errors)
        if error_type:
            errors = [e for e in errors if e.type == ErrorType(error_type)]
        if severity:
            errors = [e for e in errors if e.severity == Severity(severity)]
        if since_dt:
            errors = [e for e in errors if e.recorded_at and e.recorded_at >= since_dt]
        if limit:
            errors = errors[:limit]
        return errors

    def get_stats(self, since: Optional[Union[str, datetime]] = None) -> Dict[str, Any]:
        """Totals by type and severity plus the ten most recent errors."""
        errors = self.get_errors(since=since)
        by_type: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        for error in errors:
            by_type[error.type.value] = by_type.get(error.type.value, 0) + 1
            by_severity[error.severity.value] = by_severity.get(error.severity.value, 0) + 1
        return {
            "total": len(errors),
            "by_type": by_type,
            "by_severity": by_severity,
            "recent_errors": errors[:10],
        }

    def add_listener(self, listener: ErrorListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ErrorListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def clear(self) -> None:
        self._errors.clear()


# ----- Log registry -----


class LogRegistry:
    """Bounded, newest-first store of log entries."""

    def __init__(self, max_logs: int = REGISTRY.max_logs, clock: Optional[Clock] = None):
        self.max_logs = max_logs
        self.clock = clock or _utcnow
        self._logs: Deque[LogEntry] = deque(maxlen=max_logs)

    def __len__(self) -> int:
        return len(self._logs)

    def log(
        self,
        level: str,
        message: str,
        data: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> LogEntry:
        """
        Record one entry.

        Raises:
            ValueError: If level is not debug, info, warning or error
        """
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{level}'; expected one of: {', '.join(LOG_LEVELS)}")
        now = self.clock()
        entry = LogEntry(
            id=_new_id("log", now),
            level=level,
            message=message,
            timestamp=to_iso_string(now),
            data=data,
            context=dict(context or {}),
        )
        self._logs.appendleft(entry)
        return entry

    def debug(self, message: str, data: Any = None, context: Optional[Dict[str, Any]] = None) -> LogEntry:
        return self.log("debug", message, data, context)

    def info(self, message: str, data: Any = None, context: Optional[Dict[str, Any]] = None) -> LogEntry:
        return self.log("info", message, data, context)

    def warning(self, message: str, data: Any = None, context: Optional[Dict[str, Any]] = None) -> LogEntry:
        return self.log("warning", message, data, context)

    def error(self, message: str, data: Any = None, context: Optional[Dict[str, Any]] = None) -> LogEntry:
        return self.log("error", message, data, context)

    def get_logs(
        self,
        level: Optional[str] = None,
        since: Optional[Union[str, datetime]] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[LogEntry]:
        since_dt = _since(since)
        logs = list(self._logs)
        if level:
            logs = [entry for entry in logs if entry.level == level]
        if since_dt:
            logs = [entry for entry in logs if parse_date(entry.timestamp) >= since_dt]
        if search:
            logs = [entry for entry in logs if entry.matches_text(search)]
        if limit:
            logs = logs[:limit]
        return logs

    def get_stats(self, since: Optional[Union[str, datetime]] = None) -> Dict[str, Any]:
        """Totals by level plus the twenty most recent entries."""
        logs = self.get_logs(since=since)
        by_level: Dict[str, int] = {}
        for entry in logs:
            by_level[entry.level] = by_level.get(entry.level, 0) + 1
        return {"total": len(logs), "by_level": by_level, "recent_logs": logs[:20]}

    def clear(self) -> None:
        self._logs.clear()


class RegistryHandler(logging.Handler):
    """
    Mirror standard logging records into a LogRegistry.

    CRITICAL records are stored as "error".
    """

    def __init__(self, registry: LogRegistry, component: Optional[str] = None, level: int = logging.NOTSET):
        super().__init__(level)
        self.registry = registry
        self.component = component

    @staticmethod
    def level_name(levelno: int) -> str:
        if levelno >= logging.ERROR:
            return "error"
        if levelno >= logging.WARNING:
            return "warning"
        if levelno >= logging.INFO:
            return "info"
        return "debug"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            context: Dict[str, Any] = {"logger": record.name}
            if self.component:
                context["component"] = self.component
            data = None
            if record.exc_info:
                data = {"exception": logging.Formatter().formatException(record.exc_info)}
            self.registry.log(self.level_name(record.levelno), record.getMessage(), data, context)
        except Exception:
            self.handleError(record)


# ----- Formatting -----


class ErrorFormatter:
    """Render ApplicationErrors and validation details for different readers."""

    USER_MESSAGES: Dict[ErrorType, Dict[str, Any]] = {
        ErrorType.VALIDATION: {
            "title": "Invalid Input",
            "message": "Please check your input and try again.",
            "actionable": True,
            "suggestions": [],
        },
        ErrorType.CONTENT: {
            "title": "Content Not Found",
            "message": "The requested content could not be found.",
            "actionable": False,
            "suggestions": ["Check the URL for typos", "Try navigating from the home page"],
        },
        ErrorType.EXTERNAL: {
            "title": "Service Unavailable",
            "message": "An external service is currently unavailable. Please try again later.",
            "actionable": True,
            "suggestions": ["Try again in a few minutes", "Check your internet connection"],
        },
        ErrorType.SYSTEM: {
            "title": "Unexpected Error",
            "message": "An unexpected error occurred. Please try again.",
            "actionable": True,
            "suggestions": ["Refresh the page", "Try again later"],
        },
    }

    @staticmethod
    def format_validation_errors(details: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Group field messages.

        Examples:
            >>> ErrorFormatter.format_validation_errors([
            ...     {"field": "email", "message": "Invalid email"},
            ...     {"field": "email", "message": "Too long"},
            ... ])["summary"]
            'Validation failed for 1 field(s)'
        """
        grouped: Dict[str, List[str]] = {}
        for detail in details:
            grouped.setdefault(detail["field"], []).append(detail["message"])
        return {
            "summary": f"Validation failed for {len(grouped)} field(s)",
            "details": [
                {"field": name, "message": ", ".join(messages)}
                for name, messages in grouped.items()
            ],
        }

    @staticmethod
    def format_api_error(error: ApplicationError) -> Dict[str, Any]:
        return {
            "error": {
                "id": error.id,
                "type": error.type.value,
                "message": error.message,
                "details": error.details or None,
                "retryable": error.retryable,
            }
        }

    @classmethod
    def format_user_error(cls, error: ApplicationError) -> Dict[str, Any]:
        """Title, message, actionability and suggestions safe to show a visitor."""
        if error.type == ErrorType.FORM:
            return {
                "title": "Form Submission Error",
                "message": (
                    "There was a problem submitting your form. Please try again."
                    if error.retryable
                    else "Unable to submit form. Please check your input."
                ),
                "actionable": error.retryable,
                "suggestions": [
                    "Please check your internet connection",
                    "Verify all required fields are filled",
                ],
            }

        rendered = dict(cls.USER_MESSAGES[error.type])
        if error.type == ErrorType.VALIDATION:
            rendered["suggestions"] = [
                f"{detail['field']}: {detail['message']}" for detail in error.details
            ]
        else:
            rendered["suggestions"] = list(rendered["suggestions"])
        return rendered

    @staticmethod
    def format_development_error(error: ApplicationError) -> str:
        """Multi-line dump for terminals and debug pages."""
        lines = [
            f"[{error.severity.value.upper()}] {error.type.value}: {error.message}",
            f"ID: {error.id}",
            f"Timestamp: {error.context.timestamp}",
            f"Operation: {error.context.operation}",
            f"Retryable: {error.retryable}",
        ]
        if error.details:
            lines.append("Validation Details:")
            lines.extend(f"  - {d['field']}: {d['message']}" for d in error.details)
        lines.append("Context:")
        lines.append(json.dumps(error.context.to_dict(), indent=2, default=str))
        if error.stack_trace:
            lines.append("Stack Trace:")
            lines.append(error.stack_trace.rstrip())
        return "\n".join(lines)
