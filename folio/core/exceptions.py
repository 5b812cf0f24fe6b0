#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Folio project.

Validators never raise for invalid content: they return typed failures.
These exceptions are for the cases where a caller has to stop: content
that cannot be loaded, a submission that cannot be delivered, a broken
configuration file, or a lookup for content that does not exist.

Each class carries the metadata the error registry needs to classify it
(`error_type`, `default_severity`, `retryable`).

Exception Hierarchy:
    Exception (built-in)
    └── FolioError - Base for all project errors
        ├── ValidationError - Data validation failures
        │   └── ContentValidationError - Field-level content failures
        ├── ContentNotFoundError - Referenced content does not exist
        ├── ContentLoadError - Content files that cannot be read/parsed
        ├── FormSubmissionError - Contact form pipeline failures
        ├── ExternalServiceError - Downstream delivery adapter failures
        └── ConfigError - Invalid configuration files

Usage:
    from folio.core.exceptions import ContentNotFoundError

    try:
        article = aggregator.get_article(slug)
    except ContentNotFoundError as e:
        registry.handle_exception(e, ErrorContext(operation="blog_article"))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional


class FolioError(Exception):
    """
    Base exception for all Folio errors.

    Attributes:
        error_type: Registry category (validation, content, form, external, system)
        default_severity: Severity used when the error is recorded
        retryable: Whether the caller may retry the operation
    """

    error_type = "system"
    default_severity = "high"
    retryable = False

    def __init__(self, message: str, severity: Optional[str] = None) -> None:
        super().__init__(message)
        self.severity = severity or self.default_severity


class ValidationError(FolioError):
    """
    Exception for data validation failures.

    Raised when a caller asks for validated content and gets invalid input
    instead (e.g. `require_valid()` on a schema failure).

    Examples:
        >>> raise ValidationError("Invalid date format: expected ISO-8601")
        >>> raise ValidationError("Missing required field: 'title'")
    """

    error_type = "validation"
    default_severity = "medium"


class ContentValidationError(ValidationError):
    """
    Exception carrying field-level validation details.

    Attributes:
        details: List of {field, message, code} dictionaries
        context: Optional operation context (content type, slug, ...)

    Examples:
        >>> raise ContentValidationError(
        ...     "Invalid blog article data",
        ...     [{"field": "slug", "message": "Invalid slug format", "code": "invalid_format"}],
        ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
        severity: Optional[str] = None,
    ) -> None:
        super().__init__(message, severity)
        self.details = details or []
        self.context = context or {}


class ContentNotFoundError(FolioError):
    """
    Exception for lookups of content that does not exist.

    Examples:
        >>> raise ContentNotFoundError("Blog article 'missing-post' not found")
    """

    error_type = "content"
    default_severity = "low"


class ContentLoadError(FolioError):
    """
    Exception for content files that cannot be read or parsed.

    Raised by the content loader when the content directory itself is
    missing; individual unreadable files are collected, not raised.

    Examples:
        >>> raise ContentLoadError("Content directory not found: ./content")
    """

    error_type = "content"
    default_severity = "high"


class FormSubmissionError(FolioError):
    """
    Exception for contact form pipeline failures.

    Retryable unless the submission was flagged as automated or spam.

    Examples:
        >>> raise FormSubmissionError("Rate limit exceeded", retryable=True)
        >>> raise FormSubmissionError("Bot detection triggered", retryable=False)
    """

    error_type = "form"
    default_severity = "medium"

    def __init__(
        self,
        message: str,
        severity: Optional[str] = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(message, severity)
        self.retryable = retryable


class ExternalServiceError(FolioError):
    """
    Exception for failures of a downstream collaborator (e.g. e-mail delivery).

    Attributes:
        status_code: HTTP status returned by the service, when known

    Examples:
        >>> raise ExternalServiceError("Delivery adapter unavailable", status_code=503)
    """

    error_type = "external"
    default_severity = "high"
    retryable = True

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        severity: Optional[str] = None,
    ) -> None:
        super().__init__(message, severity)
        self.status_code = status_code


class ConfigError(FolioError):
    """
    Exception for invalid configuration files.

    Examples:
        >>> raise ConfigError("Unknown config section: 'readnig'")
    """

    error_type = "system"
    default_severity = "high"
