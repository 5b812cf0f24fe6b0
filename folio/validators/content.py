#!/usr/bin/env python3
"""
content.py
----------
Whole-tree content validation.

Runs every check Folio knows about over a loaded content directory and
collects the results into one report:

    1. Load errors (files that could not be read or parsed)
    2. Schema validation of every record
    3. Slug / key uniqueness per content type
    4. Markdown lint of article bodies
    5. Cross-reference validation over the records that passed 1–3

Usage:
    snapshot = load_content(CONTENT_DIR, logger)
    report = ContentValidator(logger=logger).validate_snapshot(snapshot)
    print(format_content_report(report))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

# --- Local imports ---
from folio.configs import DATE_RANGE, TIMELINE, DateRangeConfig, TimelineConfig
from folio.content.loader import CONTENT_DIRS, ContentSnapshot, RawRecord
from folio.content.transformation import validate_markdown
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.models import ContentGraph
from folio.validators.cross_reference import CrossReferenceValidator
from folio.validators.schema import validate_record

GRAPH_FIELDS: Dict[str, str] = {
    "persona": "personas",
    "skill": "skills",
    "blog_article": "blog_articles",
    "portfolio_collection": "portfolio_collections",
    "portfolio_item": "portfolio_items",
    "resume_entry": "resume_entries",
}

IDENTITY_FIELDS: Dict[str, str] = {
    "persona": "key",
    "skill": "key",
    "blog_article": "slug",
    "portfolio_collection": "key",
    "portfolio_item": "slug",
    "resume_entry": "slug",
}


def uniqueness_scope(content_type: str, item: Any) -> Optional[str]:
    """Portfolio item slugs only need to be unique within their collection."""
    if content_type == "portfolio_item":
        return item.collection
    return None


@dataclass
class ContentIssue:
    """Represents a content validation issue."""

    stage: str  # load, schema, uniqueness, markdown, reference
    severity: str  # error, warning
    message: str
    content_type: Optional[str] = None
    entity: Optional[str] = None
    source: Optional[str] = None
    field_name: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass
class ContentValidationReport:
    """Complete content validation report."""

    records_checked: int = 0
    records_valid: int = 0
    counts: Dict[str, int] = field(default_factory=dict)
    total_errors: int = 0
    total_warnings: int = 0
    issues: List[ContentIssue] = field(default_factory=list)
    graph: Optional[ContentGraph] = None

    def add_issue(self, issue: ContentIssue) -> None:
        """Add an issue to the report."""
        self.issues.append(issue)
        if issue.severity == "error":
            self.total_errors += 1
        elif issue.severity == "warning":
            self.total_warnings += 1

    @property
    def has_errors(self) -> bool:
        return self.total_errors > 0

    @property
    def has_warnings(self) -> bool:
        return self.total_warnings > 0

    @property
    def is_healthy(self) -> bool:
        """Healthy means no errors; warnings are allowed."""
        return not self.has_errors

    def issues_for(self, stage: str) -> List[ContentIssue]:
        return [issue for issue in self.issues if issue.stage == stage]


class ContentValidator:
    """Validates a ContentSnapshot end to end."""

    def __init__(
        self,
        logger: Optional[FolioLogger] = None,
        now: Optional[datetime] = None,
        timeline: TimelineConfig = TIMELINE,
        date_range: DateRangeConfig = DATE_RANGE,
        lint_markdown: bool = True,
        min_words: int = 100,
    ):
        """
        Initialize content validator.

        Args:
            logger: Optional logger instance
            now: Reference time for date checks (default: current time)
            timeline: Gap / overlap thresholds for resume checks
            date_range: Span and future limits for resume dates
            lint_markdown: Whether to lint article bodies
            min_words: Word count below which an article body gets a warning
        """
        self.logger = logger
        self.now = now
        self.timeline = timeline
        self.date_range = date_range
        self.lint_markdown = lint_markdown
        self.min_words = min_words

    def validate_snapshot(self, snapshot: ContentSnapshot) -> ContentValidationReport:
        """
        Validate every record in the snapshot.

        Returns:
            ContentValidationReport; `graph` holds the records that passed
            schema and uniqueness checks
        """
        log = safe_logger(self.logger)
        report = ContentValidationReport(counts=snapshot.counts())

        for error in snapshot.errors:
            report.add_issue(
                ContentIssue(
                    stage="load",
                    severity="error",
                    message=error.message,
                    source=str(error.path.relative_to(snapshot.root))
                    if error.path.is_relative_to(snapshot.root)
                    else str(error.path),
                )
            )

        graph_lists: Dict[str, List[Any]] = {name: [] for name in GRAPH_FIELDS.values()}
        for content_type in CONTENT_DIRS:
            valid = self._validate_records(content_type, snapshot.records[content_type], report)
            graph_lists[GRAPH_FIELDS[content_type]] = valid

        graph = ContentGraph(**graph_lists)
        report.graph = graph

        cross = CrossReferenceValidator(
            graph,
            logger=self.logger,
            now=self.now,
            timeline=self.timeline,
            date_range=self.date_range,
        ).validate_all()
        for message in cross.errors:
            report.add_issue(ContentIssue(stage="reference", severity="error", message=message))
        for message in cross.warnings:
            report.add_issue(ContentIssue(stage="reference", severity="warning", message=message))

        log.log_operation(
            "validate_content",
            {
                "records": report.records_checked,
                "valid": report.records_valid,
                "errors": report.total_errors,
                "warnings": report.total_warnings,
            },
        )
        return report

    def _validate_records(
        self,
        content_type: str,
        records: List[RawRecord],
        report: ContentValidationReport,
    ) -> List[Any]:
        """Schema-check, deduplicate and lint one content type's records."""
        identity = IDENTITY_FIELDS[content_type]
        seen: Dict[Tuple[Optional[str], str], str] = {}
        valid: List[Any] = []

        for record in records:
            report.records_checked += 1
            result = validate_record(content_type, record.data)
            entity = record.data.get(identity) if isinstance(record.data, dict) else None

            if not result.success:
                for error in result.errors:
                    report.add_issue(
                        ContentIssue(
                            stage="schema",
                            severity="error",
                            message=error.message,
                            content_type=content_type,
                            entity=entity if isinstance(entity, str) else None,
                            source=record.source,
                            field_name=error.field,
                        )
                    )
                continue

            item = result.data
            key = getattr(item, identity)
            scope = uniqueness_scope(content_type, item)
            if (scope, key) in seen:
                where = f" in collection '{scope}'" if scope else ""
                report.add_issue(
                    ContentIssue(
                        stage="uniqueness",
                        severity="error",
                        message=(
                            f"Duplicate {identity} '{key}'{where} "
                            f"(first defined in {seen[scope, key]})"
                        ),
                        content_type=content_type,
                        entity=key,
                        source=record.source,
                        field_name=identity,
                        suggestion=f"Rename one of the {content_type.replace('_', ' ')}s",
                    )
                )
                continue

            seen[scope, key] = record.source
            report.records_valid += 1
            valid.append(item)

            if self.lint_markdown and record.body is not None:
                self._lint_body(content_type, key, record, report)

        return valid

    def _lint_body(
        self,
        content_type: str,
        key: str,
        record: RawRecord,
        report: ContentValidationReport,
    ) -> None:
        lint = validate_markdown(record.body, min_words=self.min_words)
        for severity, messages in (("error", lint.errors), ("warning", lint.warnings)):
            for message in messages:
                report.add_issue(
                    ContentIssue(
                        stage="markdown",
                        severity=severity,
                        message=message,
                        content_type=content_type,
                        entity=key,
                        source=record.source,
                    )
                )


def format_content_report(report: ContentValidationReport) -> str:
    """
    Format content validation report as readable text.

    Args:
        report: Validation report to format

    Returns:
        Formatted report string
    """
    lines = []
    lines.append("\n" + "=" * 60)
    lines.append("CONTENT VALIDATION REPORT")
    lines.append("=" * 60)
    lines.append("")

    lines.append(f"Records Checked: {report.records_checked}")
    lines.append(f"✅ Valid Records: {report.records_valid}")
    for content_type, count in report.counts.items():
        if count:
            lines.append(f"   {content_type.replace('_', ' ')}: {count}")
    lines.append("")
    lines.append(f"Total Warnings: {report.total_warnings}")
    lines.append(f"Total Errors: {report.total_errors}")
    lines.append("")

    if report.is_healthy:
        lines.append("✅ ALL CONTENT VALID")
    else:
        lines.append("❌ CONTENT VALIDATION FAILED")
    lines.append("")

    if report.issues:
        by_source: Dict[str, List[ContentIssue]] = {}
        for issue in report.issues:
            by_source.setdefault(issue.source or "cross-references", []).append(issue)

        lines.append("ISSUES:")
        lines.append("")

        for source, issues in by_source.items():
            icon = "❌" if any(i.severity == "error" for i in issues) else "⚠️"
            lines.append(f"{icon} {source}")
            for issue in issues:
                severity_icon = "❌" if issue.severity == "error" else "⚠️"
                label = f"[{issue.field_name}] " if issue.field_name else ""
                lines.append(f"   {severity_icon} {label}{issue.message}")
                if issue.suggestion:
                    lines.append(f"      💡 {issue.suggestion}")
            lines.append("")

    lines.append("=" * 60)

    return "\n".join(lines)
