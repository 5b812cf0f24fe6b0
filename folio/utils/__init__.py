"""
Utilities package for Folio.

This package provides commonly-used utilities organized by domain:
- dates: ISO-8601 parsing, date ranges, durations, resume timelines
- slugify: Slug validation, normalization and heading anchors
- md: Frontmatter splitting and Markdown-to-prose reduction

Import commonly-used utilities directly from this package:
    from folio.utils import parse_date, calculate_duration, normalize_slug

Or import specific modules:
    from folio.utils import dates, md, slugify
"""

# Date and duration utilities
from .dates import (
    calculate_duration,
    calculate_total_experience,
    calculate_working_days,
    detect_gaps,
    detect_overlaps,
    format_date_range,
    format_duration,
    format_for_display,
    format_relative_time,
    generate_career_timeline,
    is_current_position,
    is_valid_date,
    parse_date,
    sort_by_start_date,
    to_iso_string,
    validate_date_range,
    validate_resume_dates,
)

# Markdown utilities
from .md import count_words, extract_code, split_frontmatter, strip_frontmatter, strip_markdown

# Slug utilities
from .slugify import heading_anchor, is_valid_slug, normalize_slug

__all__ = [
    "calculate_duration",
    "calculate_total_experience",
    "calculate_working_days",
    "detect_gaps",
    "detect_overlaps",
    "format_date_range",
    "format_duration",
    "format_for_display",
    "format_relative_time",
    "generate_career_timeline",
    "is_current_position",
    "is_valid_date",
    "parse_date",
    "sort_by_start_date",
    "to_iso_string",
    "validate_date_range",
    "validate_resume_dates",
    "count_words",
    "extract_code",
    "split_frontmatter",
    "strip_frontmatter",
    "strip_markdown",
    "heading_anchor",
    "is_valid_slug",
    "normalize_slug",
]
