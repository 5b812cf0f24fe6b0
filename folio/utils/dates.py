#!/usr/bin/env python3
"""
dates.py
--------
Date parsing, range validation, and duration arithmetic for content dates.

Content files carry dates as ISO-8601 strings. Audit fields (`createdAt`,
`publishedAt`, ...) use the time-qualified UTC form
`YYYY-MM-DDTHH:mm:ss[.fraction]Z`; resume start/end dates may also be bare
`YYYY-MM-DD`. Every parsed value is a timezone-aware UTC datetime.

Durations use calendar-aware month differencing: years and months are
subtracted component-wise and one month is taken off when the end
day-of-month is earlier than the start day-of-month. A partial final
month never rounds up, so 2023-01-01 → 2023-12-31 is 11 months.

Every function that depends on "now" accepts an explicit `now` so callers
(and tests) get deterministic results.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, TypeVar

# --- Local imports ---
from folio.configs import DATE_RANGE, TIMELINE, DateRangeConfig, TimelineConfig

if TYPE_CHECKING:
    from folio.models.content import ResumeEntry

T = TypeVar("T")

DATETIME_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z)?$"
)
STRICT_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?Z$")
SIMPLE_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


# ----- Result types -----


@dataclass
class DateRangeResult:
    """Outcome of a date-range check."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Duration:
    """Calendar duration between two dates."""

    years: int
    months: int
    total_days: int
    total_months: int


@dataclass(frozen=True)
class Gap:
    """An employment gap between two consecutive resume entries."""

    start: str
    end: str
    months: int
    description: str


@dataclass(frozen=True)
class Overlap:
    """Two resume entries whose active ranges overlap."""

    first: "ResumeEntry"
    second: "ResumeEntry"
    description: str


@dataclass
class ExperienceSummary:
    """Accumulated months of experience."""

    total_months: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    by_skill: Dict[str, int] = field(default_factory=dict)

    @property
    def total_years(self) -> int:
        return self.total_months // 12


@dataclass(frozen=True)
class TimelineEntry:
    """One row of a career timeline."""

    entry: "ResumeEntry"
    months: int
    formatted: str
    is_active: bool
    overlaps: List[str]


# ----- Parsing -----


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime string.

    Accepts `YYYY-MM-DD` and `YYYY-MM-DDTHH:mm:ss[.fraction][Z]`. A value
    without a zone designator is read as UTC.

    Args:
        value: Date string

    Returns:
        Timezone-aware UTC datetime, or None if the value is not a valid
        date (never raises)

    Examples:
        >>> parse_date("2023-06-15T10:30:00Z")
        datetime.datetime(2023, 6, 15, 10, 30, tzinfo=datetime.timezone.utc)
        >>> parse_date("2023-02-30") is None
        True
    """
    if not isinstance(value, str):
        return None

    value = value.strip()
    match = DATETIME_PATTERN.match(value)
    try:
        if match:
            year, month, day, hour, minute, second, fraction, _ = match.groups()
            micro = int((fraction or "0")[:6].ljust(6, "0"))
            return datetime(
                int(year), int(month), int(day),
                int(hour), int(minute), int(second), micro,
                tzinfo=timezone.utc,
            )

        match = SIMPLE_DATE_PATTERN.match(value)
        if match:
            year, month, day = (int(part) for part in match.groups())
            return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        # Out-of-range component, e.g. month 13 or February 30
        return None

    return None


def is_valid_date(value: Optional[str]) -> bool:
    """True if `parse_date` accepts the value."""
    return parse_date(value) is not None


def is_strict_datetime(value: Optional[str]) -> bool:
    """
    True for the time-qualified UTC form required on audit fields.

    Examples:
        >>> is_strict_datetime("2024-01-15T00:00:00Z")
        True
        >>> is_strict_datetime("2024-01-15")
        False
    """
    return (
        isinstance(value, str)
        and bool(STRICT_DATETIME_PATTERN.match(value))
        and parse_date(value) is not None
    )


def to_iso_string(value: datetime) -> str:
    """Serialize a datetime as `YYYY-MM-DDTHH:mm:ss.sssZ` in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _add_years(value: datetime, years: int) -> datetime:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # February 29 in a non-leap target year
        return value.replace(year=value.year + years, day=28)


# ----- Range validation -----


def validate_date_range(
    start: Optional[str],
    end: Optional[str] = None,
    config: DateRangeConfig = DATE_RANGE,
    now: Optional[datetime] = None,
) -> DateRangeResult:
    """
    Validate a start/end date pair.

    Checks, stopping at the first failure:
        - start parses
        - end (when given) parses, is after start, and the span does not
          exceed `config.max_span_years`
        - start is not more than `config.max_future_years` in the future

    Args:
        start: Start date string
        end: Optional end date string
        config: Plausibility limits
        now: Reference time (defaults to the current UTC time)

    Returns:
        DateRangeResult with at most one error
    """
    start_dt = parse_date(start)
    if start_dt is None:
        return DateRangeResult(False, ["Invalid start date format"])

    if end:
        end_dt = parse_date(end)
        if end_dt is None:
            return DateRangeResult(False, ["Invalid end date format"])

        if start_dt >= end_dt:
            return DateRangeResult(False, ["Start date must be before end date"])

        span_years = (end_dt - start_dt).total_seconds() / (365.25 * 24 * 3600)
        if span_years > config.max_span_years:
            return DateRangeResult(
                False,
                [f"Date range exceeds maximum of {config.max_span_years} years"],
            )

    reference = now or _utcnow()
    if start_dt > _add_years(reference, config.max_future_years):
        return DateRangeResult(
            False,
            [
                "Start date is too far in the future "
                f"(max {config.max_future_years} years)"
            ],
        )

    return DateRangeResult(True)


# ----- Durations -----


def months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months from start to end (never negative)."""
    total = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        total -= 1
    return max(0, total)


def calculate_duration(
    start: Optional[str],
    end: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Duration:
    """
    Calculate the calendar duration between two date strings.

    A missing end means "through now". Unparsable input yields a zero
    duration.

    Examples:
        >>> calculate_duration("2023-01-01", "2023-12-31")
        Duration(years=0, months=11, total_days=364, total_months=11)
    """
    start_dt = parse_date(start)
    end_dt = parse_date(end) if end else (now or _utcnow())
    if start_dt is None or end_dt is None:
        return Duration(0, 0, 0, 0)

    total_months = months_between(start_dt, end_dt)
    total_days = max(0, (end_dt.date() - start_dt.date()).days)
    return Duration(
        years=total_months // 12,
        months=total_months % 12,
        total_days=total_days,
        total_months=total_months,
    )


def format_duration(duration: Duration, short: bool = False) -> str:
    """
    Render a duration for display.

    Examples:
        >>> format_duration(Duration(2, 3, 820, 27))
        '2 years, 3 months'
        >>> format_duration(Duration(1, 0, 365, 12))
        '1 year'
        >>> format_duration(Duration(2, 3, 820, 27), short=True)
        '2y3m'
        >>> format_duration(Duration(0, 0, 10, 0))
        '0 months'
    """
    years, months = duration.years, duration.months
    if years == 0 and months == 0:
        return "0m" if short else "0 months"

    if short:
        compact = f"{years}y" if years > 0 else ""
        if months > 0:
            compact += f"{months}m"
        return compact

    parts = []
    if years > 0:
        parts.append(f"{years} {'year' if years == 1 else 'years'}")
    if months > 0:
        parts.append(f"{months} {'month' if months == 1 else 'months'}")
    return ", ".join(parts)


def calculate_working_days(
    start: Optional[str],
    end: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Count weekdays from start to end, both ends inclusive.

    Returns 0 for unparsable input or an end before the start.
    """
    start_dt = parse_date(start)
    end_dt = parse_date(end) if end else (now or _utcnow())
    if start_dt is None or end_dt is None:
        return 0

    day: date = start_dt.date()
    last: date = end_dt.date()
    count = 0
    while day <= last:
        if day.weekday() < 5:
            count += 1
        day += timedelta(days=1)
    return count


# ----- Resume helpers -----


def is_current_position(entry: "ResumeEntry") -> bool:
    """An entry is active if flagged current or it has no end date."""
    return bool(entry.current) or not entry.end_date


def _effective_range(
    entry: "ResumeEntry", now: datetime
) -> Optional[tuple[datetime, datetime]]:
    start_dt = parse_date(entry.start_date)
    end_dt = parse_date(entry.end_date) if entry.end_date else now
    if start_dt is None or end_dt is None:
        return None
    return start_dt, end_dt


def sort_by_start_date(items: Iterable[T], descending: bool = True) -> List[T]:
    """
    Sort resume-like items by `start_date`.

    Items whose start date does not parse keep their relative order and
    sort after all dated items.
    """
    items = list(items)
    dated = [item for item in items if parse_date(item.start_date) is not None]  # type: ignore[attr-defined]
    undated = [item for item in items if parse_date(item.start_date) is None]  # type: ignore[attr-defined]
    dated.sort(key=lambda item: parse_date(item.start_date), reverse=descending)  # type: ignore[attr-defined]
    return dated + undated


def validate_resume_dates(
    entry: "ResumeEntry",
    config: TimelineConfig = TIMELINE,
    date_range: DateRangeConfig = DATE_RANGE,
    now: Optional[datetime] = None,
) -> DateRangeResult:
    """
    Check one resume entry's dates.

    Errors:
        - the range check of `validate_date_range`
        - a non-current entry without an end date

    Warnings:
        - a current entry that also has an end date
        - a duration below `config.short_position_months`
        - a duration above `config.long_position_months`
    """
    result = validate_date_range(entry.start_date, entry.end_date, date_range, now=now)
    errors = list(result.errors)
    warnings: List[str] = []

    if entry.current and entry.end_date:
        warnings.append("Position marked as current but has end date")
    if not entry.current and not entry.end_date:
        errors.append("Non-current position must have end date")

    months = calculate_duration(entry.start_date, entry.end_date, now=now).total_months
    if months < config.short_position_months:
        warnings.append(
            f"Position duration is less than {config.short_position_months} month"
            + ("s" if config.short_position_months != 1 else "")
        )
    if months > config.long_position_months:
        warnings.append(
            f"Position duration exceeds {config.long_position_months // 12} years "
            "- please verify dates"
        )

    return DateRangeResult(not errors, errors, warnings)


def detect_gaps(
    entries: Sequence["ResumeEntry"],
    threshold_months: int = TIMELINE.gap_threshold_months,
    now: Optional[datetime] = None,
) -> List[Gap]:
    """
    Find gaps between consecutive resume entries.

    Non-draft entries are sorted by start date; a gap is reported whenever
    the whole months between one entry's effective end (its end date, or
    now) and the next entry's start exceed `threshold_months`.

    Args:
        entries: Resume entries (drafts are ignored)
        threshold_months: Gaps of this many months or fewer are ignored
        now: Reference time for open-ended entries

    Returns:
        Gaps in chronological order
    """
    reference = now or _utcnow()
    ordered = sort_by_start_date((e for e in entries if not e.draft), descending=False)

    gaps: List[Gap] = []
    for current, following in zip(ordered, ordered[1:]):
        current_end = current.end_date or to_iso_string(reference)
        end_dt = parse_date(current_end)
        next_start_dt = parse_date(following.start_date)
        if end_dt is None or next_start_dt is None or end_dt >= next_start_dt:
            continue

        months = months_between(end_dt, next_start_dt)
        if months > threshold_months:
            gaps.append(
                Gap(
                    start=current_end,
                    end=following.start_date,
                    months=months,
                    description=f"Gap between {current.label} and {following.label}",
                )
            )
    return gaps


def detect_overlaps(
    entries: Sequence["ResumeEntry"],
    entry_types: Iterable[str] = TIMELINE.overlap_types,
    now: Optional[datetime] = None,
) -> List[Overlap]:
    """
    Find pairs of same-persona entries with overlapping active ranges.

    Only non-draft entries whose type is in `entry_types` are compared.
    Open-ended entries run through `now`. Each pair is reported once.
    """
    reference = now or _utcnow()
    types = {str(getattr(t, "value", t)) for t in entry_types}
    candidates = [
        e for e in entries if not e.draft and str(getattr(e.type, "value", e.type)) in types
    ]

    overlaps: List[Overlap] = []
    for i, first in enumerate(candidates):
        first_range = _effective_range(first, reference)
        if first_range is None:
            continue
        for second in candidates[i + 1 :]:
            if second.persona != first.persona:
                continue
            second_range = _effective_range(second, reference)
            if second_range is None:
                continue
            if first_range[0] < second_range[1] and first_range[1] > second_range[0]:
                overlaps.append(
                    Overlap(
                        first=first,
                        second=second,
                        description=(
                            f"Overlapping employment: {first.label} and {second.label}"
                        ),
                    )
                )
    return overlaps


def calculate_total_experience(
    entries: Iterable["ResumeEntry"], now: Optional[datetime] = None
) -> ExperienceSummary:
    """
    Sum months of experience over non-draft entries.

    Months are attributed to the entry type and to every skill and
    technology the entry lists.
    """
    summary = ExperienceSummary()
    for entry in entries:
        if entry.draft:
            continue
        months = calculate_duration(entry.start_date, entry.end_date, now=now).total_months
        summary.total_months += months

        entry_type = str(getattr(entry.type, "value", entry.type) or "employment")
        summary.by_type[entry_type] = summary.by_type.get(entry_type, 0) + months

        for skill in [*entry.skills, *entry.technologies]:
            summary.by_skill[skill] = summary.by_skill.get(skill, 0) + months
    return summary


def generate_career_timeline(
    entries: Sequence["ResumeEntry"], now: Optional[datetime] = None
) -> List[TimelineEntry]:
    """
    Build a newest-first timeline of non-draft entries.

    Each row carries the entry's duration, whether it is active, and the
    labels of every other non-draft entry it overlaps (of any type).
    """
    reference = now or _utcnow()
    published = [e for e in entries if not e.draft]

    timeline: List[TimelineEntry] = []
    for entry in sort_by_start_date(published, descending=True):
        duration = calculate_duration(entry.start_date, entry.end_date, now=reference)
        entry_range = _effective_range(entry, reference)

        overlaps: List[str] = []
        for other in published:
            if other is entry or entry_range is None:
                continue
            other_range = _effective_range(other, reference)
            if other_range is None:
                continue
            if entry_range[0] < other_range[1] and entry_range[1] > other_range[0]:
                overlaps.append(f"{other.position} at {other.company}")

        timeline.append(
            TimelineEntry(
                entry=entry,
                months=duration.total_months,
                formatted=format_duration(duration),
                is_active=is_current_position(entry),
                overlaps=overlaps,
            )
        )
    return timeline


# ----- Display -----


def format_for_display(value: Optional[str], style: str = "month-year") -> str:
    """
    Format a date string for display (UTC).

    Styles:
        full        → "January 5, 2023"
        month-year  → "Jan 2023"
        year        → "2023"
    """
    parsed = parse_date(value)
    if parsed is None:
        return "Invalid Date"

    if style == "full":
        return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"
    if style == "year":
        return str(parsed.year)
    return f"{MONTH_NAMES[parsed.month - 1][:3]} {parsed.year}"


def format_date_range(
    start: Optional[str],
    end: Optional[str] = None,
    style: str = "month-year",
    current_label: str = "Present",
    separator: str = " - ",
) -> str:
    """
    Format a start/end pair, e.g. "Jan 2020 - Present".
    """
    start_label = format_for_display(start, style)
    end_label = format_for_display(end, style) if end else current_label
    return f"{start_label}{separator}{end_label}"


def format_relative_time(value: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a date was ("Yesterday", "3 weeks ago", ...).
    """
    parsed = parse_date(value)
    if parsed is None:
        return "Invalid Date"

    days = int((((now or _utcnow()) - parsed).total_seconds()) // 86400)
    months = days // 30
    years = days // 365

    if days < 1:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if months < 12:
        return f"{months} months ago"
    if years == 1:
        return "1 year ago"
    return f"{years} years ago"
