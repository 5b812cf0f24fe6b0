#!/usr/bin/env python3
"""
configs
-------
Tunable thresholds for validation, transformation, and the contact form.

Every threshold the content core uses lives here as a frozen dataclass with
a module-level default. A site can override any of them from a YAML file:

    reading:
      speeds: {slow: 140, average: 200, fast: 260}
    timeline:
      gap_threshold_months: 3
    form:
      spam_threshold: 4

Sections:
    - READING: Reading speeds and code weighting
    - EXCERPT: Excerpt length and sentence budgets
    - DATE_RANGE: Plausibility limits for date ranges
    - TIMELINE: Resume gap/overlap detection
    - FORM: Contact form anti-automation and spam scoring
    - RATE_LIMIT: Attempt windows per client identifier
    - REGISTRY: Ring-buffer sizes for error/log registries
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

# --- Local imports ---
from folio.core.exceptions import ConfigError
from folio.core.results import parse_yaml


@dataclass(frozen=True)
class ReadingConfig:
    """Reading-time calculation settings (words per minute)."""

    speeds: Dict[str, int] = field(
        default_factory=lambda: {"slow": 150, "average": 200, "fast": 250}
    )
    code_reading_factor: float = 0.5


@dataclass(frozen=True)
class ExcerptConfig:
    """Excerpt budgets for listings and article cards."""

    max_length: int = 160
    max_sentences: int = 2
    article_max_length: int = 200
    article_max_sentences: int = 3


@dataclass(frozen=True)
class DateRangeConfig:
    """Plausibility limits for start/end date pairs."""

    max_span_years: int = 50
    max_future_years: int = 5


@dataclass(frozen=True)
class TimelineConfig:
    """Resume timeline checks."""

    gap_threshold_months: int = 1
    overlap_types: Tuple[str, ...] = ("employment",)
    short_position_months: int = 1
    long_position_months: int = 120


@dataclass(frozen=True)
class FormConfig:
    """Contact form anti-automation and spam scoring."""

    min_dwell_seconds: float = 3.0
    max_staleness_seconds: float = 30 * 60
    spam_threshold: int = 3
    name_max_length: int = 100
    subject_max_length: int = 200
    message_min_length: int = 10
    message_max_length: int = 5000
    disposable_domains: Tuple[str, ...] = (
        "10minutemail.com",
        "tempmail.org",
        "guerrillamail.com",
        "mailinator.com",
        "yopmail.com",
        "temp-mail.org",
    )


@dataclass(frozen=True)
class RateLimitConfig:
    """Attempt windows per client identifier."""

    max_attempts: int = 5
    window_seconds: float = 15 * 60
    contact_max_attempts: int = 3
    salt_env_var: str = "FOLIO_CONTACT_SALT"


@dataclass(frozen=True)
class RegistryConfig:
    """Ring-buffer sizes for the in-memory diagnostics registries."""

    max_errors: int = 1000
    max_logs: int = 5000


@dataclass(frozen=True)
class FolioConfig:
    """All tunable thresholds, grouped by section."""

    reading: ReadingConfig = field(default_factory=ReadingConfig)
    excerpt: ExcerptConfig = field(default_factory=ExcerptConfig)
    date_range: DateRangeConfig = field(default_factory=DateRangeConfig)
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    form: FormConfig = field(default_factory=FormConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)


READING = ReadingConfig()
EXCERPT = ExcerptConfig()
DATE_RANGE = DateRangeConfig()
TIMELINE = TimelineConfig()
FORM = FormConfig()
RATE_LIMIT = RateLimitConfig()
REGISTRY = RegistryConfig()
DEFAULT_CONFIG = FolioConfig()


def _apply_section(section: Any, name: str, overrides: Mapping[str, Any]) -> Any:
    """Return a copy of a config section with overrides applied."""
    known = {f.name: f for f in fields(section)}
    unknown = set(overrides) - set(known)
    if unknown:
        raise ConfigError(
            f"Unknown key(s) in '{name}' section: {', '.join(sorted(unknown))}"
        )

    values: Dict[str, Any] = {}
    for key, value in overrides.items():
        current = getattr(section, key)
        if isinstance(current, tuple):
            if not isinstance(value, (list, tuple)):
                raise ConfigError(f"'{name}.{key}' must be a list")
            value = tuple(value)
        elif isinstance(current, dict):
            if not isinstance(value, dict):
                raise ConfigError(f"'{name}.{key}' must be a mapping")
            value = {**current, **value}
        elif isinstance(current, (int, float)) and not isinstance(current, bool):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"'{name}.{key}' must be a number")
        elif isinstance(current, str) and not isinstance(value, str):
            raise ConfigError(f"'{name}.{key}' must be a string")
        values[key] = value
    return replace(section, **values)


def config_from_mapping(data: Optional[Mapping[str, Any]]) -> FolioConfig:
    """
    Build a FolioConfig from a mapping of section overrides.

    Args:
        data: Mapping of section name to overrides (None means defaults)

    Returns:
        FolioConfig with the overrides applied

    Raises:
        ConfigError: If a section or key is unknown or has the wrong type
    """
    if not data:
        return DEFAULT_CONFIG
    if not isinstance(data, Mapping):
        raise ConfigError("Config file must contain a mapping of sections")

    sections = {f.name for f in fields(FolioConfig)}
    unknown = set(data) - sections
    if unknown:
        raise ConfigError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    updated: Dict[str, Any] = {}
    for name, overrides in data.items():
        if overrides is None:
            continue
        if not isinstance(overrides, Mapping):
            raise ConfigError(f"Config section '{name}' must be a mapping")
        updated[name] = _apply_section(getattr(DEFAULT_CONFIG, name), name, overrides)
    return replace(DEFAULT_CONFIG, **updated)


def load_config(path: Optional[Path]) -> FolioConfig:
    """
    Load configuration overrides from a YAML file.

    A missing file yields the defaults, so the site works unconfigured.

    Args:
        path: Path to a YAML config file (or None)

    Returns:
        FolioConfig

    Raises:
        ConfigError: If the file is not UTF-8 YAML or has unknown keys
    """
    if path is None or not Path(path).exists():
        return DEFAULT_CONFIG

    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not valid UTF-8 text") from e

    result = parse_yaml(text)
    if not result.ok:
        raise ConfigError(f"{path}: {result.error}")
    return config_from_mapping(result.value)
