#!/usr/bin/env python3
"""
loader.py
---------
Reads a Folio content directory into raw records.

Layout (every subdirectory is optional):

    content/
    ├── personas/                 *.yaml
    ├── skills/                   *.yaml
    ├── blog/                     *.md (YAML frontmatter + body)
    ├── portfolio/collections/    *.yaml
    ├── portfolio/items/          *.yaml
    └── resume/                   *.yaml

A YAML or JSON file may hold one record (a mapping) or several (a list of
mappings). A Markdown file holds one record in its frontmatter; the body
is kept alongside it for the transformation pipeline.

Files that cannot be read or parsed are collected as LoadErrors, never
raised, so one typo does not hide every other problem. Only a missing
content root raises ContentLoadError.

YAML turns unquoted timestamps into date objects; the loader turns them
back into ISO-8601 strings so the schema validator sees the wire format.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Local imports ---
from folio.core.exceptions import ContentLoadError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.core.results import Err, Ok, Result, parse_json, parse_yaml
from folio.utils.md import split_frontmatter

CONTENT_DIRS: Dict[str, str] = {
    "persona": "personas",
    "skill": "skills",
    "blog_article": "blog",
    "portfolio_collection": "portfolio/collections",
    "portfolio_item": "portfolio/items",
    "resume_entry": "resume",
}

SUFFIXES = {".yaml", ".yml", ".json", ".md"}


@dataclass
class RawRecord:
    """One unvalidated record and where it came from."""

    content_type: str
    path: Path
    data: Any
    body: Optional[str] = None
    index: Optional[int] = None

    @property
    def source(self) -> str:
        """File name, with the list index for multi-record files."""
        return f"{self.path.name}[{self.index}]" if self.index is not None else self.path.name


@dataclass(frozen=True)
class LoadError:
    path: Path
    message: str


@dataclass
class ContentSnapshot:
    """Everything read from a content directory."""

    root: Path
    records: Dict[str, List[RawRecord]] = field(
        default_factory=lambda: {content_type: [] for content_type in CONTENT_DIRS}
    )
    errors: List[LoadError] = field(default_factory=list)

    @property
    def total_records(self) -> int:
        return sum(len(records) for records in self.records.values())

    def counts(self) -> Dict[str, int]:
        return {content_type: len(records) for content_type, records in self.records.items()}


def normalize_yaml_value(value: Any) -> Any:
    """
    Turn YAML-native dates back into ISO-8601 strings, recursively.

    Examples:
        >>> normalize_yaml_value({"d": date(2024, 1, 15)})
        {'d': '2024-01-15'}
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        text = value.strftime("%Y-%m-%dT%H:%M:%S")
        if value.microsecond:
            text += f".{value.microsecond // 1000:03d}"
        return text + "Z"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: normalize_yaml_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_yaml_value(item) for item in value]
    return value


def read_content_file(path: Path) -> Result[tuple[Any, Optional[str]]]:
    """
    Parse one content file.

    Returns:
        Ok((data, body)) where body is the Markdown body (None for data
        files), or Err naming the problem
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(f"Cannot read file: {e}")

    if path.suffix == ".md":
        frontmatter, body_lines = split_frontmatter(text)
        if not frontmatter:
            return Err("Missing YAML frontmatter")
        parsed = parse_yaml(frontmatter)
        if not parsed.ok:
            return parsed
        return Ok((normalize_yaml_value(parsed.value), "\n".join(body_lines)))

    parsed = parse_json(text) if path.suffix == ".json" else parse_yaml(text)
    if not parsed.ok:
        return parsed
    if parsed.value is None:
        return Err("File is empty")
    return Ok((normalize_yaml_value(parsed.value), None))


class ContentLoader:
    """Loads a content directory into a ContentSnapshot."""

    def __init__(self, content_dir: Path, logger: Optional[FolioLogger] = None):
        """
        Initialize content loader.

        Args:
            content_dir: Root of the content tree
            logger: Optional logger instance
        """
        self.content_dir = Path(content_dir)
        self.logger = logger

    def load(self) -> ContentSnapshot:
        """
        Read every content file.

        Returns:
            ContentSnapshot with records and per-file load errors

        Raises:
            ContentLoadError: If the content directory does not exist
        """
        if not self.content_dir.is_dir():
            raise ContentLoadError(f"Content directory not found: {self.content_dir}")

        log = safe_logger(self.logger)
        snapshot = ContentSnapshot(root=self.content_dir)

        for content_type, subdir in CONTENT_DIRS.items():
            directory = self.content_dir / subdir
            if not directory.is_dir():
                log.log_debug(f"No {subdir}/ directory, skipping")
                continue

            for path in sorted(p for p in directory.iterdir() if p.suffix in SUFFIXES):
                self._load_file(content_type, path, snapshot)

        for error in snapshot.errors:
            log.log_warning(f"Could not load {error.path}", {"reason": error.message})
        log.log_operation(
            "load_content",
            {
                "content_dir": str(self.content_dir),
                "records": snapshot.counts(),
                "load_errors": len(snapshot.errors),
            },
        )
        return snapshot

    def _load_file(self, content_type: str, path: Path, snapshot: ContentSnapshot) -> None:
        result = read_content_file(path)
        if not result.ok:
            snapshot.errors.append(LoadError(path, result.error))
            return

        data, body = result.value
        bucket = snapshot.records[content_type]
        if isinstance(data, list):
            for index, item in enumerate(data):
                bucket.append(RawRecord(content_type, path, item, None, index))
        else:
            bucket.append(RawRecord(content_type, path, data, body))


def load_content(content_dir: Path, logger: Optional[FolioLogger] = None) -> ContentSnapshot:
    """Shortcut for ContentLoader(content_dir, logger).load()."""
    return ContentLoader(content_dir, logger).load()
