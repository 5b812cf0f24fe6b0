#!/usr/bin/env python3
"""
cross_reference.py
------------------
Graph-wide reference integrity checks for Folio content.

Runs after every record has passed schema validation. Given the whole
content graph, verifies that each reference (persona key, skill key,
collection key, related-article slug, series membership) resolves to an
existing, consistent target.

Errors (make the graph invalid):
- Zero or several non-draft primary personas
- Persona key that does not resolve
- Portfolio item pointing at a missing collection
- Duplicate part numbers within a blog series
- Resume entry dates that break the current/end-date rules

Warnings (never block):
- References to drafts
- Declared item counts that differ from the real count
- Series totals that disagree with the parts present, missing parts
- Unresolved related articles, resume skills and technologies
- Overlapping employment periods
- Skills nobody references

Usage:
    from folio.validators.cross_reference import CrossReferenceValidator

    result = CrossReferenceValidator(graph).validate_all()
    if not result.valid:
        for error in result.errors:
            print(error)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Union

# --- Local imports ---
from folio.configs import DATE_RANGE, TIMELINE, DateRangeConfig, TimelineConfig
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.models.content import (
    BlogArticle,
    ContentGraph,
    PortfolioCollection,
    PortfolioItem,
    ResumeEntry,
    Skill,
)
from folio.utils.dates import detect_overlaps, parse_date, validate_date_range

ContentItem = Union[BlogArticle, PortfolioCollection, PortfolioItem, ResumeEntry, Skill]


@dataclass
class ValidationResult:
    """Outcome of one or more graph checks."""

    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Fold another result into this one (in place) and return self."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.valid:
            self.valid = False
        return self

    def to_dict(self) -> Dict[str, object]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


class CrossReferenceValidator:
    """
    Validates references across a ContentGraph.

    The validator never mutates the graph. Checks involving "now" (open
    resume entries) use the `now` given at construction, so results are
    deterministic for a fixed snapshot and clock.
    """

    def __init__(
        self,
        graph: ContentGraph,
        logger: Optional[FolioLogger] = None,
        now: Optional[datetime] = None,
        timeline: TimelineConfig = TIMELINE,
        date_range: DateRangeConfig = DATE_RANGE,
    ):
        """
        Initialize cross-reference validator.

        Args:
            graph: Content graph snapshot (drafts included)
            logger: Optional logger instance
            now: Reference time for open-ended resume entries
            timeline: Overlap settings
            date_range: Span and future limits for resume dates
        """
        self.graph = graph
        self.logger = logger
        self.now = now or datetime.now(timezone.utc)
        self.timeline = timeline
        self.date_range = date_range

        self._personas = {p.key: p for p in graph.personas}
        self._skills = {s.key: s for s in graph.skills}
        self._collections = {c.key: c for c in graph.portfolio_collections}
        self._articles = {a.slug: a for a in graph.blog_articles}

    # ----- Full run -----

    def validate_all(self) -> ValidationResult:
        """
        Run every check in order and merge the results.

        Returns:
            Combined ValidationResult
        """
        log = safe_logger(self.logger)
        log.log_info(
            "Validating cross-references",
            {
                "personas": len(self.graph.personas),
                "skills": len(self.graph.skills),
                "articles": len(self.graph.blog_articles),
                "collections": len(self.graph.portfolio_collections),
                "items": len(self.graph.portfolio_items),
                "resume_entries": len(self.graph.resume_entries),
            },
        )

        result = ValidationResult()
        result.merge(self.validate_primary_persona())
        result.merge(self.validate_persona_references())

        for item in self.graph.portfolio_items:
            result.merge(self.validate_item_collection_assignment(item))
        result.merge(self.validate_collection_item_counts())

        result.merge(self.validate_series_references())
        for article in self.graph.blog_articles:
            result.merge(self.validate_related_articles(article))

        for entry in self.graph.resume_entries:
            result.merge(self.validate_resume_skills(entry))
            result.merge(self.validate_resume_dates(entry))
        result.merge(self.validate_employment_overlaps())

        for skill in self.graph.skills:
            result.merge(self.validate_skill_usage(skill.key))

        log.log_operation(
            "cross_reference_validation",
            {
                "valid": result.valid,
                "errors": len(result.errors),
                "warnings": len(result.warnings),
            },
        )
        return result

    # ----- Personas -----

    def validate_primary_persona(self) -> ValidationResult:
        """Exactly one non-draft persona must be primary."""
        result = ValidationResult()
        primaries = [p for p in self.graph.personas if p.primary and not p.draft]

        if not primaries:
            result.add_error("No primary persona found (required for site navigation)")
        elif len(primaries) > 1:
            keys = ", ".join(p.key for p in primaries)
            result.add_error(f"Multiple primary personas found: {keys}")
        return result

    def validate_persona_reference(
        self, persona_key: str, referenced_by: Optional[str] = None
    ) -> ValidationResult:
        """
        A persona key must resolve; a draft persona draws a warning.

        Args:
            persona_key: Referenced persona key
            referenced_by: Optional label of the referencing record
        """
        result = ValidationResult()
        source = f" (referenced by {referenced_by})" if referenced_by else ""

        persona = self._personas.get(persona_key)
        if persona is None:
            result.add_error(f"Persona '{persona_key}' not found{source}")
        elif persona.draft:
            result.add_warning(f"Referenced persona '{persona_key}' is in draft mode{source}")
        return result

    def validate_persona_references(self) -> ValidationResult:
        """
        Check every persona key used across the graph, once per key.

        Also checks that each persona's own skill list resolves.
        """
        result = ValidationResult()
        referencing: Dict[str, List[str]] = defaultdict(list)
        for label, item in self._persona_referrers():
            referencing[item.persona].append(label)

        for key, labels in referencing.items():
            shown = ", ".join(labels[:3]) + (", ..." if len(labels) > 3 else "")
            result.merge(self.validate_persona_reference(key, shown))

        for persona in self.graph.personas:
            result.merge(
                self.validate_skill_references(persona.skills, f"Persona '{persona.key}'")
            )
        return result

    def _persona_referrers(self) -> Iterable[tuple[str, ContentItem]]:
        for article in self.graph.blog_articles:
            yield f"article '{article.slug}'", article
        for item in self.graph.portfolio_items:
            yield f"portfolio item '{item.slug}'", item
        for collection in self.graph.portfolio_collections:
            yield f"collection '{collection.key}'", collection
        for entry in self.graph.resume_entries:
            yield f"resume entry '{entry.slug}'", entry
        for skill in self.graph.skills:
            yield f"skill '{skill.key}'", skill

    # ----- Skills -----

    def validate_skill_references(
        self, skill_keys: Iterable[str], referenced_by: str, label: str = "Skill"
    ) -> ValidationResult:
        """Unknown or draft skill keys draw warnings."""
        result = ValidationResult()
        for key in skill_keys:
            skill = self._skills.get(key)
            if skill is None:
                result.add_warning(
                    f"{label} '{key}' not found in skill definitions (referenced by {referenced_by})"
                )
            elif skill.draft:
                result.add_warning(
                    f"Referenced {label.lower()} '{key}' is in draft mode (referenced by {referenced_by})"
                )
        return result

    def validate_skill_usage(self, skill_key: str) -> ValidationResult:
        """Warn when a defined skill is never referenced."""
        result = ValidationResult()
        used = (
            any(skill_key in p.skills for p in self.graph.personas)
            or any(
                skill_key in r.skills or skill_key in r.technologies
                for r in self.graph.resume_entries
            )
            or any(skill_key in i.tags for i in self.graph.portfolio_items)
        )
        if not used:
            result.add_warning(f"Skill '{skill_key}' is defined but not referenced in any content")
        return result

    # ----- Portfolio -----

    def validate_collection_reference(self, collection_key: str) -> ValidationResult:
        """A collection key must resolve; a draft collection draws a warning."""
        result = ValidationResult()
        collection = self._collections.get(collection_key)
        if collection is None:
            result.add_error(f"Portfolio collection '{collection_key}' not found")
        elif collection.draft:
            result.add_warning(f"Referenced collection '{collection_key}' is in draft mode")
        return result

    def validate_item_collection_assignment(self, item: PortfolioItem) -> ValidationResult:
        """An item's collection must exist and should share its persona."""
        result = ValidationResult()
        collection = self._collections.get(item.collection)
        if collection is None:
            result.add_error(
                f"Item '{item.slug}' references non-existent collection '{item.collection}'"
            )
            return result

        if collection.draft:
            result.add_warning(
                f"Item '{item.slug}' belongs to collection '{item.collection}' which is in draft mode"
            )
        if item.persona != collection.persona:
            result.add_warning(
                f"Item '{item.slug}' persona ({item.persona}) differs from "
                f"collection persona ({collection.persona})"
            )
        return result

    def validate_collection_item_counts(self) -> ValidationResult:
        """Declared itemCount must match the non-draft items in the collection."""
        result = ValidationResult()
        actual = Counter(
            item.collection for item in self.graph.portfolio_items if not item.draft
        )
        for collection in self.graph.portfolio_collections:
            count = actual.get(collection.key, 0)
            if collection.item_count != count:
                result.add_warning(
                    f"Collection '{collection.key}' claims {collection.item_count} items "
                    f"but has {count}"
                )
        return result

    # ----- Blog -----

    def validate_related_articles(self, article: BlogArticle) -> ValidationResult:
        """Related article slugs should resolve to published articles."""
        result = ValidationResult()
        for slug in article.related_articles:
            related = self._articles.get(slug)
            if related is None:
                result.add_warning(
                    f"Related article '{slug}' not found (referenced by article '{article.slug}')"
                )
            elif related.draft:
                result.add_warning(
                    f"Related article '{slug}' is in draft mode (referenced by article '{article.slug}')"
                )
        return result

    def validate_series_references(self) -> ValidationResult:
        """
        Check each series across non-draft articles.

        Warnings: declared total differs from the highest part, totals
        disagree between articles, a part in 1..total is missing.
        Error: two articles claim the same part.
        """
        result = ValidationResult()
        series_map: Dict[str, List[BlogArticle]] = defaultdict(list)
        for article in self.graph.blog_articles:
            if article.series is not None and not article.draft:
                series_map[article.series.name].append(article)

        for name, articles in series_map.items():
            parts = [a.series.part for a in articles]
            declared_total = articles[0].series.total
            max_part = max(parts)

            if len({a.series.total for a in articles}) > 1:
                totals = ", ".join(
                    f"{a.slug}={a.series.total}" for a in articles
                )
                result.add_warning(f"Series '{name}' has inconsistent totals: {totals}")

            if max_part != declared_total:
                result.add_warning(
                    f"Series '{name}' has parts up to {max_part} but declares total of {declared_total}"
                )

            present = set(parts)
            for part in range(1, declared_total + 1):
                if part not in present:
                    result.add_warning(f"Series '{name}' is missing part {part}")

            for part, count in sorted(Counter(parts).items()):
                if count > 1:
                    slugs = ", ".join(a.slug for a in articles if a.series.part == part)
                    result.add_error(
                        f"Series '{name}' has duplicate part {part}: "
                        f"{count} articles ({slugs})"
                    )
        return result

    # ----- Resume -----

    def validate_resume_skills(self, entry: ResumeEntry) -> ValidationResult:
        """Resume skills and technologies should resolve to skill definitions."""
        source = f"resume entry '{entry.slug}'"
        result = self.validate_skill_references(entry.skills, source)
        result.merge(self.validate_skill_references(entry.technologies, source, "Technology"))
        return result

    def validate_resume_dates(self, entry: ResumeEntry) -> ValidationResult:
        """
        Chronology and current-flag rules for one resume entry.

        Errors: unparsable dates, a non-current entry with no end date,
        start not before end, and spans or start dates beyond the
        date-range limits. Warning: a current entry with an end date.
        """
        result = ValidationResult()
        start = parse_date(entry.start_date)
        end = parse_date(entry.end_date) if entry.end_date else None

        if start is None:
            result.add_error(
                f"Resume entry '{entry.slug}' has an invalid start date '{entry.start_date}'"
            )
        if entry.end_date and end is None:
            result.add_error(
                f"Resume entry '{entry.slug}' has an invalid end date '{entry.end_date}'"
            )
        if not entry.current and not entry.end_date:
            result.add_error(
                f"Resume entry '{entry.slug}' is not current but has no end date"
            )
        if start is not None and end is not None and start >= end:
            result.add_error(
                f"Resume entry '{entry.slug}' starts ({entry.start_date}) "
                f"on or after it ends ({entry.end_date})"
            )
        if result.valid:
            plausibility = validate_date_range(
                entry.start_date, entry.end_date, self.date_range, now=self.now
            )
            for message in plausibility.errors:
                result.add_error(f"Resume entry '{entry.slug}': {message}")
        if entry.current and entry.end_date:
            result.add_warning(
                f"Resume entry '{entry.slug}' is marked current but has end date {entry.end_date}"
            )
        return result

    def validate_employment_overlaps(self) -> ValidationResult:
        """Warn on overlapping ranges of the configured types per persona."""
        result = ValidationResult()
        overlaps = detect_overlaps(
            self.graph.resume_entries, self.timeline.overlap_types, now=self.now
        )
        for overlap in overlaps:
            result.add_warning(
                f"{overlap.description} (entries '{overlap.first.slug}' "
                f"and '{overlap.second.slug}', persona '{overlap.first.persona}')"
            )
        return result

    # ----- Single item -----

    def validate_content_item(self, item: ContentItem) -> ValidationResult:
        """
        Check one record's outgoing references.

        Always checks the persona; portfolio items also check their
        collection and resume entries their skills.
        """
        result = self.validate_persona_reference(item.persona)
        if isinstance(item, PortfolioItem):
            result.merge(self.validate_collection_reference(item.collection))
        elif isinstance(item, ResumeEntry):
            result.merge(self.validate_resume_skills(item))
        elif isinstance(item, BlogArticle):
            result.merge(self.validate_related_articles(item))
        return result
