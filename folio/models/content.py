#!/usr/bin/env python3
"""
content.py
----------
Typed content records produced by the schema validator.

Content is declarative: each record is built once from a validated raw
mapping and never mutated afterwards, so every class here is a frozen
dataclass. Wire keys are camelCase (`createdAt`, `relatedArticles`);
attributes are snake_case.

All six content types share the base metadata block:
    title, description, draft, created_at, updated_at, tags, featured

Dates are kept as the ISO-8601 strings found in the content files;
the `*_dt` properties parse them on demand.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

# --- Local imports ---
from folio.models.enums import Proficiency, ResumeEntryType, SkillCategory
from folio.utils.dates import parse_date


# ----- Shared value objects -----


@dataclass(frozen=True)
class SocialLinks:
    """Persona social profile links."""

    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class Image:
    """An image reference with mandatory alt text."""

    src: str
    alt: str
    caption: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(frozen=True)
class Certification:
    """A skill certification."""

    name: str
    issuer: str
    date: str
    url: Optional[str] = None


@dataclass(frozen=True)
class Series:
    """Blog series membership: part `part` of `total` in series `name`."""

    name: str
    part: int
    total: int


@dataclass(frozen=True)
class CameraSettings:
    aperture: Optional[str] = None
    shutter: Optional[str] = None
    iso: Optional[str] = None
    focal: Optional[str] = None


@dataclass(frozen=True)
class Equipment:
    camera: Optional[str] = None
    lens: Optional[str] = None
    settings: Optional[CameraSettings] = None


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class Location:
    name: str
    coordinates: Optional[Coordinates] = None


# ----- Content types -----


@dataclass(frozen=True)
class Persona:
    """A named viewpoint under which content is organized."""

    key: str
    name: str
    title: str
    bio: str
    created_at: str
    avatar: Optional[str] = None
    primary: bool = False
    social: Optional[SocialLinks] = None
    skills: List[str] = field(default_factory=list)
    interests: List[str] = field(default_factory=list)
    description: Optional[str] = None
    draft: bool = False
    updated_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured: bool = False


@dataclass(frozen=True)
class Skill:
    """A skill definition owned by a persona."""

    key: str
    name: str
    category: SkillCategory
    persona: str
    title: str
    created_at: str
    proficiency: Proficiency = Proficiency.INTERMEDIATE
    years_experience: Optional[float] = None
    certifications: List[Certification] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    icon: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
    draft: bool = False
    updated_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured: bool = False


@dataclass(frozen=True)
class BlogArticle:
    """A blog article's metadata (the Markdown body is kept separately)."""

    slug: str
    persona: str
    title: str
    created_at: str
    excerpt: Optional[str] = None
    reading_time: Optional[float] = None
    hero_image: Optional[Image] = None
    category: Optional[str] = None
    series: Optional[Series] = None
    related_articles: List[str] = field(default_factory=list)
    published_at: Optional[str] = None
    description: Optional[str] = None
    draft: bool = False
    updated_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured: bool = False

    @property
    def published_dt(self) -> Optional[datetime]:
        return parse_date(self.published_at) if self.published_at else None

    @property
    def created_dt(self) -> Optional[datetime]:
        return parse_date(self.created_at)

    @property
    def display_dt(self) -> Optional[datetime]:
        """Publication date, falling back to creation date."""
        return self.published_dt or self.created_dt


@dataclass(frozen=True)
class PortfolioCollection:
    """A named group of portfolio items."""

    key: str
    name: str
    persona: str
    title: str
    created_at: str
    cover_image: Optional[Image] = None
    item_count: int = 0
    sort_order: float = 0
    description: Optional[str] = None
    draft: bool = False
    updated_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured: bool = False


@dataclass(frozen=True)
class PortfolioItem:
    """A portfolio piece belonging to one collection."""

    slug: str
    collection: str
    images: List[Image]
    persona: str
    title: str
    created_at: str
    equipment: Optional[Equipment] = None
    location: Optional[Location] = None
    sort_order: float = 0
    description: Optional[str] = None
    draft: bool = False
    updated_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured: bool = False

    @property
    def created_dt(self) -> Optional[datetime]:
        return parse_date(self.created_at)


@dataclass(frozen=True)
class ResumeEntry:
    """A position, contract, or engagement on the resume."""

    slug: str
    company: str
    position: str
    start_date: str
    persona: str
    title: str
    created_at: str
    end_date: Optional[str] = None
    current: bool = False
    location: Optional[str] = None
    remote: bool = False
    type: ResumeEntryType = ResumeEntryType.EMPLOYMENT
    skills: List[str] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    responsibilities: List[str] = field(default_factory=list)
    technologies: List[str] = field(default_factory=list)
    team_size: Optional[int] = None
    description: Optional[str] = None
    draft: bool = False
    updated_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured: bool = False

    @property
    def start_dt(self) -> Optional[datetime]:
        return parse_date(self.start_date)

    @property
    def end_dt(self) -> Optional[datetime]:
        return parse_date(self.end_date) if self.end_date else None

    @property
    def label(self) -> str:
        return f"'{self.position}' at {self.company}"


@dataclass(frozen=True)
class ContactSubmission:
    """A contact form submission (never persisted)."""

    name: str
    email: str
    message: str
    subject: Optional[str] = None
    persona: Optional[str] = None
    honeypot: Optional[str] = None
    timestamp: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class ContentGraph:
    """
    Snapshot of all validated content, used for cross-reference checks.

    Drafts are included: the cross-reference validator needs them to tell
    a broken reference from a reference to unpublished content.
    """

    personas: List[Persona] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    blog_articles: List[BlogArticle] = field(default_factory=list)
    portfolio_collections: List[PortfolioCollection] = field(default_factory=list)
    portfolio_items: List[PortfolioItem] = field(default_factory=list)
    resume_entries: List[ResumeEntry] = field(default_factory=list)
