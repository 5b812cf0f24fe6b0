#!/usr/bin/env python3
"""
blog.py
-------
Blog article aggregation: filters, sort fields, listings and related
articles.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

# --- Local imports ---
from folio.aggregation.base import (
    CATEGORY_WEIGHT,
    PERSONA_WEIGHT,
    SERIES_WEIGHT,
    TAG_WEIGHT,
    ContentAggregator,
    FilterSet,
    SortConfig,
    SortDirection,
    matches_any_tag,
    matches_search,
    parse_filter_date,
    shared_tags,
    sort_by,
)
from folio.models import BlogArticle


class BlogSortField(str, Enum):
    """Sortable blog fields. DATE is the publication date, else creation date."""

    DATE = "publishedAt"
    CREATED_AT = "createdAt"
    TITLE = "title"
    READING_TIME = "readingTime"

    @classmethod
    def choices(cls) -> List[str]:
        return [sort_field.value for sort_field in cls]


@dataclass
class BlogFilters(FilterSet):
    persona: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    series: Optional[str] = None
    featured: Optional[bool] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    search: Optional[str] = None

    def validate(self) -> None:
        parse_filter_date(self.date_from, "dateFrom")
        parse_filter_date(self.date_to, "dateTo")


@dataclass
class SeriesListing:
    """A series with its non-draft articles in part order."""

    name: str
    articles: List[BlogArticle]

    @property
    def count(self) -> int:
        return len(self.articles)


class BlogAggregator(ContentAggregator[BlogArticle, BlogFilters]):
    filter_type = BlogFilters
    sort_field_type = BlogSortField
    default_sort = SortConfig(BlogSortField.DATE, SortDirection.DESC)
    sort_accessors = {
        BlogSortField.DATE: lambda article: article.display_dt,
        BlogSortField.CREATED_AT: lambda article: article.created_dt,
        BlogSortField.TITLE: lambda article: article.title,
        BlogSortField.READING_TIME: lambda article: article.reading_time,
    }

    def matches(self, item: BlogArticle, filters: BlogFilters) -> bool:
        if filters.persona and item.persona != filters.persona:
            return False
        if filters.category and item.category != filters.category:
            return False
        if not matches_any_tag(item.tags, filters.tags):
            return False
        if filters.series and (item.series is None or item.series.name != filters.series):
            return False
        if filters.featured is not None and item.featured != filters.featured:
            return False

        date_from = parse_filter_date(filters.date_from, "dateFrom")
        date_to = parse_filter_date(filters.date_to, "dateTo")
        if date_from or date_to:
            when = item.display_dt
            if when is None:
                return False
            if date_from and when < date_from:
                return False
            if date_to and when > date_to:
                return False

        return matches_search(filters.search, item.title, item.description, item.excerpt)

    # ----- Listings -----

    def get_categories(self) -> List[str]:
        return sorted({item.category for item in self.items if item.category})

    def get_tags(self) -> List[str]:
        return sorted({tag for item in self.items for tag in item.tags})

    def get_series(self) -> List[SeriesListing]:
        """Series in first-appearance order, each sorted by part."""
        grouped: Dict[str, List[BlogArticle]] = {}
        for item in self.items:
            if item.series:
                grouped.setdefault(item.series.name, []).append(item)
        return [
            SeriesListing(name, sort_by(articles, lambda article: article.series.part))
            for name, articles in grouped.items()
        ]

    # ----- Relatedness -----

    @staticmethod
    def relatedness(article: BlogArticle, other: BlogArticle) -> int:
        """
        Weighted similarity: same series 5, same persona 3, same category 2,
        plus 1 per shared tag.
        """
        score = 0
        if article.series and other.series and article.series.name == other.series.name:
            score += SERIES_WEIGHT
        if article.persona == other.persona:
            score += PERSONA_WEIGHT
        if article.category and article.category == other.category:
            score += CATEGORY_WEIGHT
        score += TAG_WEIGHT * shared_tags(article.tags, other.tags)
        return score

    def identity(self, item: BlogArticle) -> str:
        return item.slug

    def get_related_articles(self, article: BlogArticle, limit: int = 3) -> List[BlogArticle]:
        return self.rank_related(article, self.relatedness, limit)
