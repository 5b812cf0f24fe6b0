#!/usr/bin/env python3
"""
portfolio.py
------------
Portfolio item aggregation, with collection listings.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

# --- Local imports ---
from folio.aggregation.base import (
    COLLECTION_WEIGHT,
    PERSONA_WEIGHT,
    TAG_WEIGHT,
    ContentAggregator,
    FilterSet,
    SortConfig,
    SortDirection,
    matches_any_tag,
    matches_search,
    shared_tags,
    sort_by,
)
from folio.models import PortfolioCollection, PortfolioItem


class PortfolioSortField(str, Enum):
    SORT_ORDER = "sortOrder"
    CREATED_AT = "createdAt"
    TITLE = "title"

    @classmethod
    def choices(cls) -> List[str]:
        return [sort_field.value for sort_field in cls]


@dataclass
class PortfolioFilters(FilterSet):
    collection: Optional[str] = None
    persona: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured: Optional[bool] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class CollectionCount:
    """A collection next to the number of published items it really has."""

    collection: PortfolioCollection
    actual_item_count: int

    @property
    def count_matches(self) -> bool:
        return self.collection.item_count == self.actual_item_count


class PortfolioAggregator(ContentAggregator[PortfolioItem, PortfolioFilters]):
    filter_type = PortfolioFilters
    sort_field_type = PortfolioSortField
    default_sort = SortConfig(PortfolioSortField.SORT_ORDER, SortDirection.ASC)
    sort_accessors = {
        PortfolioSortField.SORT_ORDER: lambda item: item.sort_order,
        PortfolioSortField.CREATED_AT: lambda item: item.created_dt,
        PortfolioSortField.TITLE: lambda item: item.title,
    }

    def __init__(
        self,
        items: Iterable[PortfolioItem],
        collections: Iterable[PortfolioCollection] = (),
    ):
        super().__init__(items)
        self.collections: List[PortfolioCollection] = [
            collection for collection in collections if not collection.draft
        ]

    def identity(self, item: PortfolioItem) -> Tuple[str, str]:
        return item.collection, item.slug

    def matches(self, item: PortfolioItem, filters: PortfolioFilters) -> bool:
        if filters.collection and item.collection != filters.collection:
            return False
        if filters.persona and item.persona != filters.persona:
            return False
        if not matches_any_tag(item.tags, filters.tags):
            return False
        if filters.featured is not None and item.featured != filters.featured:
            return False
        return matches_search(filters.search, item.title, item.description)

    def get_collections_with_counts(self) -> List[CollectionCount]:
        """Published collections in sortOrder, each with its real item count."""
        ordered = sort_by(self.collections, lambda collection: collection.sort_order)
        return [
            CollectionCount(
                collection,
                sum(1 for item in self.items if item.collection == collection.key),
            )
            for collection in ordered
        ]

    def get_items_by_collection(self, collection_key: str) -> List[PortfolioItem]:
        return sort_by(
            [item for item in self.items if item.collection == collection_key],
            lambda item: item.sort_order,
        )

    @staticmethod
    def relatedness(item: PortfolioItem, other: PortfolioItem) -> int:
        """Same collection 5, same persona 3, plus 1 per shared tag."""
        score = 0
        if item.collection == other.collection:
            score += COLLECTION_WEIGHT
        if item.persona == other.persona:
            score += PERSONA_WEIGHT
        score += TAG_WEIGHT * shared_tags(item.tags, other.tags)
        return score

    def get_related_items(self, item: PortfolioItem, limit: int = 3) -> List[PortfolioItem]:
        return self.rank_related(item, self.relatedness, limit)
