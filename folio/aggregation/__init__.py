"""
Content aggregation: filter, sort and paginate published content.
"""
from folio.aggregation.base import (
    ContentAggregator,
    ContentCollection,
    FilterSet,
    Pagination,
    SortConfig,
    SortDirection,
    compare_values,
    paginate,
    sort_by,
)
from folio.aggregation.blog import BlogAggregator, BlogFilters, BlogSortField, SeriesListing
from folio.aggregation.master import MasterContentAggregator, PersonaContentSummary
from folio.aggregation.portfolio import (
    CollectionCount,
    PortfolioAggregator,
    PortfolioFilters,
    PortfolioSortField,
)
from folio.aggregation.resume import ResumeAggregator, ResumeFilters, ResumeSortField
from folio.aggregation.skills import SkillAggregator, SkillFilters, SkillSortField

__all__ = [
    "ContentAggregator",
    "ContentCollection",
    "FilterSet",
    "Pagination",
    "SortConfig",
    "SortDirection",
    "compare_values",
    "paginate",
    "sort_by",
    "BlogAggregator",
    "BlogFilters",
    "BlogSortField",
    "SeriesListing",
    "PortfolioAggregator",
    "PortfolioFilters",
    "PortfolioSortField",
    "CollectionCount",
    "ResumeAggregator",
    "ResumeFilters",
    "ResumeSortField",
    "SkillAggregator",
    "SkillFilters",
    "SkillSortField",
    "MasterContentAggregator",
    "PersonaContentSummary",
]
