#!/usr/bin/env python3
"""
resume.py
---------
Resume entry aggregation.

Filtering by skill matches both the entry's skill keys and its free-form
technologies list.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

# --- Local imports ---
from folio.aggregation.base import (
    ContentAggregator,
    FilterSet,
    SortConfig,
    SortDirection,
    matches_search,
    parse_filter_enum,
)
from folio.models import ResumeEntry, ResumeEntryType
from folio.utils.dates import sort_by_start_date


class ResumeSortField(str, Enum):
    START_DATE = "startDate"
    END_DATE = "endDate"
    COMPANY = "company"
    POSITION = "position"

    @classmethod
    def choices(cls) -> List[str]:
        return [sort_field.value for sort_field in cls]


@dataclass
class ResumeFilters(FilterSet):
    persona: Optional[str] = None
    type: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    current: Optional[bool] = None
    remote: Optional[bool] = None
    search: Optional[str] = None

    def validate(self) -> None:
        parse_filter_enum(self.type, ResumeEntryType, "type")


class ResumeAggregator(ContentAggregator[ResumeEntry, ResumeFilters]):
    filter_type = ResumeFilters
    sort_field_type = ResumeSortField
    default_sort = SortConfig(ResumeSortField.START_DATE, SortDirection.DESC)
    sort_accessors = {
        ResumeSortField.START_DATE: lambda entry: entry.start_dt,
        ResumeSortField.END_DATE: lambda entry: entry.end_dt,
        ResumeSortField.COMPANY: lambda entry: entry.company,
        ResumeSortField.POSITION: lambda entry: entry.position,
    }

    def identity(self, item: ResumeEntry) -> str:
        return item.slug

    def matches(self, item: ResumeEntry, filters: ResumeFilters) -> bool:
        if filters.persona and item.persona != filters.persona:
            return False
        if filters.type and item.type != ResumeEntryType(filters.type):
            return False
        if filters.skills and not set(filters.skills) & (set(item.skills) | set(item.technologies)):
            return False
        if filters.current is not None and item.current != filters.current:
            return False
        if filters.remote is not None and item.remote != filters.remote:
            return False
        return matches_search(
            filters.search,
            item.position,
            item.company,
            item.description,
            item.achievements,
            item.responsibilities,
        )

    def get_employment_types(self) -> List[str]:
        return sorted({item.type.value for item in self.items})

    def get_companies(self) -> List[str]:
        return sorted({item.company for item in self.items})

    def group_by_type(self) -> Dict[str, List[ResumeEntry]]:
        """Entries keyed by type value, each group newest first."""
        grouped: Dict[str, List[ResumeEntry]] = {}
        for item in self.items:
            grouped.setdefault(item.type.value, []).append(item)
        return {
            entry_type: sort_by_start_date(entries, descending=True)
            for entry_type, entries in grouped.items()
        }
