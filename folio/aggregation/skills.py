#!/usr/bin/env python3
"""
skills.py
---------
Skill aggregation. Proficiency sorts by level (beginner → expert), not
alphabetically.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
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
    sort_by,
)
from folio.models import Proficiency, Skill, SkillCategory


class SkillSortField(str, Enum):
    CATEGORY = "category"
    NAME = "name"
    PROFICIENCY = "proficiency"
    YEARS_EXPERIENCE = "yearsExperience"

    @classmethod
    def choices(cls) -> List[str]:
        return [sort_field.value for sort_field in cls]


@dataclass
class SkillFilters(FilterSet):
    persona: Optional[str] = None
    category: Optional[str] = None
    proficiency: Optional[str] = None
    min_years: Optional[float] = None
    search: Optional[str] = None

    def validate(self) -> None:
        parse_filter_enum(self.category, SkillCategory, "category")
        parse_filter_enum(self.proficiency, Proficiency, "proficiency")


class SkillAggregator(ContentAggregator[Skill, SkillFilters]):
    filter_type = SkillFilters
    sort_field_type = SkillSortField
    default_sort = SortConfig(SkillSortField.CATEGORY, SortDirection.ASC)
    sort_accessors = {
        SkillSortField.CATEGORY: lambda skill: skill.category.value,
        SkillSortField.NAME: lambda skill: skill.name,
        SkillSortField.PROFICIENCY: lambda skill: skill.proficiency.rank,
        SkillSortField.YEARS_EXPERIENCE: lambda skill: skill.years_experience,
    }

    def identity(self, item: Skill) -> str:
        return item.key

    def matches(self, item: Skill, filters: SkillFilters) -> bool:
        if filters.persona and item.persona != filters.persona:
            return False
        if filters.category and item.category != SkillCategory(filters.category):
            return False
        if filters.proficiency and item.proficiency != Proficiency(filters.proficiency):
            return False
        if filters.min_years is not None and (item.years_experience or 0) < filters.min_years:
            return False
        return matches_search(filters.search, item.name, item.description)

    def group_by_category(self) -> Dict[str, List[Skill]]:
        """Skills keyed by category value, each group sorted by name."""
        grouped: Dict[str, List[Skill]] = {}
        for skill in self.items:
            grouped.setdefault(skill.category.value, []).append(skill)
        return {
            category: sort_by(skills, lambda skill: skill.name)
            for category, skills in grouped.items()
        }

    def get_proficiency_distribution(self) -> Dict[str, int]:
        """Count per proficiency level, every level present (lowest first)."""
        distribution = {level.value: 0 for level in Proficiency}
        for skill in self.items:
            distribution[skill.proficiency.value] += 1
        return distribution
