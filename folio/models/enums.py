"""
Enumeration Types
------------------

Closed value sets for the content models.

Enums:
    - SkillCategory: Kind of skill (language, framework, ...)
    - Proficiency: Self-assessed skill level, ordered
    - ResumeEntryType: Kind of engagement a resume entry describes
    - ErrorType / Severity: Error registry classification

These are the single source of truth for the schema validator's enum
checks and for the aggregators' filter values.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import List


class SkillCategory(str, Enum):
    """Category of a skill definition."""

    LANGUAGE = "language"
    FRAMEWORK = "framework"
    TOOL = "tool"
    METHODOLOGY = "methodology"
    SOFT_SKILL = "soft-skill"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available category choices."""
        return [category.value for category in cls]


class Proficiency(str, Enum):
    """
    Self-assessed proficiency, from lowest to highest.

    `rank` gives the ordinal used when sorting skills by proficiency.
    """

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available proficiency choices."""
        return [level.value for level in cls]

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)


class ResumeEntryType(str, Enum):
    """Kind of engagement a resume entry describes."""

    EMPLOYMENT = "employment"
    CONTRACT = "contract"
    FREELANCE = "freelance"
    VOLUNTEER = "volunteer"
    INTERNSHIP = "internship"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available entry type choices."""
        return [entry_type.value for entry_type in cls]

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        return self.value.title()


class ErrorType(str, Enum):
    """Error registry categories."""

    VALIDATION = "validation"
    CONTENT = "content"
    FORM = "form"
    EXTERNAL = "external"
    SYSTEM = "system"

    @classmethod
    def choices(cls) -> List[str]:
        return [error_type.value for error_type in cls]


class Severity(str, Enum):
    """Error severities, from least to most urgent."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def choices(cls) -> List[str]:
        return [severity.value for severity in cls]
