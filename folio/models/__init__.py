"""
Content models for Folio.

Import the record types directly from this package:
    from folio.models import BlogArticle, ContentGraph, Proficiency
"""
from .enums import ErrorType, Proficiency, ResumeEntryType, Severity, SkillCategory
from .content import (
    BlogArticle,
    CameraSettings,
    Certification,
    ContactSubmission,
    ContentGraph,
    Coordinates,
    Equipment,
    Image,
    Location,
    Persona,
    PortfolioCollection,
    PortfolioItem,
    ResumeEntry,
    Series,
    Skill,
    SocialLinks,
)

__all__ = [
    "BlogArticle",
    "CameraSettings",
    "Certification",
    "ContactSubmission",
    "ContentGraph",
    "Coordinates",
    "Equipment",
    "ErrorType",
    "Image",
    "Location",
    "Persona",
    "PortfolioCollection",
    "PortfolioItem",
    "Proficiency",
    "ResumeEntry",
    "ResumeEntryType",
    "Series",
    "Severity",
    "Skill",
    "SkillCategory",
    "SocialLinks",
]
