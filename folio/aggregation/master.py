#!/usr/bin/env python3
"""
master.py
---------
One entry point over every content aggregator, built from a ContentGraph.

Usage:
    master = MasterContentAggregator.from_graph(graph)
    persona = master.get_primary_persona()
    summary = master.get_persona_content_summary(persona.key)
    latest = master.blog.aggregate(pagination=Pagination(limit=5))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

# --- Local imports ---
from folio.aggregation.blog import BlogAggregator
from folio.aggregation.portfolio import PortfolioAggregator
from folio.aggregation.resume import ResumeAggregator
from folio.aggregation.skills import SkillAggregator
from folio.models import (
    BlogArticle,
    ContentGraph,
    Persona,
    PortfolioCollection,
    PortfolioItem,
    ResumeEntry,
    Skill,
)


@dataclass(frozen=True)
class PersonaContentSummary:
    """Published content counts for one persona."""

    blog_count: int
    portfolio_count: int
    resume_count: int
    skill_count: int

    @property
    def total(self) -> int:
        return self.blog_count + self.portfolio_count + self.resume_count + self.skill_count

    def to_dict(self) -> Dict[str, int]:
        return {
            "blogCount": self.blog_count,
            "portfolioCount": self.portfolio_count,
            "resumeCount": self.resume_count,
            "skillCount": self.skill_count,
        }


class MasterContentAggregator:
    """Holds one aggregator per content type plus the published personas."""

    def __init__(
        self,
        blog: Iterable[BlogArticle] = (),
        portfolio_items: Iterable[PortfolioItem] = (),
        portfolio_collections: Iterable[PortfolioCollection] = (),
        resume: Iterable[ResumeEntry] = (),
        skills: Iterable[Skill] = (),
        personas: Iterable[Persona] = (),
    ):
        self.blog = BlogAggregator(blog)
        self.portfolio = PortfolioAggregator(portfolio_items, portfolio_collections)
        self.resume = ResumeAggregator(resume)
        self.skills = SkillAggregator(skills)
        self.personas: List[Persona] = [persona for persona in personas if not persona.draft]

    @classmethod
    def from_graph(cls, graph: ContentGraph) -> "MasterContentAggregator":
        return cls(
            blog=graph.blog_articles,
            portfolio_items=graph.portfolio_items,
            portfolio_collections=graph.portfolio_collections,
            resume=graph.resume_entries,
            skills=graph.skills,
            personas=graph.personas,
        )

    def get_primary_persona(self) -> Optional[Persona]:
        return next((persona for persona in self.personas if persona.primary), None)

    def get_persona(self, key: str) -> Optional[Persona]:
        return next((persona for persona in self.personas if persona.key == key), None)

    def get_persona_content_summary(self, persona_key: str) -> PersonaContentSummary:
        def count(items) -> int:
            return sum(1 for item in items if item.persona == persona_key)

        return PersonaContentSummary(
            blog_count=count(self.blog.items),
            portfolio_count=count(self.portfolio.items),
            resume_count=count(self.resume.items),
            skill_count=count(self.skills.items),
        )
