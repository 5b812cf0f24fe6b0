#!/usr/bin/env python3
"""
slugify.py
----------
Slug utilities for content keys, article slugs, and heading anchors.

Every Folio entity is addressed by a lowercase kebab-case slug
(`getting-started-with-typescript`). These helpers produce and check
that format.

Key Features:
    - Slug format check (`^[a-z0-9]+(-[a-z0-9]+)*$`)
    - Title to slug conversion (ASCII only, punctuation dropped)
    - Heading anchors for tables of contents

Usage:
    from folio.utils.slugify import normalize_slug, is_valid_slug

    slug = normalize_slug("Getting Started with TypeScript!")
    # "getting-started-with-typescript"
    is_valid_slug(slug)  # True
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def is_valid_slug(slug: str) -> bool:
    """
    Check that a string is a lowercase kebab-case slug.

    Examples:
        >>> is_valid_slug("my-first-post")
        True
        >>> is_valid_slug("My_Post")
        False
        >>> is_valid_slug("trailing-")
        False
    """
    return isinstance(slug, str) and bool(SLUG_PATTERN.match(slug))


def normalize_slug(text: str) -> str:
    """
    Convert a title into a slug.

    Lowercases, drops everything except ASCII letters, digits, whitespace
    and hyphens, then collapses whitespace and hyphen runs into single
    hyphens.

    Args:
        text: Title or label

    Returns:
        Slug (may be empty if nothing usable remains)

    Examples:
        >>> normalize_slug("Getting Started with TypeScript!")
        'getting-started-with-typescript'
        >>> normalize_slug("  Hello -- World  ")
        'hello-world'
    """
    if not text:
        return ""

    text = text.lower().strip()
    text = re.sub(r"[^a-z0-9\s-]", "", text)
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def heading_anchor(text: str) -> str:
    """
    Build the anchor id for a Markdown heading.

    Lowercases, drops non-word characters (keeping whitespace and
    hyphens), turns whitespace runs into hyphens, and trims hyphens.

    Examples:
        >>> heading_anchor("Getting Started")
        'getting-started'
        >>> heading_anchor("What's new in v2.0?")
        'whats-new-in-v20'
    """
    anchor = re.sub(r"[^\w\s-]", "", text.lower())
    anchor = re.sub(r"\s+", "-", anchor)
    anchor = re.sub(r"-+", "-", anchor)
    return anchor.strip("-")
