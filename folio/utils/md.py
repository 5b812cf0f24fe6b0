#!/usr/bin/env python3
"""
md.py
-------------------
Markdown-specific utilities for Folio content files.

Provides functions for reading Markdown with YAML frontmatter and for
reducing Markdown to plain prose, including:
- Frontmatter extraction and splitting
- Code span / fenced block extraction
- Markdown syntax stripping for word counts and excerpts

This module handles Markdown structure only; metrics built on top of the
plain text live in folio.content.transformation.
"""
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import List, Tuple

FENCED_CODE = re.compile(r"```[\s\S]*?```")
INLINE_CODE = re.compile(r"`[^`]+`")
FRONTMATTER_BLOCK = re.compile(r"^---[\s\S]*?---\n?")

# Order matters: images before links, bold before italic.
_SYNTAX_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"!\[[^\]]*\]\([^)]*\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"#+\s"), ""),
    (re.compile(r">\s"), ""),
    (re.compile(r"^\s*[-*+]\s", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s", re.MULTILINE), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"~~(.*?)~~"), r"\1"),
]


# ----- YAML Frontmatter Parsing -----
def split_frontmatter(content: str) -> tuple[str, List[str]]:
    """
    Split markdown content into YAML frontmatter and body.

    Expected format:
        ---
        yaml: content
        ---

        Body content here...

    Args:
        content: Full markdown file content

    Returns:
        Tuple of (frontmatter_text, body_lines)
        - frontmatter_text: YAML content as string (empty if no frontmatter)
        - body_lines: List of body content lines

    Examples:
        >>> content = "---\\ntitle: Hello\\n---\\n\\nBody text"
        >>> fm, body = split_frontmatter(content)
        >>> fm
        'title: Hello'
        >>> body
        ['Body text']
    """
    lines = content.splitlines()

    if not lines or lines[0].strip() != "---":
        return "", lines

    frontmatter_end = None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == "---":
            frontmatter_end = i
            break

    if frontmatter_end is None:
        return "", lines

    frontmatter_lines = lines[1:frontmatter_end]
    body_lines = lines[frontmatter_end + 1 :]

    while body_lines and body_lines[0].strip() == "":
        body_lines.pop(0)

    return "\n".join(frontmatter_lines), body_lines


def strip_frontmatter(content: str) -> str:
    """Remove a leading `---` frontmatter block from text, if present."""
    return FRONTMATTER_BLOCK.sub("", content.strip(), count=1)


# ----- Code -----
def extract_code(text: str) -> Tuple[str, List[str]]:
    """
    Pull fenced blocks and inline code spans out of Markdown.

    Args:
        text: Markdown text

    Returns:
        Tuple of (text_without_code, code_fragments)
    """
    fragments = FENCED_CODE.findall(text)
    remaining = FENCED_CODE.sub("", text)
    fragments.extend(INLINE_CODE.findall(remaining))
    remaining = INLINE_CODE.sub("", remaining)
    return remaining, fragments


# ----- Plain text -----
def strip_markdown(text: str) -> str:
    """
    Reduce Markdown to prose.

    Removes headings markers, emphasis, images, blockquote and list
    markers; keeps link text. Newline runs collapse into single spaces.

    Examples:
        >>> strip_markdown("# Title\\n\\nSome **bold** [link](/x).")
        'Title Some bold link.'
    """
    for pattern, replacement in _SYNTAX_RULES:
        text = pattern.sub(replacement, text)
    return re.sub(r"\n+", " ", text).strip()


def count_words(text: str) -> int:
    """Count whitespace-separated tokens."""
    return len(text.split())
