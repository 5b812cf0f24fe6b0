#!/usr/bin/env python3
"""
transformation.py
-----------------
Derived fields for Markdown content: reading time, excerpts, tables of
contents, link/image inventories, Markdown lint, readability, keywords.

Everything here is a pure function of the text it receives. The
ContentTransformer bundles all derivations for a blog article.

Readability and word counts use textstat; Markdown syntax is stripped
with folio.utils.md before anything is counted.

Usage:
    from folio.content.transformation import ContentTransformer

    processed = ContentTransformer().process_article(article, body)
    print(processed.excerpt, format_reading_time(processed.reading_time.minutes))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

# --- Third party imports ---
import textstat  # type: ignore

# --- Local imports ---
from folio.configs import EXCERPT, READING, ExcerptConfig, ReadingConfig
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.models.content import BlogArticle
from folio.utils.md import FENCED_CODE, extract_code, strip_frontmatter, strip_markdown
from folio.utils.slugify import heading_anchor

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)(?:\s+\"([^\"]*)\")?\)")
LINK_PATTERN = re.compile(r"(?<!!)\[([^\]]+)\]\(([^)\s]+)(?:\s+\"([^\"]*)\")?\)")
FENCE_PATTERN = re.compile(r"```")
TABLE_ROW = re.compile(r"^\s*\|.*\|\s*$", re.MULTILINE)
SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
SMART_CUT_RATIO = 0.8

STOPWORDS = frozenset(
    """
    the a an and or but in on at to for of with by is are was were be been
    have has had do did will would could should can may might this that
    these those i you he she it we they me him her us them my your his its
    our their about above below up down out off over under again further
    then once here there when where why how all any both each few more most
    other some such no nor not only own same so than too very just now
    """.split()
)


# ----- Reading time -----


@dataclass(frozen=True)
class ReadingTime:
    minutes: int
    words: int
    characters: int
    reading_speed: int


def calculate_reading_time(
    text: str,
    speed: str = "average",
    include_code_blocks: bool = True,
    include_tables: bool = True,
    code_reading_factor: Optional[float] = None,
    config: ReadingConfig = READING,
) -> ReadingTime:
    """
    Estimate reading time for Markdown text.

    Prose words are counted after Markdown syntax is stripped. Code
    (fenced blocks and inline spans) counts at `code_reading_factor`
    weight when included, and is ignored otherwise. The result is
    rounded up to whole minutes, never below one.

    Args:
        text: Markdown body
        speed: One of the configured speeds ('slow', 'average', 'fast')
        include_code_blocks: Count code at reduced weight
        include_tables: Count table rows
        code_reading_factor: Weight for code words (default from config)
        config: Reading speeds

    Returns:
        ReadingTime

    Raises:
        ValueError: If `speed` is not a configured speed
    """
    if speed not in config.speeds:
        raise ValueError(
            f"Unknown reading speed '{speed}'. Valid speeds: {', '.join(config.speeds)}"
        )
    factor = config.code_reading_factor if code_reading_factor is None else code_reading_factor

    prose, code = extract_code(text)
    code_words = 0
    if include_code_blocks:
        code_words = round(sum(len(c.strip("`").split()) for c in code) * factor)

    if not include_tables:
        prose = TABLE_ROW.sub("", prose)

    words = textstat.lexicon_count(strip_markdown(prose), removepunct=True) + code_words
    wpm = config.speeds[speed]
    return ReadingTime(
        minutes=max(1, math.ceil(words / wpm)),
        words=words,
        characters=len(text),
        reading_speed=wpm,
    )


def format_reading_time(minutes: int) -> str:
    """
    Render minutes for display.

    Examples:
        >>> format_reading_time(0)
        'Less than a minute'
        >>> format_reading_time(1)
        '1 minute read'
        >>> format_reading_time(65)
        '1 hour 5 minutes read'
        >>> format_reading_time(120)
        '2 hours read'
    """
    if minutes < 1:
        return "Less than a minute"
    if minutes == 1:
        return "1 minute read"
    if minutes < 60:
        return f"{minutes} minutes read"

    hours, rest = divmod(minutes, 60)
    hour_label = "1 hour" if hours == 1 else f"{hours} hours"
    if rest == 0:
        return f"{hour_label} read"
    minute_label = "1 minute" if rest == 1 else f"{rest} minutes"
    return f"{hour_label} {minute_label} read"


# ----- Excerpts -----


def _split_sentences(text: str) -> List[str]:
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


def generate_excerpt(
    content: str,
    max_length: int = EXCERPT.max_length,
    max_sentences: int = EXCERPT.max_sentences,
    preserve_formatting: bool = False,
    strip_code_blocks: bool = True,
    smart_truncation: bool = True,
) -> str:
    """
    Build an excerpt from Markdown.

    Whole sentences are accumulated while both budgets allow. When not
    even the first sentence fits, it is truncated at `max_length`. Smart
    truncation backs up to the last word boundary instead, as long as that
    keeps more than 80% of the budget. An ellipsis is appended.

    Args:
        content: Markdown, optionally with frontmatter
        max_length: Character budget
        max_sentences: Sentence budget
        preserve_formatting: Keep Markdown syntax
        strip_code_blocks: Drop code before excerpting
        smart_truncation: Cut at word boundaries

    Returns:
        Excerpt (empty for empty content)
    """
    text = strip_frontmatter(content)
    if strip_code_blocks:
        text, _ = extract_code(text)
    text = text.strip() if preserve_formatting else strip_markdown(text)

    sentences = _split_sentences(text)
    excerpt = ""
    for count, sentence in enumerate(sentences):
        if not sentence.endswith((".", "!", "?")):
            sentence += "."
        candidate = f"{excerpt} {sentence}" if excerpt else sentence
        if count >= max_sentences or len(candidate) > max_length:
            break
        excerpt = candidate

    if excerpt or not sentences:
        return excerpt

    first = sentences[0]
    truncated = first[:max_length]
    if smart_truncation and len(first) > max_length:
        boundary = truncated.rfind(" ")
        if boundary > max_length * SMART_CUT_RATIO:
            truncated = truncated[:boundary]
    return truncated.rstrip(" ,;:") + "..."


def generate_article_excerpt(
    article: BlogArticle, content: str, config: ExcerptConfig = EXCERPT
) -> str:
    """Author excerpt verbatim, else a generated article-length excerpt."""
    if article.excerpt:
        return article.excerpt
    return generate_excerpt(
        content,
        max_length=config.article_max_length,
        max_sentences=config.article_max_sentences,
        smart_truncation=True,
    )


# ----- Structure -----


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    slug: str
    line: int


@dataclass
class TocEntry:
    level: int
    text: str
    slug: str
    children: List["TocEntry"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "text": self.text,
            "slug": self.slug,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class TableOfContents:
    entries: List[TocEntry] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        return bool(self.entries)


@dataclass(frozen=True)
class MarkdownImage:
    alt: str
    src: str
    title: Optional[str]
    line: int


@dataclass(frozen=True)
class MarkdownLink:
    text: str
    href: str
    title: Optional[str]
    line: int

    @property
    def is_external(self) -> bool:
        return self.href.startswith(("http", "//"))


def _prose_lines(content: str) -> Iterable[Tuple[int, str]]:
    """Yield (line_number, line) pairs outside fenced code blocks."""
    in_fence = False
    for number, line in enumerate(content.split("\n"), 1):
        if line.lstrip().startswith("```"):
            in_fence = not in_fence
            continue
        if not in_fence:
            yield number, line


def extract_headings(content: str) -> List[Heading]:
    """ATX headings (`#` to `######`) outside code fences."""
    headings = []
    for number, line in _prose_lines(content):
        match = HEADING_PATTERN.match(line)
        if match:
            text = match.group(2).strip()
            headings.append(Heading(len(match.group(1)), text, heading_anchor(text), number))
    return headings


def generate_table_of_contents(
    content: str,
    max_depth: int = 6,
    min_headings: int = 2,
    include_level1: bool = False,
) -> TableOfContents:
    """
    Build a nested table of contents.

    A heading closes every open entry at its own level or deeper before
    attaching to the nearest shallower one. Fewer than `min_headings`
    qualifying headings yields an empty table.
    """
    headings = [
        h
        for h in extract_headings(content)
        if h.level <= max_depth and (include_level1 or h.level > 1)
    ]
    if len(headings) < min_headings:
        return TableOfContents()

    toc = TableOfContents()
    stack: List[TocEntry] = []
    for heading in headings:
        entry = TocEntry(heading.level, heading.text, heading.slug)
        while stack and stack[-1].level >= heading.level:
            stack.pop()
        if stack:
            stack[-1].children.append(entry)
        else:
            toc.entries.append(entry)
        stack.append(entry)
    return toc


def extract_images(content: str) -> List[MarkdownImage]:
    images = []
    for number, line in _prose_lines(content):
        for match in IMAGE_PATTERN.finditer(line):
            images.append(MarkdownImage(match.group(1), match.group(2), match.group(3), number))
    return images


def extract_links(content: str) -> List[MarkdownLink]:
    links = []
    for number, line in _prose_lines(content):
        for match in LINK_PATTERN.finditer(line):
            links.append(MarkdownLink(match.group(1), match.group(2), match.group(3), number))
    return links


# ----- Markdown lint -----


@dataclass(frozen=True)
class MarkdownStats:
    headings: int
    images: int
    links: int
    code_blocks: int
    words: int


@dataclass
class MarkdownValidation:
    valid: bool
    errors: List[str]
    warnings: List[str]
    stats: MarkdownStats


def validate_markdown(content: str, min_words: int = 100) -> MarkdownValidation:
    """
    Lint Markdown.

    Error: odd number of ``` fences.
    Warnings: images without alt text, relative links that are neither
    anchors nor root-relative, skipped heading levels, fewer than
    `min_words` words.
    """
    errors: List[str] = []
    warnings: List[str] = []

    headings = extract_headings(content)
    images = extract_images(content)
    links = extract_links(content)
    fences = len(FENCE_PATTERN.findall(content))
    words = len(re.sub(r"[^\w\s]", " ", FENCED_CODE.sub("", content)).split())

    if fences % 2:
        errors.append("Unmatched code block delimiters (```)")

    missing_alt = sum(1 for image in images if not image.alt.strip())
    if missing_alt:
        warnings.append(f"{missing_alt} images missing alt text")

    suspicious = sum(
        1
        for link in links
        if not link.is_external and not link.href.startswith(("#", "/", "mailto:"))
    )
    if suspicious:
        warnings.append(f"{suspicious} potentially malformed internal links")

    skips = sum(
        1
        for previous, heading in zip(headings, headings[1:])
        if heading.level > previous.level + 1
    )
    if skips:
        warnings.append(f"{skips} heading hierarchy issues (skipped levels)")

    if words < min_words:
        warnings.append(f"Content is very short (less than {min_words} words)")

    return MarkdownValidation(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        stats=MarkdownStats(len(headings), len(images), len(links), fences // 2, words),
    )


# ----- Text analysis -----


@dataclass(frozen=True)
class ComplexityAnalysis:
    flesch_reading_ease: float
    flesch_kincaid_grade: float
    average_words_per_sentence: float
    average_syllables_per_word: float
    readability_level: str


READABILITY_LEVELS = [
    (90, "very easy"),
    (80, "easy"),
    (70, "fairly easy"),
    (60, "standard"),
    (50, "fairly difficult"),
    (30, "difficult"),
]


def readability_level(score: float) -> str:
    """Map a Flesch reading-ease score onto its conventional band."""
    for threshold, label in READABILITY_LEVELS:
        if score >= threshold:
            return label
    return "very difficult"


def analyze_complexity(text: str) -> ComplexityAnalysis:
    """
    Readability metrics for Markdown prose (code and syntax removed).

    Text with no words returns zeros and the level 'unknown'.
    """
    prose = strip_markdown(extract_code(text)[0])
    words = textstat.lexicon_count(prose, removepunct=True)
    if words == 0:
        return ComplexityAnalysis(0.0, 0.0, 0.0, 0.0, "unknown")

    sentences = max(1, textstat.sentence_count(prose))
    syllables = textstat.syllable_count(prose)
    ease = textstat.flesch_reading_ease(prose)
    return ComplexityAnalysis(
        flesch_reading_ease=round(ease, 1),
        flesch_kincaid_grade=round(textstat.flesch_kincaid_grade(prose), 1),
        average_words_per_sentence=round(words / sentences, 1),
        average_syllables_per_word=round(syllables / words, 1),
        readability_level=readability_level(ease),
    )


@dataclass(frozen=True)
class Keyword:
    word: str
    frequency: int
    score: int


def extract_keywords(
    text: str,
    min_length: int = 3,
    max_keywords: int = 10,
    exclude_common: bool = True,
) -> List[Keyword]:
    """
    Rank words by frequency, with a +2 bonus for words over 6 characters.

    Ties keep first-appearance order.
    """
    tokens = re.sub(r"[^\w\s]", " ", text.lower()).split()
    counts = Counter(
        token
        for token in tokens
        if len(token) >= min_length and not (exclude_common and token in STOPWORDS)
    )
    keywords = [
        Keyword(word, frequency, frequency + (2 if len(word) > 6 else 0))
        for word, frequency in counts.items()
    ]
    keywords.sort(key=lambda k: -k.score)
    return keywords[:max_keywords]


# ----- Pipeline -----


@dataclass
class ProcessedArticle:
    """Every derived field for one article."""

    content: str
    excerpt: str
    reading_time: ReadingTime
    toc: TableOfContents
    validation: MarkdownValidation
    analysis: ComplexityAnalysis
    keywords: List[Keyword]


class ContentTransformer:
    """Runs every derivation over blog article bodies."""

    def __init__(
        self,
        reading: ReadingConfig = READING,
        excerpt: ExcerptConfig = EXCERPT,
        logger: Optional[FolioLogger] = None,
    ):
        self.reading = reading
        self.excerpt = excerpt
        self.logger = logger

    def process_content(self, content: str, excerpt: Optional[str] = None) -> ProcessedArticle:
        """
        Derive every field from a Markdown body.

        Args:
            content: Markdown body (frontmatter is ignored)
            excerpt: Author-written excerpt; generated when None
        """
        if excerpt is None:
            excerpt = generate_excerpt(
                content,
                max_length=self.excerpt.article_max_length,
                max_sentences=self.excerpt.article_max_sentences,
            )
        return ProcessedArticle(
            content=content,
            excerpt=excerpt,
            reading_time=calculate_reading_time(content, config=self.reading),
            toc=generate_table_of_contents(content),
            validation=validate_markdown(content),
            analysis=analyze_complexity(content),
            keywords=extract_keywords(content),
        )

    def process_article(self, article: BlogArticle, content: str) -> ProcessedArticle:
        processed = self.process_content(
            content, generate_article_excerpt(article, content, self.excerpt)
        )
        for warning in processed.validation.warnings:
            safe_logger(self.logger).log_debug(
                f"Markdown warning in '{article.slug}'", {"warning": warning}
            )
        return processed

    def batch_process(
        self, articles: Iterable[Tuple[BlogArticle, str]]
    ) -> List[Tuple[BlogArticle, ProcessedArticle]]:
        """Process (article, body) pairs in order."""
        results = [(article, self.process_article(article, body)) for article, body in articles]
        safe_logger(self.logger).log_operation(
            "batch_process_articles", {"articles": len(results)}
        )
        return results
