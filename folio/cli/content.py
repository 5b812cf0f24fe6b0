"""
Content Commands
----------------

Commands:
    - analyze: Reading time, excerpt, outline, lint and readability for one article
    - list: Filter, sort and paginate published content
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# --- Third party imports ---
import click

# --- Local imports ---
from folio.aggregation import MasterContentAggregator, Pagination
from folio.cli.common import echo_json, load_validated_content, read_text_file
from folio.content.transformation import (
    ContentTransformer,
    ProcessedArticle,
    TocEntry,
    format_reading_time,
)
from folio.core.cli_options import (
    content_dir_option,
    json_option,
    limit_option,
    page_option,
    persona_option,
)
from folio.core.results import parse_yaml
from folio.utils.dates import format_for_display
from folio.utils.md import split_frontmatter
from folio.validators.schema import validate_blog_article

CONTENT_TYPES = ("blog", "portfolio", "resume", "skills")


@click.group("content")
def content_group() -> None:
    """Inspect and list content."""


@content_group.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@json_option
@click.pass_context
def analyze(ctx: click.Context, file_path: str, as_json: bool) -> None:
    """
    Analyze one Markdown article.

    When the frontmatter is a valid blog article, its excerpt (if any) is
    used; otherwise the body is analyzed on its own.
    """
    logger = ctx.obj["logger"]
    config = ctx.obj["config"]
    path = Path(file_path)

    frontmatter, body_lines = split_frontmatter(read_text_file(path))
    body = "\n".join(body_lines)

    transformer = ContentTransformer(config.reading, config.excerpt, logger)
    article = None
    if frontmatter:
        parsed = parse_yaml(frontmatter)
        if parsed.ok:
            result = validate_blog_article(parsed.value)
            article = result.data if result.success else None

    if article is not None:
        processed = transformer.process_article(article, body)
    else:
        processed = transformer.process_content(body)

    if as_json:
        payload = asdict(processed)
        payload.pop("content")
        echo_json(payload)
        return

    click.echo(format_analysis(path.name, processed))


def _toc_lines(entries: List[TocEntry], depth: int = 0) -> List[str]:
    lines = []
    for entry in entries:
        lines.append(f"   {'  ' * depth}- {entry.text} (#{entry.slug})")
        lines.extend(_toc_lines(entry.children, depth + 1))
    return lines


def format_analysis(name: str, processed: ProcessedArticle) -> str:
    """Render a ProcessedArticle as a text report."""
    reading = processed.reading_time
    analysis = processed.analysis

    lines = []
    lines.append("\n" + "=" * 60)
    lines.append(f"ARTICLE ANALYSIS: {name}")
    lines.append("=" * 60)
    lines.append("")
    lines.append(f"Reading Time: {format_reading_time(reading.minutes)}")
    lines.append(f"Words: {reading.words} ({reading.reading_speed} wpm)")
    lines.append(f"Readability: {analysis.readability_level}")
    lines.append(f"   Flesch reading ease: {analysis.flesch_reading_ease}")
    lines.append(f"   Flesch-Kincaid grade: {analysis.flesch_kincaid_grade}")
    lines.append(f"   Words per sentence: {analysis.average_words_per_sentence}")
    lines.append("")
    lines.append("Excerpt:")
    lines.append(f"   {processed.excerpt or '(none)'}")
    lines.append("")

    if processed.toc.has_content:
        lines.append("Outline:")
        lines.extend(_toc_lines(processed.toc.entries))
        lines.append("")

    if processed.keywords:
        lines.append("Keywords: " + ", ".join(k.word for k in processed.keywords))
        lines.append("")

    validation = processed.validation
    if validation.errors or validation.warnings:
        for message in validation.errors:
            lines.append(f"❌ {message}")
        for message in validation.warnings:
            lines.append(f"⚠️  {message}")
    else:
        lines.append("✅ No Markdown issues found")

    lines.append("=" * 60)
    return "\n".join(lines)


@content_group.command("list")
@click.argument("content_type", type=click.Choice(CONTENT_TYPES))
@content_dir_option
@persona_option
@click.option("-t", "--tag", "tags", multiple=True, help="Tag to match (blog, portfolio)")
@click.option("-s", "--search", default=None, help="Case-insensitive text search")
@click.option("--sort", "sort_field", default=None, help="Sort field (e.g. title, publishedAt)")
@click.option("--desc", is_flag=True, help="Sort descending")
@page_option
@limit_option()
@json_option
@click.pass_context
def list_content(
    ctx: click.Context,
    content_type: str,
    content_dir: str,
    persona: Optional[str],
    tags: Tuple[str, ...],
    search: Optional[str],
    sort_field: Optional[str],
    desc: bool,
    page: int,
    limit: int,
    as_json: bool,
) -> None:
    """
    List published content of one type.

    Invalid records are skipped; run `folio validate content` to see why.
    """
    report = load_validated_content(ctx, content_dir)
    master = MasterContentAggregator.from_graph(report.graph)
    aggregator = getattr(master, content_type)

    filters: Dict[str, Any] = {"persona": persona, "search": search}
    if tags:
        filters["tags"] = list(tags)
    sort = {"field": sort_field, "direction": "desc" if desc else "asc"} if sort_field else None

    try:
        collection = aggregator.aggregate(filters, sort, Pagination(page=page, limit=limit))
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        echo_json(collection.to_dict())
        return

    for item in collection.items:
        click.echo(describe_item(content_type, item))
    click.echo(
        f"\nPage {collection.page} · {len(collection.items)} of {collection.total}"
        + (" · more available" if collection.has_more else "")
    )


def describe_item(content_type: str, item: Any) -> str:
    """One-line listing label per content type."""
    if content_type == "blog":
        when = item.published_at or item.created_at
        return f"{format_for_display(when, 'full')}  {item.slug}: {item.title}"
    if content_type == "portfolio":
        return f"{item.collection}/{item.slug}: {item.title}"
    if content_type == "resume":
        end = format_for_display(item.end_date) if item.end_date else "Present"
        return f"{format_for_display(item.start_date)} - {end}  {item.position} at {item.company}"
    return f"{item.category.value:<12} {item.name} ({item.proficiency.value})"
