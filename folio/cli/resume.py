"""
Resume Commands
---------------

Commands:
    - timeline: Career timeline with durations, gaps and overlaps
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Optional

# --- Third party imports ---
import click

# --- Local imports ---
from folio.cli.common import echo_json, load_validated_content
from folio.core.cli_options import content_dir_option, json_option, persona_option
from folio.utils.dates import (
    calculate_total_experience,
    detect_gaps,
    format_date_range,
    generate_career_timeline,
)


@click.group()
def resume() -> None:
    """Resume views."""


@resume.command()
@content_dir_option
@persona_option
@json_option
@click.pass_context
def timeline(
    ctx: click.Context, content_dir: str, persona: Optional[str], as_json: bool
) -> None:
    """
    Print the career timeline, newest first.

    Gaps longer than the configured threshold and overlapping entries are
    flagged.
    """
    config = ctx.obj["config"]
    report = load_validated_content(ctx, content_dir)

    entries = [
        entry
        for entry in report.graph.resume_entries
        if persona is None or entry.persona == persona
    ]
    rows = generate_career_timeline(entries)
    gaps = detect_gaps(entries, config.timeline.gap_threshold_months)
    experience = calculate_total_experience(entries)

    if as_json:
        echo_json(
            {
                "timeline": [
                    {
                        "slug": row.entry.slug,
                        "position": row.entry.position,
                        "company": row.entry.company,
                        "startDate": row.entry.start_date,
                        "endDate": row.entry.end_date,
                        "months": row.months,
                        "duration": row.formatted,
                        "active": row.is_active,
                        "overlaps": row.overlaps,
                    }
                    for row in rows
                ],
                "gaps": [
                    {"start": gap.start, "end": gap.end, "months": gap.months}
                    for gap in gaps
                ],
                "totalMonths": experience.total_months,
                "byType": experience.by_type,
            }
        )
        return

    if not rows:
        click.echo("No resume entries found")
        return

    for row in rows:
        entry = row.entry
        marker = "▶" if row.is_active else "•"
        click.echo(f"{marker} {entry.position} at {entry.company}")
        click.echo(f"   {format_date_range(entry.start_date, entry.end_date)} ({row.formatted})")
        for other in row.overlaps:
            click.echo(f"   ⚠️  Overlaps {other}")

    if gaps:
        click.echo("")
        for gap in gaps:
            click.echo(f"⚠️  {gap.description} ({gap.months} months)")

    click.echo("")
    click.echo(
        f"Total experience: {experience.total_years} years, "
        f"{experience.total_months % 12} months"
    )
