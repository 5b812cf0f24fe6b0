"""
Validation Commands
-------------------

Commands:
    - content: Validate a whole content directory
    - contact: Validate one contact-form submission file
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List

# --- Third party imports ---
import click

# --- Local imports ---
from folio.cli.common import echo_json, load_validated_content, read_text_file
from folio.core.cli_options import content_dir_option, json_option, strict_option
from folio.core.results import parse_json, parse_yaml
from folio.validators.content import format_content_report
from folio.validators.form import ContactFormValidator, FormValidationResult


@click.group()
def validate() -> None:
    """
    Validate content and contact submissions.

    Exits non-zero when errors are found; warnings are reported but only
    fail the run with --strict.
    """


@validate.command()
@content_dir_option
@strict_option
@json_option
@click.pass_context
def content(ctx: click.Context, content_dir: str, strict: bool, as_json: bool) -> None:
    """
    Validate every content file.

    Checks for:
    - Unreadable files and invalid YAML / frontmatter
    - Field types, formats and enum values per content type
    - Duplicate slugs and keys
    - Markdown problems in article bodies
    - Broken cross-references, series gaps, resume date problems
    """
    if not as_json:
        click.echo(f"🔍 Validating content in {content_dir}\n")

    report = load_validated_content(ctx, content_dir)

    if as_json:
        echo_json(
            {
                "valid": report.is_healthy,
                "records": report.records_checked,
                "errors": report.total_errors,
                "warnings": report.total_warnings,
                "issues": [asdict(issue) for issue in report.issues],
            }
        )
    else:
        click.echo(format_content_report(report))

    if report.has_errors:
        raise click.ClickException(f"Found {report.total_errors} content error(s)")
    if strict and report.has_warnings:
        raise click.ClickException(f"Found {report.total_warnings} warning(s) in strict mode")


@validate.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@json_option
@click.pass_context
def contact(ctx: click.Context, file_path: str, as_json: bool) -> None:
    """
    Validate a contact-form submission stored as JSON or YAML.

    Runs the same pipeline as the live form: schema, honeypot, timing,
    e-mail checks, sanitisation and spam scoring.
    """
    logger = ctx.obj["logger"]
    config = ctx.obj["config"]

    path = Path(file_path)
    text = read_text_file(path)
    parsed = parse_json(text) if path.suffix == ".json" else parse_yaml(text)
    if not parsed.ok:
        raise click.ClickException(f"{path.name}: {parsed.error}")

    validator = ContactFormValidator(
        config=config.form, logger=logger, rate_limit_config=config.rate_limit
    )
    result = validator.validate_submission(parsed.value)

    if as_json:
        echo_json(result.to_dict())
    else:
        click.echo(format_contact_result(path.name, result))

    if not result.valid:
        raise click.ClickException(f"Submission rejected with {len(result.errors)} error(s)")


def format_contact_result(name: str, result: FormValidationResult) -> str:
    """Render a form verdict the way the content report renders issues."""
    lines: List[str] = [f"📨 {name}", ""]
    lines.append("✅ Submission valid" if result.valid else "❌ Submission invalid")

    sections: Dict[str, List[str]] = {"❌": result.errors, "⚠️": result.warnings}
    for icon, messages in sections.items():
        for message in messages:
            lines.append(f"   {icon} {message}")

    spam = result.spam
    lines.append("")
    lines.append(f"Spam score: {spam.score}{' (flagged)' if spam.is_spam else ''}")
    for indicator in spam.indicators:
        lines.append(f"   • {indicator}")
    return "\n".join(lines)
