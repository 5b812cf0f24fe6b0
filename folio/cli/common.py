"""
Helpers shared by the Folio command groups.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from pathlib import Path
from typing import Any

# --- Third party imports ---
import click

# --- Local imports ---
from folio.content.loader import load_content
from folio.core.exceptions import ContentLoadError
from folio.core.logging_manager import handle_cli_error
from folio.validators.content import ContentValidationReport, ContentValidator


def load_validated_content(ctx: click.Context, content_dir: str) -> ContentValidationReport:
    """
    Load and validate a content directory for a command.

    Exits through handle_cli_error when the directory cannot be loaded.
    """
    logger = ctx.obj["logger"]
    config = ctx.obj["config"]
    try:
        snapshot = load_content(Path(content_dir), logger)
    except ContentLoadError as e:
        handle_cli_error(ctx, e, "load_content", {"content_dir": content_dir})
    validator = ContentValidator(
        logger=logger, timeline=config.timeline, date_range=config.date_range
    )
    return validator.validate_snapshot(snapshot)



def read_text_file(path: Path) -> str:
    """
    Read a UTF-8 input file for a command.

    Raises:
        click.ClickException: If the file is not valid UTF-8 text
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{path.name}: not valid UTF-8 text ({e.reason})") from e

def echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str, ensure_ascii=False))
