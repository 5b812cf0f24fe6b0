"""
Folio CLI Package
-----------------

Single entry point for content validation and inspection.

Usage:
    folio validate content            # Validate the content directory
    folio validate contact FILE       # Validate a contact submission
    folio content analyze FILE        # Analyze one Markdown article
    folio content list blog --tag py  # List published content
    folio resume timeline             # Career timeline

Global options (before the command group):
    --log-dir DIR    Directory for log files
    --config FILE    YAML threshold overrides
    -v, --verbose    Show tracebacks on failure
"""
# --- Third party imports ---
import click

# --- Local imports ---
from folio.cli.content import content_group
from folio.cli.resume import resume
from folio.cli.validate import validate
from folio.core.cli_decorators import folio_cli_group


@folio_cli_group("folio")
def cli(ctx: click.Context) -> None:
    """
    Folio - portfolio and blog content tools.

    Validate content files and contact submissions, analyze articles and
    list aggregated content.
    """


cli.add_command(validate)
cli.add_command(content_group)
cli.add_command(resume)


if __name__ == "__main__":
    cli()
