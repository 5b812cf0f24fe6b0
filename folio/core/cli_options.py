#!/usr/bin/env python3
"""
cli_options.py
-------------------
Reusable Click option decorators for consistent CLI interfaces.

Usage:
    from folio.core.cli_options import content_dir_option, json_option

    @cli.command()
    @content_dir_option
    @json_option
    def my_command(content_dir, as_json):
        pass
"""
# --- Third party imports ---
import click

# --- Local imports ---
from folio.core.paths import CONTENT_DIR


# ═══════════════════════════════════════════════════════════════════════════
# INPUT OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

content_dir_option = click.option(
    "-c", "--content-dir",
    type=click.Path(file_okay=False),
    default=str(CONTENT_DIR),
    help="Content directory (personas/, skills/, blog/, portfolio/, resume/)",
)

persona_option = click.option(
    "-p", "--persona",
    default=None,
    help="Restrict to one persona key",
)


# ═══════════════════════════════════════════════════════════════════════════
# OUTPUT OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

json_option = click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print machine-readable JSON instead of a report",
)

strict_option = click.option(
    "--strict",
    is_flag=True,
    help="Treat warnings as failures",
)


# ═══════════════════════════════════════════════════════════════════════════
# PAGINATION OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

page_option = click.option(
    "--page",
    type=int,
    default=1,
    show_default=True,
    help="Page number (1-based)",
)


def limit_option(default: int = 10):
    """
    Factory function for the page size option.

    Args:
        default: Default page size

    Returns:
        Click option decorator
    """
    return click.option(
        "--limit",
        type=int,
        default=default,
        show_default=True,
        help="Items per page",
    )
