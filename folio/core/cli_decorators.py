#!/usr/bin/env python3
"""
cli_decorators.py
-------------------
Custom Click decorators for Folio CLIs.

Usage:
    from folio.core.cli_decorators import folio_cli_group

    @folio_cli_group("folio")
    def cli(ctx):
        '''folio - Content validation and analysis'''
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from functools import wraps
from pathlib import Path
from typing import Callable

# --- Third party imports ---
import click

# --- Local imports ---
from folio.configs import load_config
from folio.core.cli_utils import setup_logger
from folio.core.exceptions import ConfigError
from folio.core.paths import CONFIG_PATH, LOG_DIR
from folio.core.registry import LogRegistry


def folio_cli_group(component_name: str) -> Callable:
    """
    Decorator factory for creating consistent CLI groups.

    Automatically adds:
    - Click group() decorator
    - --log-dir option
    - --config option
    - --verbose option
    - Context object setup with logger and configuration

    Args:
        component_name: Component identifier for logging

    Returns:
        Decorator function

    Provides context with:
        ctx.obj["log_dir"]: Path - Log directory
        ctx.obj["verbose"]: bool - Verbose flag
        ctx.obj["config"]: FolioConfig - Thresholds (defaults if no file)
        ctx.obj["logger"]: FolioLogger - Configured logger instance
        ctx.obj["log_registry"]: LogRegistry - In-memory copy of this run's log records
    """

    def decorator(f: Callable) -> Callable:
        @click.group()
        @click.option(
            "--log-dir",
            type=click.Path(),
            default=str(LOG_DIR),
            help="Directory for log files",
        )
        @click.option(
            "--config",
            "config_path",
            type=click.Path(dir_okay=False),
            default=str(CONFIG_PATH),
            help="YAML file with threshold overrides",
        )
        @click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
        @click.pass_context
        @wraps(f)
        def wrapper(ctx: click.Context, log_dir: str, config_path: str, verbose: bool):
            ctx.ensure_object(dict)
            ctx.obj["log_dir"] = Path(log_dir)
            ctx.obj["verbose"] = verbose
            try:
                ctx.obj["config"] = load_config(Path(config_path))
            except ConfigError as e:
                raise click.ClickException(str(e)) from e
            registry = LogRegistry(max_logs=ctx.obj["config"].registry.max_logs)
            ctx.obj["log_registry"] = registry
            ctx.obj["logger"] = setup_logger(Path(log_dir), component_name, registry=registry)

            return f(ctx)

        return wrapper

    return decorator
