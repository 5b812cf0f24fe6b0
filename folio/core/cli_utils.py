#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for Folio commands.

Functions:
    setup_logger: Initialize a FolioLogger for CLI operations

Usage:
    from folio.core.cli_utils import setup_logger

    logger = setup_logger(log_dir, "validate")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Optional

# --- Local imports ---
from folio.core.logging_manager import FolioLogger
from folio.core.registry import LogRegistry


def setup_logger(
    log_dir: Path,
    component_name: str,
    registry: Optional[LogRegistry] = None,
) -> FolioLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a FolioLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g., 'validate', 'content')
        registry: Optional LogRegistry that also receives every record

    Returns:
        Configured FolioLogger instance

    Examples:
        >>> from folio.core.paths import LOG_DIR
        >>> logger = setup_logger(LOG_DIR, "validate")
        >>> logger.log_info("Validating content...")
    """
    operations_log_dir = log_dir / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return FolioLogger(operations_log_dir, component_name=component_name, registry=registry)
