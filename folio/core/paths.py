#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the Folio project.

All paths are Path objects relative to the project root so that the CLI,
the content loader, and the logging setup agree on where things live.

The project structure:
    ROOT/
    ├── folio/         # Library code
    ├── content/       # Declarative site content (personas, blog, ...)
    └── logs/          # Application logs

Each path can be overridden through an environment variable, which is how
the site build points the validators at a content checkout elsewhere.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/folio/core/paths.py and navigates up
    the directory tree to find ROOT.

    Returns:
        Path object for project root
    """
    # paths.py -> core/ -> folio/ -> ROOT/
    return Path(__file__).resolve().parent.parent.parent


# ----- Project directory -----
ROOT: Path = _get_project_root()

# ---- Content ----
CONTENT_DIR = Path(os.environ.get("FOLIO_CONTENT_DIR", ROOT / "content"))
PERSONAS_DIR = CONTENT_DIR / "personas"
SKILLS_DIR = CONTENT_DIR / "skills"
BLOG_DIR = CONTENT_DIR / "blog"
PORTFOLIO_DIR = CONTENT_DIR / "portfolio"
RESUME_DIR = CONTENT_DIR / "resume"

# ---- Config ----
CONFIG_PATH = Path(os.environ.get("FOLIO_CONFIG", ROOT / "folio.yaml"))

# ---- Logs ----
LOG_DIR = Path(os.environ.get("FOLIO_LOG_DIR", ROOT / "logs"))
