#!/usr/bin/env python3
"""
results.py
----------
Explicit success/failure values for helper paths with expected failures.

Parsing a YAML front-matter block or a JSON payload can fail for reasons
that are part of normal operation (a typo in a content file, a malformed
request body). Those helpers return `Ok` or `Err` instead of raising, so
validators can report the problem alongside everything else they found.

Usage:
    from folio.core.results import Ok, Err, parse_yaml, parse_json

    result = parse_yaml(text)
    if result.ok:
        data = result.value
    else:
        issues.append(result.error)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

# --- Third party imports ---
import yaml

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed result carrying a human-readable error message."""

    error: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def parse_yaml(text: str) -> Result[Any]:
    """
    Parse YAML text safely.

    Args:
        text: YAML document

    Returns:
        Ok with the parsed document, or Err naming the offending line
    """
    try:
        return Ok(yaml.safe_load(text))
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" (line {mark.line + 1})" if mark is not None else ""
        return Err(f"Invalid YAML syntax{where}: {getattr(e, 'problem', None) or e}")


def parse_json(text: str) -> Result[Any]:
    """
    Parse a JSON document safely.

    Args:
        text: JSON text

    Returns:
        Ok with the decoded value, or Err with the decoder message
    """
    try:
        return Ok(json.loads(text))
    except json.JSONDecodeError as e:
        return Err(f"Invalid JSON (line {e.lineno}, column {e.colno}): {e.msg}")
