"""Pagination Window — parses raw offset/limit into a validated window.

Invariants:
    - PURE: no IO
    - Missing values take defaults (offset=0, limit=20)
    - Non-integer values raise InvalidShapeError ("Invalid type" detail)
    - Integers outside offset >= 0, 0 <= limit <= 100 raise DomainValidationError
      ("Out of bounds" detail)
"""

import re
from dataclasses import dataclass
from typing import Any

from marketplace.core.domain_types import (
    DEFAULT_PAGE_LIMIT, DEFAULT_PAGE_OFFSET, MAX_PAGE_LIMIT,
)
from marketplace.core.errors import DomainValidationError, InvalidShapeError

_INTEGER = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class PageWindow:
    offset: int
    limit: int


def _to_int(name: str, raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        raise InvalidShapeError(f"Invalid type: {name} must be an integer.")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and _INTEGER.match(raw.strip()):
        return int(raw.strip())
    raise InvalidShapeError(f"Invalid type: {name} must be an integer.")


def parse_window(offset: Any = None, limit: Any = None) -> PageWindow:
    """Validate raw pagination parameters and return the window."""
    parsed_offset = _to_int("offset", offset, DEFAULT_PAGE_OFFSET)
    parsed_limit = _to_int("limit", limit, DEFAULT_PAGE_LIMIT)

    if parsed_offset < 0:
        raise DomainValidationError("Out of bounds: offset must be 0 or greater.")
    if not 0 <= parsed_limit <= MAX_PAGE_LIMIT:
        raise DomainValidationError(
            f"Out of bounds: limit must be between 0 and {MAX_PAGE_LIMIT}.",
        )
    return PageWindow(offset=parsed_offset, limit=parsed_limit)
