"""Search Filters — turns raw search fields into a conjunctive filter set.

Invariants:
    - PURE: no IO
    - None and "" mean "filter absent"
    - country, city, category must be strings when present (DomainValidationError)
    - postedDate must be exactly YYYY-MM-DD (InvalidShapeError) and selects one UTC
      calendar day as the half-open range [start, start + 1 day)
    - SearchFilters.is_empty is True when no filter is in effect; the store returns
      no results in that case
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from marketplace.core.domain_types import POSTED_DATE_FORMAT
from marketplace.core.errors import DomainValidationError, InvalidShapeError

_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class SearchFilters:
    country: str | None = None
    city: str | None = None
    category: str | None = None
    posted_from: datetime | None = None
    posted_until: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.country is None
            and self.city is None
            and self.category is None
            and self.posted_from is None
        )


def _string_filter(name: str, value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DomainValidationError(f"{name} must be a string.")
    return value


def parse_posted_day(value: Any) -> tuple[datetime, datetime]:
    """Return the [start, end) UTC range for a YYYY-MM-DD string."""
    if not isinstance(value, str) or not _DATE_SHAPE.match(value):
        raise InvalidShapeError("postedDate must use the YYYY-MM-DD format.")
    try:
        day = datetime.strptime(value, POSTED_DATE_FORMAT)
    except ValueError:
        raise InvalidShapeError("postedDate must use the YYYY-MM-DD format.")
    start = day.replace(tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def build_search_filters(fields: dict[str, Any]) -> SearchFilters:
    """Build filters from parsed search fields (see parse_fields.SEARCH_FIELDS)."""
    posted_from = posted_until = None
    posted = fields.get("postedDate")
    if posted is not None and posted != "":
        posted_from, posted_until = parse_posted_day(posted)

    return SearchFilters(
        country=_string_filter("country", fields.get("country")),
        city=_string_filter("city", fields.get("city")),
        category=_string_filter("category", fields.get("category")),
        posted_from=posted_from,
        posted_until=posted_until,
    )
