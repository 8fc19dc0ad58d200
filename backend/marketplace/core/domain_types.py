"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ListingId / UserId wrap UUIDs — never use bare UUID in domain logic
    - Category encodes every valid listing category — no raw string matching
    - Principal, Address and SellerSnapshot are frozen: the core reads them, never mutates

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ListingId = NewType("ListingId", UUID)
UserId = NewType("UserId", UUID)


# ─── Listing Rules ───────────────────────────────────────────────

TITLE_MIN_LENGTH = 8
TITLE_MAX_LENGTH = 25
PRICE_MIN = 1
PRICE_MAX = 9_999_999
MAX_IMAGES_PER_LISTING = 4

DEFAULT_PAGE_OFFSET = 0
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

POSTED_DATE_FORMAT = "%Y-%m-%d"


# ─── Enums ───────────────────────────────────────────────────────

class Category(str, Enum):
    """Listing categories accepted by the marketplace."""
    COMPUTERS = "computers"
    ELECTRONICS = "electronics"
    CARS = "cars"
    PETS = "pets"
    FOOD = "food"
    DRINKS = "drinks"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class Address:
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None
    street: str | None = None


@dataclass(frozen=True)
class SellerSnapshot:
    """Contact info copied onto a listing at creation time."""
    username: str
    email: str
    phone_number: str | None = None


@dataclass(frozen=True)
class Principal:
    """Authenticated actor supplied by the identity provider."""
    id: UserId
    username: str
    email: str
    phone_number: str | None
    address: Address

    def seller_snapshot(self) -> SellerSnapshot:
        return SellerSnapshot(
            username=self.username,
            email=self.email,
            phone_number=self.phone_number,
        )


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file as received from the transport, fully buffered."""
    filename: str
    content_type: str
    data: bytes
