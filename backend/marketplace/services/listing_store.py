"""Listing Store — persistence of listings over an AsyncSession.

Invariants:
    - Every write re-validates the full editable field set with ListingFields
    - posted, seller_*, location_* are written once by create() and never again
    - image_urls changes only through replace_images()
    - get() raises the same NotFoundError for malformed and for absent ids
    - list_page() and search() return rows in insertion order (seq)
    - list_page() answers [] for an offset at or past count() without querying rows
    - search() with no effective filter returns [] without touching the DB
    - Every write commits before returning (read-your-writes per id)
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.domain_types import ListingId, Principal
from marketplace.core.errors import DomainValidationError, ErrorContext, NotFoundError
from marketplace.core.search_filters import SearchFilters
from marketplace.models.listing import Listing
from marketplace.schemas.listing import ListingFields

logger = logging.getLogger(__name__)


def describe_validation_error(exc: ValidationError) -> str:
    """First pydantic error as 'field: message', using wire (camelCase) names."""
    first = exc.errors()[0]
    field_path = ".".join(str(part) for part in first["loc"]) or "body"
    return f"{field_path}: {first['msg']}"


def validate_listing_fields(fields: dict[str, Any]) -> ListingFields:
    try:
        return ListingFields.model_validate(fields)
    except ValidationError as e:
        raise DomainValidationError(describe_validation_error(e)) from e


def editable_fields(listing: Listing) -> dict[str, Any]:
    """Current editable fields in wire naming, the base for update merges."""
    return {
        "title": listing.title,
        "description": listing.description,
        "category": listing.category,
        "askingPrice": listing.asking_price,
        "deliveryType": dict(listing.delivery_type),
    }


def _parse_listing_id(listing_id: str) -> ListingId | None:
    try:
        return ListingId(uuid.UUID(str(listing_id)))
    except (ValueError, TypeError, AttributeError):
        return None


class ListingStore:
    """CRUD, pagination and search for listings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, principal: Principal, fields: dict[str, Any]) -> Listing:
        valid = validate_listing_fields(fields)
        seller = principal.seller_snapshot()
        listing = Listing(
            id=ListingId(uuid.uuid4()),
            title=valid.title,
            description=valid.description,
            category=valid.category,
            asking_price=valid.asking_price,
            delivery_type=valid.delivery_type.model_dump(),
            seller_username=seller.username,
            seller_email=seller.email,
            seller_phone_number=seller.phone_number,
            location_city=principal.address.city,
            location_country=principal.address.country,
            location_postal_code=principal.address.postal_code,
            location_street=principal.address.street,
            image_urls=[],
            posted=datetime.now(timezone.utc),
        )
        self.db.add(listing)
        await self.db.commit()
        await self.db.refresh(listing)
        logger.info(
            f"Listing {listing.id} created",
            extra={"listing_id": str(listing.id), "username": principal.username},
        )
        return listing

    async def get(self, listing_id: str) -> Listing:
        parsed = _parse_listing_id(listing_id)
        if parsed is None:
            raise NotFoundError("Listing", ErrorContext(listing_id=str(listing_id)))
        result = await self.db.execute(select(Listing).where(Listing.id == parsed))
        listing = result.scalar_one_or_none()
        if listing is None:
            raise NotFoundError("Listing", ErrorContext(listing_id=str(listing_id)))
        return listing

    async def list_page(self, offset: int, limit: int) -> list[Listing]:
        if limit == 0 or offset >= await self.count():
            return []
        result = await self.db.execute(
            select(Listing).order_by(Listing.seq).offset(offset).limit(limit),
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Listing))
        return result.scalar_one()

    async def search(self, filters: SearchFilters) -> list[Listing]:
        if filters.is_empty:
            return []

        query = select(Listing)
        if filters.country is not None:
            query = query.where(Listing.location_country == filters.country)
        if filters.city is not None:
            query = query.where(Listing.location_city == filters.city)
        if filters.category is not None:
            query = query.where(Listing.category == filters.category)
        if filters.posted_from is not None:
            query = query.where(
                Listing.posted >= filters.posted_from,
                Listing.posted < filters.posted_until,
            )

        result = await self.db.execute(query.order_by(Listing.seq))
        return list(result.scalars().all())

    async def update(self, listing: Listing, fields: dict[str, Any]) -> Listing:
        merged = {**editable_fields(listing), **fields}
        valid = validate_listing_fields(merged)

        listing.title = valid.title
        listing.description = valid.description
        listing.category = valid.category
        listing.asking_price = valid.asking_price
        listing.delivery_type = valid.delivery_type.model_dump()
        await self.db.commit()
        await self.db.refresh(listing)
        logger.info(
            f"Listing {listing.id} updated",
            extra={"listing_id": str(listing.id)},
        )
        return listing

    async def replace_images(self, listing: Listing, urls: list[str]) -> Listing:
        listing.image_urls = list(urls)
        await self.db.commit()
        await self.db.refresh(listing)
        return listing

    async def delete(self, listing: Listing) -> None:
        await self.db.delete(listing)
        await self.db.commit()
        logger.info(
            f"Listing {listing.id} deleted",
            extra={"listing_id": str(listing.id)},
        )
