"""Listing Schemas — business-rule validation and wire shape of listings.

Invariants:
    - ListingFields: title 8-25 chars, description non-empty, category in Category,
      1 <= askingPrice <= 9_999_999, deliveryType {shipping, pickup} both booleans
    - No coercion: "12" is not a price, "true" is not a boolean, 123 is not a title
    - ListingResponse is the only shape in which listings leave the API
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator,
)
from pydantic.alias_generators import to_camel

from marketplace.core.domain_types import (
    PRICE_MAX, PRICE_MIN, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH, Category,
)

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeliveryType(BaseModel):
    model_config = ConfigDict(extra="forbid")

    shipping: StrictBool
    pickup: StrictBool


class ListingFields(BaseModel):
    """Editable listing fields, validated on every create and update."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )

    title: StrictStr = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: StrictStr = Field(min_length=1)
    category: StrictStr
    asking_price: float = Field(ge=PRICE_MIN, le=PRICE_MAX)
    delivery_type: DeliveryType

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description cannot be empty or whitespace")
        return v

    @field_validator("category")
    @classmethod
    def category_known(cls, v: str) -> str:
        allowed = [c.value for c in Category]
        if v not in allowed:
            raise ValueError(f"category must be one of: {', '.join(allowed)}")
        return v

    @field_validator("asking_price", mode="before")
    @classmethod
    def price_is_number(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("askingPrice must be a number")
        return v


class Seller(BaseModel):
    model_config = _CAMEL

    username: str
    email: str
    phone_number: str | None = None


class Location(BaseModel):
    model_config = _CAMEL

    city: str | None = None
    country: str | None = None
    postal_code: str | None = None
    street: str | None = None


class ListingResponse(BaseModel):
    """Public listing representation."""
    model_config = _CAMEL

    id: UUID
    title: str
    description: str
    category: str
    asking_price: float
    delivery_type: DeliveryType
    seller: Seller
    location: Location
    image_urls: list[str]
    posted: datetime

    @classmethod
    def from_listing(cls, listing) -> "ListingResponse":
        return cls(
            id=listing.id,
            title=listing.title,
            description=listing.description,
            category=listing.category,
            asking_price=listing.asking_price,
            delivery_type=DeliveryType(**listing.delivery_type),
            seller=Seller(
                username=listing.seller_username,
                email=listing.seller_email,
                phone_number=listing.seller_phone_number,
            ),
            location=Location(
                city=listing.location_city,
                country=listing.location_country,
                postal_code=listing.location_postal_code,
                street=listing.location_street,
            ),
            image_urls=list(listing.image_urls or []),
            posted=listing.posted,
        )
