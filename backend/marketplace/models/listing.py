"""Listing ORM — persists marketplace listings ("posts") with their seller snapshot.

Invariants:
    - id is a UUID assigned at creation and never changes
    - seq is an autoincrement insertion counter; pagination and search order by it
    - seller_* and location_* are copied from the creating user and never updated
    - image_urls holds at most 4 paths, each naming a stored image file
    - posted is set once at creation

Design Decisions:
    - Seller/location flattened into columns so search can filter on country and city
    - JSON columns for delivery_type and image_urls: small, always read whole
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.db.base import Base


class Listing(Base):
    """A listing offered for sale by one seller."""
    __tablename__ = "listings"

    seq: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), unique=True, nullable=False, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(25), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    asking_price: Mapped[float] = mapped_column(Float, nullable=False)
    delivery_type: Mapped[dict] = mapped_column(JSON, nullable=False)

    seller_username: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    seller_email: Mapped[str] = mapped_column(String(254), nullable=False)
    seller_phone_number: Mapped[str | None] = mapped_column(String(40), nullable=True)

    location_city: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    location_country: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    location_postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    location_street: Mapped[str | None] = mapped_column(String(200), nullable=True)

    image_urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    posted: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
