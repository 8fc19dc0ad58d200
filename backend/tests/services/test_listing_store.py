"""Listing Store — persistence rules below the HTTP layer.

Tests cover:
    - create() snapshots seller and location from the principal
    - count() and list_page() agree on insertion order
    - update() merges into the stored fields and re-validates the whole set
    - search() with no filters never reaches the database
"""

from uuid import uuid4

import pytest

from marketplace.core.domain_types import Address, Principal, UserId
from marketplace.core.errors import DomainValidationError, NotFoundError
from marketplace.core.search_filters import SearchFilters
from marketplace.services.listing_store import ListingStore
from tests.services.factories import listing_payload


def _principal(username: str = "alice") -> Principal:
    return Principal(
        id=UserId(uuid4()), username=username, email=f"{username}@example.com",
        phone_number="+358401234567",
        address=Address(city="Oulu", country="Finland", postal_code="90100"),
    )


async def test_create_snapshots_principal(test_db):
    listing = await ListingStore(test_db).create(_principal(), listing_payload())
    assert listing.seller_username == "alice"
    assert listing.location_city == "Oulu"
    assert listing.image_urls == []


async def test_count_and_page_order(test_db):
    store = ListingStore(test_db)
    created = [
        await store.create(_principal(), listing_payload(title=f"Listing item {i}"))
        for i in range(3)
    ]
    assert await store.count() == 3
    page = await store.list_page(1, 5)
    assert [listing.id for listing in page] == [c.id for c in created[1:]]


async def test_update_revalidates_merged_fields(test_db):
    store = ListingStore(test_db)
    listing = await store.create(_principal(), listing_payload())

    updated = await store.update(listing, {"category": "pets"})
    assert updated.category == "pets"
    assert updated.title == "Factory New Karambit"

    with pytest.raises(DomainValidationError):
        await store.update(listing, {"askingPrice": 0})
    assert (await store.get(str(listing.id))).asking_price == 129.99


@pytest.mark.parametrize("listing_id", ["", "123", "not-a-uuid"])
async def test_malformed_id_is_not_found(test_db, listing_id):
    with pytest.raises(NotFoundError):
        await ListingStore(test_db).get(listing_id)


async def test_empty_filters_return_nothing(test_db):
    store = ListingStore(test_db)
    await store.create(_principal(), listing_payload())
    assert await store.search(SearchFilters()) == []


async def test_delete_removes_row(test_db):
    store = ListingStore(test_db)
    listing = await store.create(_principal(), listing_payload())
    await store.delete(listing)
    assert await store.count() == 0


async def test_offset_past_count_skips_query(test_db):
    store = ListingStore(test_db)
    await store.create(_principal(), listing_payload())
    assert await store.list_page(1, 20) == []
    assert await store.list_page(2**63, 20) == []


async def test_listing_id_and_seller_come_from_snapshot(test_db):
    principal = _principal("carol")
    listing = await ListingStore(test_db).create(principal, listing_payload())
    snapshot = principal.seller_snapshot()
    assert (listing.seller_username, listing.seller_email, listing.seller_phone_number) == (
        snapshot.username, snapshot.email, snapshot.phone_number,
    )
    assert (await ListingStore(test_db).get(str(listing.id))).id == listing.id
