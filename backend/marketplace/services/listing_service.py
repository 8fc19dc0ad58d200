"""Listing Service — orchestrates every listing operation exposed at the boundary.

Invariants:
    - Mutations check existence (404), then ownership (403), then payload shape (400),
      so an outsider cannot probe a listing through validation messages
    - update() and upload_images() receive body readers, not bodies: nothing is
      decoded before authorize() passes
    - Reads are public: no ownership check before get/list/search
    - delete() removes the record first, then the files it referenced (best effort)
    - upload_images() persists new image_urls through ListingStore.replace_images

Design Decisions:
    - Explicit sequential pipeline per operation instead of a middleware chain
    - One instance per request, built from the request's DB session and the
      process Settings (api/deps.py)
"""

import logging
from typing import Any

from marketplace.core.domain_types import Principal
from marketplace.core.enforce_ownership import authorize
from marketplace.core.pagination import parse_window
from marketplace.core.parse_fields import POST_FIELDS, SEARCH_FIELDS, parse_fields
from marketplace.core.repository_protocols import (
    FilesReader, ListingLike, ListingRepository, PayloadReader,
)
from marketplace.core.search_filters import build_search_filters
from marketplace.services.attachment_manager import AttachmentManager

logger = logging.getLogger(__name__)


class ListingService:
    """Create/read/update/delete/search/upload pipeline for listings."""

    def __init__(self, store: ListingRepository, attachments: AttachmentManager):
        self.store = store
        self.attachments = attachments

    async def create(self, principal: Principal, payload: Any) -> ListingLike:
        fields = parse_fields(payload, POST_FIELDS)
        return await self.store.create(principal, fields)

    async def get(self, listing_id: str) -> ListingLike:
        return await self.store.get(listing_id)

    async def list_page(self, offset: Any = None, limit: Any = None) -> list[ListingLike]:
        window = parse_window(offset, limit)
        return await self.store.list_page(window.offset, window.limit)

    async def search(self, payload: Any) -> list[ListingLike]:
        fields = parse_fields(payload, SEARCH_FIELDS)
        return await self.store.search(build_search_filters(fields))

    async def update(
        self, principal: Principal, listing_id: str, read_payload: PayloadReader,
    ) -> ListingLike:
        listing = await self.store.get(listing_id)
        authorize(principal, listing.seller_username)
        fields = parse_fields(await read_payload(), POST_FIELDS)
        return await self.store.update(listing, fields)

    async def delete(self, principal: Principal, listing_id: str) -> None:
        listing = await self.store.get(listing_id)
        authorize(principal, listing.seller_username)
        image_urls = list(listing.image_urls or [])
        await self.store.delete(listing)
        await self.attachments.remove_all(image_urls, listing_id=str(listing.id))

    async def upload_images(
        self, principal: Principal, listing_id: str, read_files: FilesReader,
    ) -> list[str]:
        listing = await self.store.get(listing_id)
        authorize(principal, listing.seller_username)
        files = await read_files()

        async def swap(urls: list[str]) -> None:
            await self.store.replace_images(listing, urls)

        return await self.attachments.apply(listing, files, swap)
