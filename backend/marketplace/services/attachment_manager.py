"""Attachment Manager — keeps a listing's stored image files consistent with image_urls.

Invariants:
    - Validation (count, content types) completes before the first byte is written
    - New files are written before the URL swap; old files are deleted only after it
    - If writing or swapping fails, every new file of the batch is removed again
      and image_urls is left as it was
    - A zero-file apply() clears the listing's images
    - Old-file cleanup failures are logged with the file name, never raised: after the
      swap nothing references those files

Design Decisions:
    - The swap is an injected coroutine (ListingStore.replace_images in production) so
      the write-swap-delete ordering lives in one place
    - Per-file writes and deletes run concurrently with asyncio.gather
"""

import asyncio
import logging
import uuid
from collections.abc import Callable

from marketplace.core.domain_types import IncomingFile
from marketplace.core.errors import ErrorContext, StorageError
from marketplace.core.plan_attachments import (
    PlannedImage, image_name_from_url, image_url, plan_attachments,
)
from marketplace.core.repository_protocols import ImageStore, ImageSwap, ListingLike

logger = logging.getLogger(__name__)


def _fresh_id() -> str:
    return uuid.uuid4().hex


class AttachmentManager:
    """Adds, replaces and removes the image files of listings."""

    def __init__(
        self,
        image_store: ImageStore,
        url_prefix: str,
        max_files: int,
        make_id: Callable[[], str] = _fresh_id,
    ):
        self.image_store = image_store
        self.url_prefix = url_prefix
        self.max_files = max_files
        self.make_id = make_id

    async def apply(
        self,
        listing: ListingLike,
        files: list[IncomingFile],
        swap: ImageSwap,
    ) -> list[str]:
        """Replace the listing's images with files. Returns the new URL list."""
        planned = plan_attachments(files, self.max_files, self.make_id)
        old_urls = list(listing.image_urls or [])
        listing_id = str(listing.id)

        await self._write_all(planned, listing_id)
        new_urls = [image_url(self.url_prefix, p.name) for p in planned]

        try:
            await swap(new_urls)
        except Exception:
            logger.error(
                f"Image swap failed for listing {listing_id}, discarding new files",
                extra={"listing_id": listing_id, "file_count": len(planned)},
            )
            await self._discard([p.name for p in planned], listing_id)
            raise

        await self.remove_all(old_urls, listing_id=listing_id)
        logger.info(
            f"Listing {listing_id} now has {len(new_urls)} image(s)",
            extra={"listing_id": listing_id, "file_count": len(new_urls)},
        )
        return new_urls

    async def remove_all(self, urls: list[str], listing_id: str | None = None) -> None:
        """Best-effort delete of every file referenced by urls."""
        names = [image_name_from_url(url) for url in urls]
        results = await asyncio.gather(
            *(self.image_store.delete(name) for name in names),
            return_exceptions=True,
        )
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"Failed to delete image {name}: {result}",
                    extra={"listing_id": listing_id, "image_name": name},
                )
            elif result is False:
                logger.warning(
                    f"Image {name} was already missing",
                    extra={"listing_id": listing_id, "image_name": name},
                )

    async def _write_all(self, planned: list[PlannedImage], listing_id: str) -> None:
        results = await asyncio.gather(
            *(self.image_store.write(p.name, p.file.data) for p in planned),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if not failures:
            return

        await self._discard([p.name for p in planned], listing_id)
        first = failures[0]
        if isinstance(first, StorageError):
            raise first
        raise StorageError(
            str(first), "write", ErrorContext(listing_id=listing_id),
        ) from first

    async def _discard(self, names: list[str], listing_id: str) -> None:
        results = await asyncio.gather(
            *(self.image_store.delete(name) for name in names),
            return_exceptions=True,
        )
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"Failed to discard new image {name}: {result}",
                    extra={"listing_id": listing_id, "image_name": name},
                )
