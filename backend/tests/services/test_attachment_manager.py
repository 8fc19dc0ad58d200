"""Attachment Manager — unit tests for the write → swap → delete sequence.

Tests cover:
    - Successful apply writes new files, swaps URLs, deletes old files
    - A failed write discards the whole batch and never calls swap
    - A failed swap discards the new files and re-raises
    - Failure to delete an old file is logged, not raised
"""

import itertools
import logging
from dataclasses import dataclass, field

import pytest

from marketplace.core.domain_types import IncomingFile
from marketplace.core.errors import StorageError, TooManyFilesError
from marketplace.services.attachment_manager import AttachmentManager


class FakeImageStore:
    """In-memory ImageStore with switchable failures."""

    def __init__(self, fail_write_on: str | None = None, fail_delete: set | None = None):
        self.files: dict[str, bytes] = {}
        self.fail_write_on = fail_write_on
        self.fail_delete = fail_delete or set()

    async def write(self, name: str, data: bytes) -> None:
        if self.fail_write_on and name.startswith(self.fail_write_on):
            raise StorageError("disk full", "write")
        self.files[name] = data

    async def delete(self, name: str) -> bool:
        if name in self.fail_delete:
            raise StorageError("permission denied", "delete")
        return self.files.pop(name, None) is not None

    async def exists(self, name: str) -> bool:
        return name in self.files

    async def list_names(self) -> list[str]:
        return sorted(self.files)

    def path_for(self, name: str):
        return name


@dataclass
class FakeListing:
    id: str = "listing-1"
    image_urls: list[str] = field(default_factory=list)


def _png(name: str = "a.png") -> IncomingFile:
    return IncomingFile(filename=name, content_type="image/png", data=b"png")


def _manager(store) -> AttachmentManager:
    counter = itertools.count(1)
    return AttachmentManager(
        store, url_prefix="/api/images", max_files=4,
        make_id=lambda: f"new{next(counter)}",
    )


def _swap_into(listing: FakeListing):
    async def swap(urls: list[str]) -> None:
        listing.image_urls = urls
    return swap


async def test_apply_writes_swaps_and_deletes_old():
    store = FakeImageStore()
    store.files["old.png"] = b"old"
    listing = FakeListing(image_urls=["/api/images/old.png"])

    urls = await _manager(store).apply(listing, [_png(), _png("b.png")], _swap_into(listing))

    assert urls == ["/api/images/new1.png", "/api/images/new2.png"]
    assert listing.image_urls == urls
    assert sorted(store.files) == ["new1.png", "new2.png"]


async def test_validation_failure_writes_nothing():
    store = FakeImageStore()
    listing = FakeListing()
    with pytest.raises(TooManyFilesError):
        await _manager(store).apply(listing, [_png()] * 5, _swap_into(listing))
    assert store.files == {}


async def test_failed_write_discards_batch_and_skips_swap():
    store = FakeImageStore(fail_write_on="new2")
    store.files["old.png"] = b"old"
    listing = FakeListing(image_urls=["/api/images/old.png"])
    swapped = []

    async def swap(urls):
        swapped.append(urls)

    with pytest.raises(StorageError):
        await _manager(store).apply(listing, [_png(), _png("b.png")], swap)

    assert swapped == []
    assert sorted(store.files) == ["old.png"]
    assert listing.image_urls == ["/api/images/old.png"]


async def test_failed_swap_discards_new_files():
    store = FakeImageStore()
    store.files["old.png"] = b"old"
    listing = FakeListing(image_urls=["/api/images/old.png"])

    async def swap(urls):
        raise StorageError("connection lost", "commit")

    with pytest.raises(StorageError):
        await _manager(store).apply(listing, [_png()], swap)

    assert sorted(store.files) == ["old.png"]


async def test_old_file_delete_failure_is_logged(caplog):
    store = FakeImageStore(fail_delete={"old.png"})
    store.files["old.png"] = b"old"
    listing = FakeListing(image_urls=["/api/images/old.png"])

    with caplog.at_level(logging.ERROR):
        urls = await _manager(store).apply(listing, [_png()], _swap_into(listing))

    assert listing.image_urls == urls
    assert "old.png" in caplog.text


async def test_zero_files_clears():
    store = FakeImageStore()
    store.files["old.png"] = b"old"
    listing = FakeListing(image_urls=["/api/images/old.png"])

    urls = await _manager(store).apply(listing, [], _swap_into(listing))

    assert urls == []
    assert listing.image_urls == []
    assert store.files == {}


async def test_remove_all_tolerates_missing_files(caplog):
    store = FakeImageStore()
    with caplog.at_level(logging.WARNING):
        await _manager(store).remove_all(["/api/images/ghost.png"], listing_id="x")
    assert "ghost.png" in caplog.text
