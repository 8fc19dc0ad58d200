"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, core functions that consume
      their results stay synchronous
"""

from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol
from uuid import UUID

from marketplace.core.domain_types import IncomingFile, Principal
from marketplace.core.search_filters import SearchFilters


class ListingLike(Protocol):
    """Structural contract for listing records passed between services."""
    id: UUID
    title: str
    description: str
    category: str
    asking_price: float
    delivery_type: dict
    seller_username: str
    image_urls: list[str]
    posted: datetime


class ListingRepository(Protocol):
    """Contract for listing persistence — implemented by shell."""
    async def create(self, principal: Principal, fields: dict[str, Any]) -> ListingLike: ...
    async def get(self, listing_id: str) -> ListingLike: ...
    async def list_page(self, offset: int, limit: int) -> list[ListingLike]: ...
    async def count(self) -> int: ...
    async def search(self, filters: SearchFilters) -> list[ListingLike]: ...
    async def update(self, listing: ListingLike, fields: dict[str, Any]) -> ListingLike: ...
    async def replace_images(self, listing: ListingLike, urls: list[str]) -> ListingLike: ...
    async def delete(self, listing: ListingLike) -> None: ...


class ImageStore(Protocol):
    """Contract for blob storage of image files — implemented by shell."""
    async def write(self, name: str, data: bytes) -> None: ...
    async def delete(self, name: str) -> bool: ...
    async def exists(self, name: str) -> bool: ...
    async def list_names(self) -> list[str]: ...
    def path_for(self, name: str) -> Path: ...


ImageSwap = Callable[[list[str]], Awaitable[Any]]

# Deferred request-body readers: the service awaits them after the 404/403 checks.
PayloadReader = Callable[[], Awaitable[Any]]
FilesReader = Callable[[], Awaitable[list[IncomingFile]]]
