"""Listing Routes — HTTP surface of the listing lifecycle.

Invariants:
    - Authentication runs first on protected routes (401 before any lookup)
    - Mutation bodies (PUT JSON, upload form) are read lazily: the service awaits the
      reader after the 404/403 checks, so a malformed body never pre-empts them
    - Upload accepts only file parts under `fileName`; anything else is INVALID_SHAPE
    - Routes hold no business logic: they adapt HTTP to ListingService calls
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from marketplace.api.deps import get_listing_service, get_principal
from marketplace.core.domain_types import IncomingFile, Principal
from marketplace.core.errors import InvalidShapeError
from marketplace.core.parse_fields import decode_json_body
from marketplace.core.repository_protocols import FilesReader, PayloadReader
from marketplace.schemas.listing import ListingResponse
from marketplace.services.listing_service import ListingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.get("", response_model=list[ListingResponse])
async def list_listings(
    offset: str | None = Query(None),
    limit: str | None = Query(None),
    service: ListingService = Depends(get_listing_service),
):
    """List listings in insertion order, offset/limit paginated."""
    listings = await service.list_page(offset, limit)
    return [ListingResponse.from_listing(listing) for listing in listings]


@router.post(
    "", response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_listing(
    payload: Any = Body(None),
    principal: Principal = Depends(get_principal),
    service: ListingService = Depends(get_listing_service),
):
    """Create a listing owned by the authenticated user."""
    listing = await service.create(principal, payload)
    return ListingResponse.from_listing(listing)


@router.post("/search", response_model=list[ListingResponse])
async def search_listings(
    payload: Any = Body(None),
    service: ListingService = Depends(get_listing_service),
):
    """Search by country, city, category and posted date (AND). No filters, no results."""
    listings = await service.search(payload)
    return [ListingResponse.from_listing(listing) for listing in listings]


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: str,
    service: ListingService = Depends(get_listing_service),
):
    listing = await service.get(listing_id)
    return ListingResponse.from_listing(listing)


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: str,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: ListingService = Depends(get_listing_service),
):
    listing = await service.update(principal, listing_id, _json_reader(request))
    return ListingResponse.from_listing(listing)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(
    listing_id: str,
    principal: Principal = Depends(get_principal),
    service: ListingService = Depends(get_listing_service),
):
    await service.delete(principal, listing_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{listing_id}/upload", response_model=list[str])
async def upload_images(
    listing_id: str,
    request: Request,
    principal: Principal = Depends(get_principal),
    service: ListingService = Depends(get_listing_service),
):
    """Replace the listing's images with 0-4 uploaded files (form field `fileName`)."""
    return await service.upload_images(principal, listing_id, _upload_reader(request))


def _json_reader(request: Request) -> PayloadReader:
    async def read() -> Any:
        return decode_json_body(await request.body())
    return read


_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _upload_reader(request: Request) -> FilesReader:
    async def read() -> list[IncomingFile]:
        content_type = request.headers.get("content-type", "")
        if content_type and not content_type.startswith(_FORM_TYPES):
            raise InvalidShapeError("Upload must be a multipart form.")
        try:
            form = await request.form()
        except (MultiPartException, StarletteHTTPException) as e:
            raise InvalidShapeError("Upload form could not be parsed.") from e

        parts = form.getlist("fileName")
        not_files = [part for part in parts if not isinstance(part, UploadFile)]
        if not_files:
            raise InvalidShapeError("fileName entries must be files.", fields=["fileName"])
        return [
            IncomingFile(
                filename=part.filename or "",
                content_type=part.content_type or "",
                data=await part.read(),
            )
            for part in parts
        ]
    return read
