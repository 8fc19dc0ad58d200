"""Request Dependencies — per-request wiring of services and the current principal.

Invariants:
    - Settings are read once per process (get_settings) and passed into constructors
    - A missing, unknown or expired bearer token raises UnauthenticatedError (401)
    - Services are built per request around that request's AsyncSession
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import Settings, get_settings
from marketplace.core.domain_types import Principal
from marketplace.infrastructure.database import get_db
from marketplace.infrastructure.image_storage import LocalImageStore
from marketplace.services.attachment_manager import AttachmentManager
from marketplace.services.identity import IdentityService
from marketplace.services.listing_service import ListingService
from marketplace.services.listing_store import ListingStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_image_store(settings: Settings = Depends(get_settings)) -> LocalImageStore:
    return LocalImageStore(settings.images_dir)


def get_identity_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> IdentityService:
    return IdentityService(db, settings)


def get_listing_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    image_store: LocalImageStore = Depends(get_image_store),
) -> ListingService:
    attachments = AttachmentManager(
        image_store,
        url_prefix=settings.images_url_prefix,
        max_files=settings.max_images_per_listing,
    )
    return ListingService(ListingStore(db), attachments)


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    identity: IdentityService = Depends(get_identity_service),
) -> Principal:
    token = credentials.credentials if credentials else None
    return await identity.resolve_principal(token)
