"""Image Routes — lists and serves stored listing images.

Invariants:
    - Only plain file names are served (no path components)
    - A name with no stored file is 404, the same as any unknown resource
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from marketplace.api.deps import get_image_store
from marketplace.config import Settings, get_settings
from marketplace.core.errors import NotFoundError
from marketplace.core.plan_attachments import image_url, is_plain_file_name
from marketplace.infrastructure.image_storage import LocalImageStore

router = APIRouter(prefix="/api/images", tags=["images"])


@router.get("")
async def list_images(
    image_store: LocalImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_settings),
):
    names = await image_store.list_names()
    return {"images": [image_url(settings.images_url_prefix, name) for name in names]}


@router.get("/{image_name}")
async def get_image(
    image_name: str,
    image_store: LocalImageStore = Depends(get_image_store),
):
    if not is_plain_file_name(image_name) or not await image_store.exists(image_name):
        raise NotFoundError("Image")
    return FileResponse(image_store.path_for(image_name))
