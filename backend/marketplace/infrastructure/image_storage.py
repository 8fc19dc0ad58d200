"""Image Storage — local directory blob store for listing attachments.

Invariants:
    - One flat directory shared by all listings; names are opaque and collision-free
    - Every OSError is mapped to StorageError (core/errors.py)
    - delete() of a missing file returns False instead of raising

Design Decisions:
    - aiofiles for reads/writes so uploads never block the event loop
"""

import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from marketplace.core.errors import ErrorContext, StorageError

logger = logging.getLogger(__name__)


class LocalImageStore:
    """Stores image bytes as files under base_dir."""

    def __init__(self, base_dir: str | Path):
        self.base = Path(base_dir)
        self.base.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.base / name

    async def write(self, name: str, data: bytes) -> None:
        try:
            async with aiofiles.open(self.path_for(name), "wb") as f:
                await f.write(data)
        except OSError as e:
            raise StorageError(
                str(e), "write", ErrorContext(debug_info={"image_name": name}),
            ) from e
        logger.debug(f"Stored image {name}", extra={"image_name": name})

    async def delete(self, name: str) -> bool:
        try:
            await aiofiles.os.remove(self.path_for(name))
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(
                str(e), "delete", ErrorContext(debug_info={"image_name": name}),
            ) from e
        return True

    async def exists(self, name: str) -> bool:
        return await aiofiles.os.path.isfile(self.path_for(name))

    async def list_names(self) -> list[str]:
        try:
            names = await aiofiles.os.listdir(self.base)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(str(e), "list") from e
        return sorted(names)
