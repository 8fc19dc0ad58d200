"""Attachment Planning — validates an upload batch and names the files to store.

Invariants:
    - No IO: ids come from an injected factory
    - Count is checked before content types; both checks precede any write
    - A single non-image file rejects the whole batch
    - Stored name is "<fresh id>.<extension>", extension taken from the content type
    - Image URLs end with the stored name; the name is recovered from the last path segment
"""

from collections.abc import Callable
from dataclasses import dataclass

from marketplace.core.domain_types import IncomingFile
from marketplace.core.errors import InvalidUploadError, TooManyFilesError


@dataclass(frozen=True)
class PlannedImage:
    name: str
    file: IncomingFile


def is_image(content_type: str | None) -> bool:
    return bool(content_type) and content_type.startswith("image")


def infer_extension(content_type: str) -> str:
    """image/png -> png, image/svg+xml -> svg, image/jpeg; q=1 -> jpeg."""
    subtype = content_type.split(";", 1)[0].strip()
    subtype = subtype.split("/", 1)[1] if "/" in subtype else ""
    subtype = subtype.split("+", 1)[0].strip().lower()
    return subtype or "img"


def plan_attachments(
    files: list[IncomingFile],
    max_files: int,
    make_id: Callable[[], str],
) -> list[PlannedImage]:
    """Validate the batch and assign stored names. Raises before anything is written."""
    if len(files) > max_files:
        raise TooManyFilesError(len(files), max_files)

    rejected = [f.filename or "<unnamed>" for f in files if not is_image(f.content_type)]
    if rejected:
        raise InvalidUploadError(rejected)

    return [
        PlannedImage(name=f"{make_id()}.{infer_extension(f.content_type)}", file=f)
        for f in files
    ]


def image_url(url_prefix: str, name: str) -> str:
    return f"{url_prefix.rstrip('/')}/{name}"


def image_name_from_url(url: str) -> str:
    return url.rstrip("/").split("/")[-1]


def is_plain_file_name(name: str) -> bool:
    """True for a bare file name with no directory components."""
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name
