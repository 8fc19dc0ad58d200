"""Attachment Planning — tests for upload batch validation and naming.

Tests cover:
    - More than max files raises TooManyFilesError before type checks
    - One non-image file rejects the whole batch
    - Names are "<id>.<extension>" with the extension taken from the content type
    - URL helpers round-trip the stored name
"""

import itertools

import pytest

from marketplace.core.domain_types import IncomingFile
from marketplace.core.errors import (
    DomainValidationError, InvalidUploadError, TooManyFilesError,
)
from marketplace.core.plan_attachments import (
    image_name_from_url, image_url, infer_extension, is_plain_file_name,
    plan_attachments,
)


def _file(name="a.png", content_type="image/png") -> IncomingFile:
    return IncomingFile(filename=name, content_type=content_type, data=b"x")


def _ids():
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"


def test_valid_batch_gets_fresh_names():
    planned = plan_attachments(
        [_file("a.png", "image/png"), _file("b.jpg", "image/jpeg")], 4, _ids(),
    )
    assert [p.name for p in planned] == ["id1.png", "id2.jpeg"]


def test_empty_batch_is_valid():
    assert plan_attachments([], 4, _ids()) == []


def test_too_many_files_checked_before_types():
    files = [_file(content_type="text/plain")] * 5
    with pytest.raises(TooManyFilesError) as exc_info:
        plan_attachments(files, 4, _ids())
    assert exc_info.value.received == 5


def test_one_non_image_rejects_batch():
    files = [_file("ok.png"), _file("notes.txt", "text/plain")]
    with pytest.raises(InvalidUploadError) as exc_info:
        plan_attachments(files, 4, _ids())
    assert exc_info.value.rejected == ["notes.txt"]


def test_upload_errors_are_domain_validation():
    assert issubclass(TooManyFilesError, DomainValidationError)
    assert issubclass(InvalidUploadError, DomainValidationError)


@pytest.mark.parametrize("content_type,ext", [
    ("image/png", "png"),
    ("image/svg+xml", "svg"),
    ("image/jpeg; charset=binary", "jpeg"),
    ("image", "img"),
])
def test_infer_extension(content_type, ext):
    assert infer_extension(content_type) == ext


def test_url_helpers():
    url = image_url("/api/images/", "abc.png")
    assert url == "/api/images/abc.png"
    assert image_name_from_url(url) == "abc.png"


@pytest.mark.parametrize("name,ok", [
    ("abc.png", True), ("..", False), ("../etc/passwd", False), ("a\\b", False), ("", False),
])
def test_is_plain_file_name(name, ok):
    assert is_plain_file_name(name) is ok
