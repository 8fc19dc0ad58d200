"""Error Hierarchy — status codes, codes and response envelopes."""

import pytest

from marketplace.core.errors import (
    ConflictError, DomainValidationError, ForbiddenError, InvalidShapeError,
    InvalidUploadError, MarketplaceError, NotFoundError, StorageError,
    TooManyFilesError, UnauthenticatedError,
)


@pytest.mark.parametrize("error,status,code", [
    (InvalidShapeError("x"), 400, "INVALID_SHAPE"),
    (DomainValidationError("x"), 400, "DOMAIN_VALIDATION"),
    (TooManyFilesError(5, 4), 400, "TOO_MANY_FILES"),
    (InvalidUploadError(["a.txt"]), 400, "INVALID_UPLOAD"),
    (UnauthenticatedError(), 401, "UNAUTHENTICATED"),
    (ForbiddenError(), 403, "FORBIDDEN"),
    (NotFoundError("Listing"), 404, "NOT_FOUND"),
    (ConflictError("username"), 409, "CONFLICT"),
    (StorageError("disk full", "write"), 500, "STORAGE_ERROR"),
])
def test_status_and_code(error, status, code):
    assert isinstance(error, MarketplaceError)
    assert error.http_status == status
    assert error.to_response()["error"]["code"] == code


def test_conflict_detail_names_field():
    assert ConflictError("email").to_response()["error"]["detail"] == "email already in use."


def test_storage_error_response_hides_internals():
    body = StorageError("/var/images/x.png: disk full", "write").to_response()
    assert body["error"]["message"] == "Something went wrong"
    assert "disk full" not in str(body)
