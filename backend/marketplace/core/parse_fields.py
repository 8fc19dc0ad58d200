"""Field Parsing — strict allow-list parse of raw request payloads.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Output holds only keys that are both in the schema and in the payload
    - Any key outside the schema raises InvalidShapeError naming every surplus key
    - No semantic checks here (ranges, enums, lengths belong to domain validation)
    - decode_json_body() maps undecodable bytes to InvalidShapeError; an empty body is None
"""

import json
from typing import Any

from marketplace.core.errors import InvalidShapeError

POST_FIELDS: frozenset[str] = frozenset({
    "title", "description", "category", "askingPrice", "deliveryType",
})

USER_FIELDS: frozenset[str] = frozenset({
    "email", "username", "address", "phoneNumber", "birthDate", "password",
})

LOGIN_FIELDS: frozenset[str] = frozenset({"username", "password"})

SEARCH_FIELDS: frozenset[str] = frozenset({
    "country", "city", "category", "postedDate",
})


def find_extraneous_fields(payload: dict, schema: frozenset[str]) -> list[str]:
    """Keys present in payload but unknown to schema, sorted for stable messages."""
    return sorted(str(key) for key in payload if key not in schema)


def parse_fields(payload: Any, schema: frozenset[str]) -> dict[str, Any]:
    """Return the recognized subset of payload or raise InvalidShapeError."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidShapeError("Request body must be a JSON object.")

    extraneous = find_extraneous_fields(payload, schema)
    if extraneous:
        raise InvalidShapeError(
            f"Extraneous fields in body: {', '.join(extraneous)}",
            fields=extraneous,
        )
    return {key: payload[key] for key in schema if key in payload}


def decode_json_body(raw: bytes) -> Any:
    """Decode a raw request body. Callers decode only after existence and ownership checks."""
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidShapeError("Request body is not valid JSON.") from e
