"""Credential Primitives — password hashing and opaque access tokens.

Invariants:
    - Passwords stored as "pbkdf2_sha256$<iterations>$<salt>$<digest>"
    - Tokens are random url-safe strings; only their peppered SHA-256 digest is stored
    - Comparisons use hmac.compare_digest
"""

import base64
import hashlib
import hmac
import secrets

_ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, iterations: int, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations,
    )
    encoded = base64.b64encode(digest).decode("ascii")
    return f"{_ALGORITHM}${iterations}${salt}${encoded}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algorithm, iterations, salt, _ = password_hash.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != _ALGORITHM:
        return False
    candidate = hash_password(password, rounds, salt)
    return hmac.compare_digest(candidate, password_hash)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(token: str, pepper: str) -> str:
    digest = hashlib.sha256((token + pepper).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("utf-8")
