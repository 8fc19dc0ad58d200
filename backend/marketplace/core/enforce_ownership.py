"""Ownership Enforcement — decides whether a principal may mutate a listing.

Invariants:
    - PURE: no IO, no side effects
    - seller.username is the only authorization key
    - Called before update, delete and upload; never before reads
"""

from marketplace.core.domain_types import Principal
from marketplace.core.errors import ErrorContext, ForbiddenError


def is_owner(principal: Principal, seller_username: str) -> bool:
    return principal.username == seller_username


def authorize(principal: Principal, seller_username: str) -> None:
    """Raise ForbiddenError unless principal created the listing."""
    if not is_owner(principal, seller_username):
        raise ForbiddenError(ErrorContext(username=principal.username))
