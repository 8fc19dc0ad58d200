"""Identity Service — registration, login and bearer-token resolution.

Invariants:
    - Username and email are unique; a clash raises ConflictError naming the field
    - Login failures never say whether the username or the password was wrong
    - Only token digests are stored; unknown or expired tokens raise UnauthenticatedError
    - resolve_principal() returns a frozen Principal, the only identity the core sees
"""

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import Settings
from marketplace.core.domain_types import Address, Principal, UserId
from marketplace.core.errors import (
    ConflictError, DomainValidationError, InvalidShapeError, UnauthenticatedError,
)
from marketplace.core.parse_fields import LOGIN_FIELDS, USER_FIELDS, parse_fields
from marketplace.infrastructure.security import (
    generate_token, hash_password, hash_token, verify_password,
)
from marketplace.models.access_token import AccessToken
from marketplace.models.user import User
from marketplace.schemas.user import UserCreate
from marketplace.services.listing_store import describe_validation_error

logger = logging.getLogger(__name__)


def to_principal(user: User) -> Principal:
    return Principal(
        id=UserId(user.id),
        username=user.username,
        email=user.email,
        phone_number=user.phone_number,
        address=Address(
            city=user.address_city,
            country=user.address_country,
            postal_code=user.address_postal_code,
            street=user.address_street,
        ),
    )


class IdentityService:
    """Issues and resolves principals."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.token_secret = settings.token_secret
        self.token_ttl = settings.token_ttl
        self.hash_iterations = settings.password_hash_iterations

    async def register(self, payload: Any) -> User:
        fields = parse_fields(payload, USER_FIELDS)
        try:
            data = UserCreate.model_validate(fields)
        except ValidationError as e:
            raise DomainValidationError(describe_validation_error(e)) from e

        await self._ensure_unique(data.username, data.email)
        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password, self.hash_iterations),
            phone_number=data.phone_number,
            birth_date=data.birth_date,
            address_city=data.address.city,
            address_country=data.address.country,
            address_postal_code=data.address.postal_code,
            address_street=data.address.street,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent registration.
            await self.db.rollback()
            raise ConflictError("username or email") from e
        await self.db.refresh(user)
        logger.info(f"User {user.username} registered", extra={"username": user.username})
        return user

    async def login(self, payload: Any) -> tuple[str, User]:
        fields = parse_fields(payload, LOGIN_FIELDS)
        username = fields.get("username")
        password = fields.get("password")
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidShapeError("username and password must be strings.")

        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"username": username})
            raise UnauthenticatedError()

        token = generate_token()
        now = datetime.now(timezone.utc)
        self.db.add(AccessToken(
            user_id=user.id,
            token_hash=hash_token(token, self.token_secret),
            created_at=now,
            expires_at=now + self.token_ttl,
        ))
        await self.db.commit()
        return token, user

    async def resolve_principal(self, token: str | None) -> Principal:
        if not token:
            raise UnauthenticatedError()
        now = datetime.now(timezone.utc)
        result = await self.db.execute(
            select(AccessToken).where(
                AccessToken.token_hash == hash_token(token, self.token_secret),
                AccessToken.expires_at > now,
            ),
        )
        access = result.unique().scalar_one_or_none()
        if access is None:
            raise UnauthenticatedError()
        return to_principal(access.user)

    async def _ensure_unique(self, username: str, email: str) -> None:
        result = await self.db.execute(
            select(User.username, User.email).where(
                or_(User.username == username, User.email == email),
            ),
        )
        clashes = result.all()
        if any(existing_username == username for existing_username, _ in clashes):
            raise ConflictError("username")
        if clashes:
            raise ConflictError("email")
