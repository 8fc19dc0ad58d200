"""User Schemas — registration rules and public account shape.

Invariants:
    - UserCreate: username 3-30 chars, email shaped like an address, password >= 3 chars
    - UserResponse never carries the password hash
"""

import re
from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AddressIn(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )

    city: StrictStr | None = None
    country: StrictStr | None = None
    postal_code: str | None = None
    street: StrictStr | None = None

    @field_validator("postal_code", mode="before")
    @classmethod
    def postal_code_as_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class UserCreate(BaseModel):
    model_config = _CAMEL

    username: StrictStr = Field(min_length=3, max_length=30)
    email: StrictStr = Field(max_length=254)
    password: StrictStr = Field(min_length=3)
    phone_number: StrictStr | None = Field(None, max_length=40)
    birth_date: date
    address: AddressIn = Field(default_factory=AddressIn)

    @field_validator("email")
    @classmethod
    def email_shape(cls, v: str) -> str:
        if not _EMAIL.match(v):
            raise ValueError("email is not a valid address")
        return v.lower()


class UserResponse(BaseModel):
    model_config = _CAMEL

    id: UUID
    username: str
    email: str
    phone_number: str | None = None
    birth_date: date
    creation_date: datetime
    address: AddressIn

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            phone_number=user.phone_number,
            birth_date=user.birth_date,
            creation_date=user.creation_date,
            address=AddressIn(
                city=user.address_city,
                country=user.address_country,
                postal_code=user.address_postal_code,
                street=user.address_street,
            ),
        )


class LoginResponse(BaseModel):
    token: str
    user: UserResponse
