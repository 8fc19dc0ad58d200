"""User Routes — account registration."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from marketplace.api.deps import get_identity_service
from marketplace.schemas.user import UserResponse
from marketplace.services.identity import IdentityService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    payload: Any = Body(None),
    identity: IdentityService = Depends(get_identity_service),
):
    user = await identity.register(payload)
    return UserResponse.from_user(user)
