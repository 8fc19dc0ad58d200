"""Login Route — exchanges username/password for a bearer token."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from marketplace.api.deps import get_identity_service
from marketplace.schemas.user import LoginResponse, UserResponse
from marketplace.services.identity import IdentityService

router = APIRouter(prefix="/api/login", tags=["login"])


@router.post("", response_model=LoginResponse)
async def login(
    payload: Any = Body(None),
    identity: IdentityService = Depends(get_identity_service),
):
    token, user = await identity.login(payload)
    return LoginResponse(token=token, user=UserResponse.from_user(user))
