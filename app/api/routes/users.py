"""User Routes — profile maintenance and the public professionals directory.

Invariants:
    - /profile and /password act on the authenticated user only
    - /professionals is public and returns public profiles only
"""

import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_account_service, get_current_user
from app.models.user import User
from app.schemas.user import PasswordUpdate, ProfileUpdate, PublicProfile, UserResponse
from app.services.account_service import AccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/professionals")
async def list_professionals(
    accounts: AccountService = Depends(get_account_service),
):
    users = await accounts.list_professionals()
    data = [
        PublicProfile.model_validate(u).model_dump(by_alias=True, mode="json")
        for u in users
    ]
    return {"success": True, "data": data, "count": len(data)}


@router.put("/profile")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    user = await accounts.update_profile(user, body)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": UserResponse.model_validate(user).model_dump(by_alias=True, mode="json"),
    }


@router.put("/password")
async def update_password(
    body: PasswordUpdate,
    user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    await accounts.change_password(user, body)
    return {"success": True, "message": "Password updated successfully"}
