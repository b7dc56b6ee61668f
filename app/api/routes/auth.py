"""Auth Routes — registration, login, and the current-user probe.

Invariants:
    - register/login are the only routes that mint tokens
    - Responses never include hashed_password (UserResponse has no such field)
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_account_service, get_current_user
from app.models.user import User
from app.schemas.user import UserLogin, UserRegister, UserResponse
from app.services.account_service import AccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_data(user) -> dict:
    return UserResponse.model_validate(user).model_dump(by_alias=True, mode="json")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: UserRegister, accounts: AccountService = Depends(get_account_service),
):
    user, token = await accounts.register(body)
    return {
        "success": True,
        "message": "User registered successfully",
        "token": token,
        "data": _user_data(user),
    }


@router.post("/login")
async def login(
    body: UserLogin, accounts: AccountService = Depends(get_account_service),
):
    user, token = await accounts.login(body)
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "data": _user_data(user),
    }


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"success": True, "data": _user_data(user)}
