"""
Auth API routes — user listing, register, login, password reset.

Route prefix: /api
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from auth.dependencies import get_auth_service, get_current_user_id
from auth.service import AuthService


router = APIRouter(tags=["Auth"])


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class LoginRequest(BaseModel):
    username: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_password: str = Field(..., alias="newPassword", min_length=1, max_length=128)


class UserSummary(BaseModel):
    id: str
    username: str
    email: str


class UserRecord(UserSummary):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    message: str
    user: UserSummary
    token: str


class MessageResponse(BaseModel):
    message: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.get("/user", response_model=List[UserRecord])
async def list_users(
    service: AuthService = Depends(get_auth_service),
) -> List[Dict[str, Any]]:
    """List every user record (hashes and reset tokens withheld)."""
    users = await service.list_users()
    return [
        {**user.summary(), "created_at": user.created_at, "updated_at": user.updated_at}
        for user in users
    ]


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse, "description": "User already exists"}},
)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user and return a bearer token."""
    result = await service.register(req.username, req.email, req.password)
    return {"message": "User created successfully", "user": result.user, "token": result.token}


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": MessageResponse, "description": "Invalid username or password"}},
)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with username + password."""
    result = await service.login(req.username, req.password)
    return {"message": "Login successful", "user": result.user, "token": result.token}


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    responses={404: {"model": MessageResponse, "description": "User not found"}},
)
async def forgot_password(
    req: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Mail a password-reset link to the account's address."""
    return {"message": await service.request_reset(req.email)}


@router.post(
    "/reset-password/{token}",
    response_model=MessageResponse,
    responses={400: {"model": MessageResponse, "description": "Invalid or expired token"}},
)
async def reset_password(
    token: str,
    req: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Set a new password using the token from the reset mail."""
    return {"message": await service.complete_reset(token, req.new_password)}


@router.get("/me", response_model=UserSummary)
async def me(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Return the user bound to the presented bearer token."""
    user = await service.get_user(user_id)
    return user.summary()
