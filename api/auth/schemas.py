"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., max_length=320, pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=128)
    # Guest account whose data should move to the new user.
    guest_id: int | None = Field(default=None, alias="guestId")


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=320, pattern=_EMAIL_PATTERN)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    is_guest: bool = Field(alias="isGuest")


class AuthResponse(BaseModel):
    token: str
    user: UserResponse
