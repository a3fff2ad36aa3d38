"""Request/response schemas for auth endpoints and token claims."""

from datetime import datetime

from pydantic import BaseModel, Field

from sumbar_api.schemas.common import (
    PASSWORD_MAX_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    ApiModel,
)


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class LoginUser(ApiModel):
    """User summary returned alongside a fresh token."""

    id: int
    username: str
    email: str
    role: str


class LoginResponse(BaseModel):
    """Signed session token returned after successful login."""

    token: str = Field(..., description="JWT; send as Authorization: Bearer <token>")
    user: LoginUser


class TokenClaims(BaseModel):
    """Verified claims carried by a session token."""

    user_id: int
    role: str
    issued_at: datetime
    expires_at: datetime


class CurrentUser(BaseModel):
    """Authenticated identity resolved from a token plus a fresh user lookup."""

    id: int
    username: str
    email: str
    role: str
    role_id: int
