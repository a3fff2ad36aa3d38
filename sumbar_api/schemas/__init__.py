"""Pydantic request/response schemas."""

from sumbar_api.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    LoginUser,
    TokenClaims,
)
from sumbar_api.schemas.common import ApiModel, MessageResponse
from sumbar_api.schemas.health import HealthResponse
from sumbar_api.schemas.user import (
    ChangePasswordRequest,
    RoleSummary,
    UserCreate,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "ApiModel",
    "ChangePasswordRequest",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "MessageResponse",
    "RoleSummary",
    "TokenClaims",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
