"""Request/response schemas for user management endpoints."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from sumbar_api.schemas.common import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    ApiModel,
)

# Fields that, once sent in an update, must carry a value.
NON_NULLABLE_UPDATE_FIELDS = ("username", "email", "password", "role_id", "is_active")


def _clean_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("username must be non-empty")
    return value


class RoleSummary(ApiModel):
    name: str
    description: str | None = None


class UserResponse(ApiModel):
    """User as exposed over the API. There is deliberately no password field."""

    id: int
    username: str
    email: str
    role_id: int
    region_id: int | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    role: RoleSummary


class UserCreate(ApiModel):
    """Body for POST /users."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role_id: int
    region_id: int | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _clean_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(ApiModel):
    """
    Body for PUT /users/{id}; every field optional.

    Only fields present in the request are applied (see model_fields_set), so
    omitting a field keeps the stored value while sending a falsy value such as
    isActive=false or regionId=null sets it.
    """

    username: str | None = Field(
        default=None, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN
    )
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    role_id: int | None = None
    region_id: int | None = None
    is_active: bool | None = None

    @field_validator(*NON_NULLABLE_UPDATE_FIELDS)
    @classmethod
    def reject_explicit_null(cls, v: object) -> object:
        # Only runs for fields the client sent; defaults are not validated.
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _clean_username(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    def supplied(self) -> dict[str, object]:
        """Fields the client actually sent, keyed by attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class ChangePasswordRequest(ApiModel):
    """Body for POST /users/{id}/change-password."""

    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
