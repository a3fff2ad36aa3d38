"""User management endpoints: list, read, create, update, delete, change password."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from sumbar_api.api.v1.auth import get_current_user, require_roles
from sumbar_api.core.config import Settings, get_settings
from sumbar_api.core.database import get_db
from sumbar_api.models import RoleName
from sumbar_api.schemas.auth import CurrentUser
from sumbar_api.schemas.common import MessageResponse
from sumbar_api.schemas.user import (
    ChangePasswordRequest,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from sumbar_api.services import users as user_service
from sumbar_api.services.users import UserNotFoundError, UserServiceError

logger = logging.getLogger(__name__)
router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    401: {"model": MessageResponse},
    403: {"model": MessageResponse},
    404: {"model": MessageResponse},
}

# Ids are 64-bit in the store; larger path values fail validation instead of reaching it.
MAX_USER_ID = 2**63 - 1
UserId = Annotated[int, Path(le=MAX_USER_ID)]

AdminPusat = Annotated[CurrentUser, Depends(require_roles(RoleName.ADMIN_PUSAT))]
AnyAdmin = Annotated[
    CurrentUser,
    Depends(require_roles(RoleName.ADMIN_PUSAT, RoleName.ADMIN_KABKOTA)),
]


def _to_http(e: UserServiceError) -> HTTPException:
    """Map a service failure to its HTTP status: 404 for missing users, 400 otherwise."""
    if isinstance(e, UserNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("", response_model=list[UserResponse], responses=ERROR_RESPONSES)
def list_users(
    _admin: AdminPusat,
    db: Annotated[Session, Depends(get_db)],
) -> list[UserResponse]:
    """List all users with their role (admin_pusat only). Passwords are never returned."""
    return [UserResponse.model_validate(u) for u in user_service.list_users(db)]


@router.get("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
def get_user(
    user_id: UserId,
    _admin: AnyAdmin,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Fetch one user by id (admin_pusat or admin_kabkota)."""
    try:
        user = user_service.get_user(db, user_id)
    except UserServiceError as e:
        raise _to_http(e) from e
    return UserResponse.model_validate(user)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_user(
    body: UserCreate,
    admin: AdminPusat,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Create a user (admin_pusat only). Username and email must be unused; role must exist."""
    try:
        user = user_service.create_user(db, body)
    except UserServiceError as e:
        raise _to_http(e) from e
    logger.info("User id=%s created by admin id=%s", user.id, admin.id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
def update_user(
    user_id: UserId,
    body: UserUpdate,
    admin: AdminPusat,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    """
    Partially update a user (admin_pusat only).

    Omitted fields are left unchanged; fields sent with a value, including
    false or null where allowed, are written.
    """
    try:
        user = user_service.update_user(db, user_id, body, settings.ADMIN_ROLE_ID)
    except UserServiceError as e:
        raise _to_http(e) from e
    logger.info("User id=%s updated by admin id=%s", user.id, admin.id)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
def delete_user(
    user_id: UserId,
    admin: AdminPusat,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Delete a user (admin_pusat only). The last active admin cannot be deleted."""
    try:
        user_service.delete_user(db, user_id, settings.ADMIN_ROLE_ID)
    except UserServiceError as e:
        raise _to_http(e) from e
    logger.info("User id=%s deleted by admin id=%s", user_id, admin.id)
    return MessageResponse(message="User deleted successfully")


@router.post(
    "/{user_id}/change-password",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
)
def change_password(
    user_id: UserId,
    body: ChangePasswordRequest,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Change a user's password; the current password must be supplied and correct."""
    try:
        user_service.change_password(db, user_id, body.current_password, body.new_password)
    except UserServiceError as e:
        raise _to_http(e) from e
    return MessageResponse(message="Password updated successfully")
