"""JWT login and auth dependencies (get_current_user, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sumbar_api.core.database import get_db
from sumbar_api.core.security import InvalidTokenError, TokenService, get_token_service
from sumbar_api.models import RoleName, User
from sumbar_api.schemas.auth import CurrentUser, LoginRequest, LoginResponse, LoginUser
from sumbar_api.schemas.common import MessageResponse
from sumbar_api.services.auth import authenticate, record_login

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=BEARER_HEADERS,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": MessageResponse}},
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a signed session token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = authenticate(db, body.username, body.password)
    if user is None:
        raise _unauthenticated("Invalid credentials")
    token = tokens.issue(user.id, user.role.name)
    record_login(db, user)
    logger.info("Login succeeded: user id=%s", user.id)
    return LoginResponse(
        token=token,
        user=LoginUser(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role.name,
        ),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """
    Dependency: resolve the Bearer token into the current user. Raises 401 if the
    header is missing, the token is invalid or expired, or the user is gone or inactive.
    Role and active flag come from the database, not from the token's claims.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthenticated("No token provided")
    try:
        claims = tokens.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.debug("Token rejected: %s", e.message)
        raise _unauthenticated("Invalid token") from e
    user = db.get(User, claims.user_id)
    if user is None:
        raise _unauthenticated("User not found")
    if not user.is_active:
        raise _unauthenticated("User is inactive")
    return CurrentUser(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role.name,
        role_id=user.role_id,
    )


def require_roles(*roles: RoleName) -> Callable[..., CurrentUser]:
    """
    Build a dependency that admits only users whose current role is in roles.
    Raises 403 for any other authenticated user.
    """
    if not roles:
        raise ValueError("require_roles needs at least one role")
    allowed = frozenset(RoleName(r).value for r in roles)

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to access this resource",
            )
        return current_user

    return dependency
