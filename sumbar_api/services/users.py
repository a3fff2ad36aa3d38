"""User management: CRUD and password change with uniqueness and last-admin invariants."""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sumbar_api.core.security import hash_password, verify_password
from sumbar_api.models import Region, Role, User
from sumbar_api.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "Username or email already exists"


class UserServiceError(Exception):
    """Base for expected user-management failures; message is safe to show clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(UserServiceError):
    """Raised when no user row has the requested id."""

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class UserConflictError(UserServiceError):
    """Raised on uniqueness violations and last-admin protection."""


class InvalidReferenceError(UserServiceError):
    """Raised when a role or region id does not reference an existing row."""


class IncorrectPasswordError(UserServiceError):
    """Raised when change-password is given the wrong current password."""

    def __init__(self, message: str = "Current password is incorrect") -> None:
        super().__init__(message)


def _load_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


def _ensure_unique(
    db: Session,
    username: str | None,
    email: str | None,
    exclude_id: int | None = None,
) -> None:
    """Single existence query over username OR email, optionally ignoring one row."""
    conditions = []
    if username is not None:
        conditions.append(User.username == username)
    if email is not None:
        conditions.append(User.email == email)
    if not conditions:
        return
    query = select(User.id).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    if db.execute(query.limit(1)).first() is not None:
        raise UserConflictError(DUPLICATE_USER_MESSAGE)


def _ensure_role(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise InvalidReferenceError("Invalid role")
    return role


def _ensure_region(db: Session, region_id: int | None) -> None:
    if region_id is not None and db.get(Region, region_id) is None:
        raise InvalidReferenceError("Invalid region")


def _count_active_admins(db: Session, admin_role_id: int) -> int:
    """
    Count active users holding the admin role, locking those rows until commit.
    The lock serializes concurrent deletes/demotions of admins on PostgreSQL.
    """
    ids = db.execute(
        select(User.id)
        .where(User.role_id == admin_role_id, User.is_active.is_(True))
        .with_for_update()
    ).scalars().all()
    return len(ids)


def _commit(db: Session) -> None:
    """Commit once; map a unique-constraint race lost at the store to a conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("User write rejected by store constraint: %s", e.orig)
        raise UserConflictError(DUPLICATE_USER_MESSAGE) from e


def list_users(db: Session) -> list[User]:
    """All users ordered by id, with role joined."""
    return list(db.execute(select(User).order_by(User.id)).scalars().unique().all())


def get_user(db: Session, user_id: int) -> User:
    """Return the user with user_id or raise UserNotFoundError."""
    return _load_user(db, user_id)


def create_user(db: Session, data: UserCreate) -> User:
    """
    Create a user after checking username/email uniqueness and role/region references.

    The password is hashed here, exactly once; is_active starts True.
    """
    _ensure_unique(db, data.username, data.email)
    _ensure_role(db, data.role_id)
    _ensure_region(db, data.region_id)

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        role_id=data.role_id,
        region_id=data.region_id,
        is_active=True,
    )
    db.add(user)
    _commit(db)
    db.refresh(user)
    logger.info("User created: id=%s role_id=%s", user.id, user.role_id)
    return user


def update_user(db: Session, user_id: int, data: UserUpdate, admin_role_id: int) -> User:
    """
    Apply a partial update: only fields present in data.model_fields_set change.

    Supplied username/email are re-checked for uniqueness against other users,
    a supplied password is hashed, and a supplied role/region must exist. The
    last active admin cannot be deactivated or moved to another role.
    """
    user = _load_user(db, user_id)
    changes = data.supplied()

    if "username" in changes or "email" in changes:
        _ensure_unique(
            db,
            changes.get("username"),
            changes.get("email"),
            exclude_id=user.id,
        )
    if "role_id" in changes:
        _ensure_role(db, changes["role_id"])
    if "region_id" in changes:
        _ensure_region(db, changes["region_id"])

    loses_admin = user.is_active and user.role_id == admin_role_id and (
        changes.get("is_active", True) is False
        or changes.get("role_id", admin_role_id) != admin_role_id
    )
    if loses_admin and _count_active_admins(db, admin_role_id) <= 1:
        db.rollback()
        raise UserConflictError("Cannot demote or deactivate the last admin user")

    if "password" in changes:
        user.password_hash = hash_password(changes.pop("password"))
    for field, value in changes.items():
        setattr(user, field, value)

    _commit(db)
    db.refresh(user)
    logger.info("User updated: id=%s fields=%s", user.id, sorted(data.model_fields_set))
    return user


def delete_user(db: Session, user_id: int, admin_role_id: int) -> None:
    """
    Delete a user unless it is the last active admin.

    The admin count and the delete share one transaction, with the counted
    rows locked, so two concurrent deletes cannot both pass the check.
    """
    user = _load_user(db, user_id)
    if user.is_active and user.role_id == admin_role_id:
        if _count_active_admins(db, admin_role_id) <= 1:
            db.rollback()
            logger.warning("Refused to delete last admin user: id=%s", user_id)
            raise UserConflictError("Cannot delete the last admin user")
    db.delete(user)
    db.commit()
    logger.info("User deleted: id=%s", user_id)


def change_password(db: Session, user_id: int, current_password: str, new_password: str) -> None:
    """Replace the stored hash after verifying current_password against it."""
    user = _load_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        logger.info("Password change rejected (wrong current password): id=%s", user_id)
        raise IncorrectPasswordError()
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed: id=%s", user_id)
