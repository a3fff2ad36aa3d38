"""Credential checks and login bookkeeping."""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from sumbar_api.core.security import dummy_password_hash, verify_password
from sumbar_api.models import User

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> User | None:
    """
    Return the active user matching username/password, else None.

    Unknown usernames still pay for one bcrypt check so the response time does
    not reveal which usernames exist.
    """
    user = db.execute(select(User).where(User.username == username)).scalars().first()
    if user is None:
        verify_password(password, dummy_password_hash())
        logger.info("Login failed: unknown username=%r", username)
        return None
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: bad password for user id=%s", user.id)
        return None
    if not user.is_active:
        logger.info("Login failed: inactive user id=%s", user.id)
        return None
    return user


def record_login(db: Session, user: User) -> None:
    """Stamp last_login with the current time."""
    user.last_login = datetime.now(UTC)
    db.commit()
    db.refresh(user)
