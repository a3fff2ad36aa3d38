"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func, true
from sqlalchemy.orm import relationship

from sumbar_api.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    username and email are unique at the storage layer so concurrent writers
    cannot both commit a duplicate. password_hash is never serialized.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    role = relationship("Role", lazy="joined")
    region = relationship("Region", lazy="joined")
