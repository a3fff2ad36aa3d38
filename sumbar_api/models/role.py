"""ORM model for the closed, seeded set of access roles."""

from enum import Enum

from sqlalchemy import Column, Integer, String

from sumbar_api.models.base import Base


class RoleName(str, Enum):
    """Role names known to the application; route gates match these exactly."""

    ADMIN_PUSAT = "admin_pusat"
    ADMIN_KABKOTA = "admin_kabkota"


class Role(Base):
    """Access role. Rows are seeded by migration and read-only to the API."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True)
    description = Column(String(255), nullable=True)
