"""SQLAlchemy ORM models."""

from sumbar_api.models.base import Base
from sumbar_api.models.region import Region
from sumbar_api.models.role import Role, RoleName
from sumbar_api.models.user import User

__all__ = ["Base", "Region", "Role", "RoleName", "User"]
