"""ORM model for administrative regions users may be assigned to."""

from sqlalchemy import Column, Integer, String

from sumbar_api.models.base import Base


class Region(Base):
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
