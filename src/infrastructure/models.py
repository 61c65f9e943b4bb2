"""
SQLAlchemy ORM models.

Tables
------
* ``snapshots`` -- one JSON blob per logical key (``trips``, ``children``),
  rewritten after every mutation batch and read back at startup.
"""

from sqlalchemy import JSON, Column, DateTime, String, func

from .database import Base

TRIPS_KEY = "trips"
CHILDREN_KEY = "children"


class SnapshotModel(Base):
    __tablename__ = "snapshots"

    key = Column(String(64), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
