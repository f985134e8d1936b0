"""Stored collection model definitions."""

from sqlalchemy import Column, DateTime, String, Text
from booking.database import Base


class StoredCollection(Base):
    """One JSON document per logical collection."""
    __tablename__ = "store_collections"

    name = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime)
