"""
Database models for KitCheckout.
"""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base

from kitcheckout.utils import utcnow

Base = declarative_base()


class DocumentModel(Base):
    """One JSON document per collection key."""
    __tablename__ = "documents"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
