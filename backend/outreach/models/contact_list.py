"""
ContactList model - groups the contacts of one CSV upload or a manual list.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Text, Integer
from sqlalchemy.orm import relationship

from ..database import Base


class ListSource(str, Enum):
    """How a contact list was created."""
    CSV_IMPORT = "csv_import"
    MANUAL = "manual"


class ContactList(Base):
    """Contact list owned by a user."""

    __tablename__ = "contact_lists"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    source = Column(String(20), default=ListSource.MANUAL.value)
    csv_file_name = Column(String(255), nullable=True)

    # Stats
    contact_count = Column(Integer, default=0)

    contacts = relationship("Contact", back_populates="contact_list", lazy="dynamic")

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ContactList {self.name}>"
