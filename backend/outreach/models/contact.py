"""
Contact model - a LinkedIn prospect imported into a contact list.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base


class ContactStatus(str, Enum):
    """Outreach pipeline stage of a contact."""
    NOT_CONTACTED = "not_contacted"
    CONTACTED = "contacted"
    REPLIED = "replied"
    MEETING_SCHEDULED = "meeting_scheduled"
    MEETING_COMPLETED = "meeting_completed"
    QUALIFIED = "qualified"
    NOT_QUALIFIED = "not_qualified"
    NO_RESPONSE = "no_response"


# Display labels, in pipeline order
CONTACT_STATUS_CONFIG = {
    ContactStatus.NOT_CONTACTED: {"label": "Not Contacted", "order": 1},
    ContactStatus.CONTACTED: {"label": "Contacted", "order": 2},
    ContactStatus.REPLIED: {"label": "Replied", "order": 3},
    ContactStatus.MEETING_SCHEDULED: {"label": "Meeting Scheduled", "order": 4},
    ContactStatus.MEETING_COMPLETED: {"label": "Meeting Completed", "order": 5},
    ContactStatus.QUALIFIED: {"label": "Qualified", "order": 6},
    ContactStatus.NOT_QUALIFIED: {"label": "Not Qualified", "order": 7},
    ContactStatus.NO_RESPONSE: {"label": "No Response", "order": 8},
}


class Contact(Base):
    """Stored contact, owned by a user and optionally grouped in a list."""

    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), nullable=False, index=True)

    # Personal info
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)

    # Outreach
    status = Column(String(50), default=ContactStatus.NOT_CONTACTED.value)
    message = Column(Text, nullable=True)  # Message already sent, if any
    template_title = Column(String(255), nullable=True)

    # List relationship
    list_id = Column(String(36), ForeignKey("contact_lists.id"), nullable=True)
    contact_list = relationship("ContactList", back_populates="contacts")

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Contact {self.first_name} {self.last_name} - {self.company}>"
