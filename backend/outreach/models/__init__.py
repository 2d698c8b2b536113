"""
SQLAlchemy models for the LinkedIn Outreach Manager.
"""
from .contact import Contact, ContactStatus, CONTACT_STATUS_CONFIG
from .contact_list import ContactList, ListSource

__all__ = [
    "Contact",
    "ContactStatus",
    "CONTACT_STATUS_CONFIG",
    "ContactList",
    "ListSource",
]
