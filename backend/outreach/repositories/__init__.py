"""
Storage backends for contact lists and contacts.
"""
from .base import ContactNotFound, ContactRepository, InvalidUpdate, ListNotFound
from .memory import InMemoryContactRepository
from .sql import SqlContactRepository

__all__ = [
    "ContactRepository",
    "ContactNotFound",
    "InvalidUpdate",
    "ListNotFound",
    "InMemoryContactRepository",
    "SqlContactRepository",
]
