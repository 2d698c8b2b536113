"""
ContactRepository - storage interface for contact lists and their contacts.

Two implementations exist: InMemoryContactRepository (tests, local runs)
and SqlContactRepository (SQLAlchemy). The application picks one when it
builds its dependencies; nothing holds a module-level store.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from ..models.contact import ContactStatus

# Contact attributes a caller may change after import
UPDATABLE_CONTACT_FIELDS = (
    "email", "first_name", "last_name", "company", "message", "template_title",
)
UPDATABLE_LIST_FIELDS = ("name", "description")


class ListNotFound(Exception):
    """The list does not exist or belongs to another user."""

    def __init__(self, list_id: str):
        self.list_id = list_id
        super().__init__(f"Contact list {list_id} not found")


class ContactNotFound(Exception):
    """The contact does not exist or belongs to another user."""

    def __init__(self, contact_id: str):
        self.contact_id = contact_id
        super().__init__(f"Contact {contact_id} not found")


class InvalidUpdate(ValueError):
    """An update names a field that cannot change, or carries a bad value."""


def normalize_contact_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial contact update.

    status must be a ContactStatus value; text fields and list_id store
    empty strings as None.

    Raises:
        InvalidUpdate: unknown field or unknown status
    """
    values: Dict[str, Any] = {}
    for key, value in changes.items():
        if key == "status":
            try:
                values[key] = ContactStatus(value).value
            except ValueError:
                raise InvalidUpdate(f"Unknown contact status: {value!r}")
        elif key == "list_id" or key in UPDATABLE_CONTACT_FIELDS:
            values[key] = value or None
        else:
            raise InvalidUpdate(f"Contact field '{key}' cannot be updated")
    return values


def normalize_list_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial list update (name and description only).

    Raises:
        InvalidUpdate: unknown field or blank name
    """
    values: Dict[str, Any] = {}
    for key, value in changes.items():
        if key not in UPDATABLE_LIST_FIELDS:
            raise InvalidUpdate(f"List field '{key}' cannot be updated")
        if key == "name":
            if not value or not value.strip():
                raise InvalidUpdate("List name cannot be empty.")
            value = value.strip()
        values[key] = value or None
    return values


class ContactRepository(ABC):
    """
    Persistence collaborator for the import pipeline.

    Stored objects expose the attributes of the ContactList / Contact models
    (id, user_id, name, csv_file_name, contact_count, created_at, ...).
    Every lookup is scoped by user_id.
    """

    @abstractmethod
    def list_lists(self, user_id: str) -> List[Any]:
        """All lists of the user, most recently updated first."""

    @abstractmethod
    def get_list(self, user_id: str, list_id: str) -> Any:
        """
        Raises:
            ListNotFound: unknown id or foreign list
        """

    @abstractmethod
    def create_list(self, user_id: str, draft) -> Any:
        """Store a ContactListDraft. The stored list starts with contact_count 0."""

    @abstractmethod
    def update_list(self, user_id: str, list_id: str, changes: Mapping[str, Any]) -> Any:
        """Change the name and/or description of a list."""

    @abstractmethod
    def delete_list(self, user_id: str, list_id: str) -> int:
        """Delete the list and its contacts; returns the number of contacts removed."""

    @abstractmethod
    def create_contact(self, user_id: str, list_id: Optional[str], candidate) -> Any:
        """Store a CandidateContact, incrementing the owning list's contact_count."""

    @abstractmethod
    def get_contact(self, user_id: str, contact_id: str) -> Any:
        """
        Raises:
            ContactNotFound: unknown id or foreign contact
        """

    @abstractmethod
    def update_contact(self, user_id: str, contact_id: str, changes: Mapping[str, Any]) -> Any:
        """
        Apply a partial update to a contact.

        Moving the contact to another list (a changed list_id) decrements the
        old list's contact_count and increments the new one's.

        Raises:
            ContactNotFound: unknown id or foreign contact
            ListNotFound: the target list is unknown or foreign
            InvalidUpdate: unknown field or status
        """

    @abstractmethod
    def delete_contact(self, user_id: str, contact_id: str) -> None:
        """Delete a contact, decrementing the owning list's contact_count."""

    @abstractmethod
    def list_contacts(self, user_id: str, list_id: Optional[str] = None) -> List[Any]:
        """Contacts of the user, optionally restricted to one list, oldest first."""

    @abstractmethod
    def recount_contacts(self, user_id: str, list_id: str) -> int:
        """Reset the list's contact_count from its stored contacts and return it."""
