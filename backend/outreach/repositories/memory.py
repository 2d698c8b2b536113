"""
In-memory ContactRepository. State lives on the instance only.
"""
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from .base import (
    ContactNotFound,
    ContactRepository,
    ListNotFound,
    normalize_contact_changes,
    normalize_list_changes,
)

logger = logging.getLogger(__name__)


@dataclass
class StoredContactList:
    id: str
    user_id: str
    name: str
    source: str
    csv_file_name: Optional[str]
    description: Optional[str]
    contact_count: int
    created_at: datetime
    updated_at: datetime


@dataclass
class StoredContact:
    id: str
    user_id: str
    list_id: Optional[str]
    email: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    company: Optional[str]
    status: str
    message: Optional[str]
    template_title: Optional[str]
    created_at: datetime
    updated_at: datetime


class InMemoryContactRepository(ContactRepository):
    """Dict-backed repository. Writes hold an instance lock."""

    def __init__(self):
        self._lists: Dict[str, StoredContactList] = {}
        self._contacts: Dict[str, StoredContact] = {}
        self._lock = threading.Lock()

    def list_lists(self, user_id: str) -> List[StoredContactList]:
        lists = [l for l in list(self._lists.values()) if l.user_id == user_id]
        return sorted(lists, key=lambda l: l.updated_at, reverse=True)

    def get_list(self, user_id: str, list_id: str) -> StoredContactList:
        contact_list = self._lists.get(list_id)
        if contact_list is None or contact_list.user_id != user_id:
            raise ListNotFound(list_id)
        return contact_list

    def create_list(self, user_id: str, draft) -> StoredContactList:
        now = datetime.utcnow()
        contact_list = StoredContactList(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=draft.name,
            source=draft.source.value,
            csv_file_name=draft.csv_file_name,
            description=draft.description,
            contact_count=0,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._lists[contact_list.id] = contact_list
        logger.debug(f"Created list {contact_list.id} ({contact_list.name})")
        return contact_list

    def update_list(
        self, user_id: str, list_id: str, changes: Mapping[str, Any]
    ) -> StoredContactList:
        values = normalize_list_changes(changes)
        with self._lock:
            contact_list = self.get_list(user_id, list_id)
            for key, value in values.items():
                setattr(contact_list, key, value)
            contact_list.updated_at = datetime.utcnow()
        return contact_list

    def delete_list(self, user_id: str, list_id: str) -> int:
        with self._lock:
            self.get_list(user_id, list_id)
            contact_ids = [c.id for c in self._contacts.values() if c.list_id == list_id]
            for contact_id in contact_ids:
                del self._contacts[contact_id]
            del self._lists[list_id]
        return len(contact_ids)

    def _adjust_count(self, list_id: Optional[str], delta: int, now: datetime):
        contact_list = self._lists.get(list_id) if list_id else None
        if contact_list is not None:
            contact_list.contact_count += delta
            contact_list.updated_at = now

    def create_contact(self, user_id: str, list_id: Optional[str], candidate) -> StoredContact:
        now = datetime.utcnow()
        contact = StoredContact(
            id=str(uuid.uuid4()),
            user_id=user_id,
            list_id=list_id,
            email=candidate.email or None,
            first_name=candidate.first_name or None,
            last_name=candidate.last_name or None,
            company=candidate.company or None,
            status=candidate.status.value,
            message=candidate.message or None,
            template_title=candidate.template_title or None,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            if list_id:
                self.get_list(user_id, list_id)
            self._contacts[contact.id] = contact
            self._adjust_count(list_id, 1, now)
        return contact

    def get_contact(self, user_id: str, contact_id: str) -> StoredContact:
        contact = self._contacts.get(contact_id)
        if contact is None or contact.user_id != user_id:
            raise ContactNotFound(contact_id)
        return contact

    def update_contact(
        self, user_id: str, contact_id: str, changes: Mapping[str, Any]
    ) -> StoredContact:
        values = normalize_contact_changes(changes)
        now = datetime.utcnow()
        with self._lock:
            contact = self.get_contact(user_id, contact_id)
            new_list_id = values.get("list_id", contact.list_id)
            if new_list_id != contact.list_id:
                if new_list_id:
                    self.get_list(user_id, new_list_id)
                self._adjust_count(contact.list_id, -1, now)
                self._adjust_count(new_list_id, 1, now)
                logger.debug(f"Moved contact {contact_id}: {contact.list_id} -> {new_list_id}")
            for key, value in values.items():
                setattr(contact, key, value)
            contact.updated_at = now
        return contact

    def delete_contact(self, user_id: str, contact_id: str) -> None:
        with self._lock:
            contact = self.get_contact(user_id, contact_id)
            del self._contacts[contact_id]
            self._adjust_count(contact.list_id, -1, datetime.utcnow())

    def list_contacts(self, user_id: str, list_id: Optional[str] = None) -> List[StoredContact]:
        if list_id:
            self.get_list(user_id, list_id)
        contacts = [
            c for c in list(self._contacts.values())
            if c.user_id == user_id and (list_id is None or c.list_id == list_id)
        ]
        return sorted(contacts, key=lambda c: c.created_at)

    def recount_contacts(self, user_id: str, list_id: str) -> int:
        with self._lock:
            contact_list = self.get_list(user_id, list_id)
            actual = sum(1 for c in self._contacts.values() if c.list_id == list_id)
            if actual != contact_list.contact_count:
                logger.info(f"List {list_id}: contact_count {contact_list.contact_count} -> {actual}")
                contact_list.contact_count = actual
                contact_list.updated_at = datetime.utcnow()
        return actual
