"""
SQLAlchemy-backed ContactRepository.
"""
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Contact, ContactList
from .base import (
    ContactNotFound,
    ContactRepository,
    ListNotFound,
    normalize_contact_changes,
    normalize_list_changes,
)

logger = logging.getLogger(__name__)


class SqlContactRepository(ContactRepository):
    """Repository over a SQLAlchemy session; each write commits."""

    def __init__(self, session: Session):
        self.session = session

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database commit failed: {e}")
            self.session.rollback()
            raise

    def _adjust_count(self, list_id: Optional[str], delta: int):
        """Shift contact_count in the database without loading the list."""
        if not list_id:
            return
        self.session.query(ContactList).filter(ContactList.id == list_id).update(
            {
                ContactList.contact_count: ContactList.contact_count + delta,
                ContactList.updated_at: datetime.utcnow(),
            },
            synchronize_session=False,
        )

    def list_lists(self, user_id: str) -> List[ContactList]:
        return (
            self.session.query(ContactList)
            .filter(ContactList.user_id == user_id)
            .order_by(desc(ContactList.updated_at))
            .all()
        )

    def get_list(self, user_id: str, list_id: str) -> ContactList:
        contact_list = self.session.query(ContactList).filter(
            ContactList.id == list_id,
            ContactList.user_id == user_id
        ).first()
        if contact_list is None:
            raise ListNotFound(list_id)
        return contact_list

    def create_list(self, user_id: str, draft) -> ContactList:
        contact_list = ContactList(
            user_id=user_id,
            name=draft.name,
            source=draft.source.value,
            csv_file_name=draft.csv_file_name,
            description=draft.description,
            contact_count=0,
        )
        self.session.add(contact_list)
        self._commit()
        self.session.refresh(contact_list)
        logger.debug(f"Created list {contact_list.id} ({contact_list.name})")
        return contact_list

    def update_list(self, user_id: str, list_id: str, changes: Mapping[str, Any]) -> ContactList:
        values = normalize_list_changes(changes)
        contact_list = self.get_list(user_id, list_id)
        for key, value in values.items():
            setattr(contact_list, key, value)
        contact_list.updated_at = datetime.utcnow()
        self._commit()
        self.session.refresh(contact_list)
        return contact_list

    def delete_list(self, user_id: str, list_id: str) -> int:
        contact_list = self.get_list(user_id, list_id)
        removed = (
            self.session.query(Contact)
            .filter(Contact.list_id == list_id)
            .delete(synchronize_session=False)
        )
        self.session.delete(contact_list)
        self._commit()
        return removed

    def create_contact(self, user_id: str, list_id: Optional[str], candidate) -> Contact:
        if list_id:
            self.get_list(user_id, list_id)

        contact = Contact(
            user_id=user_id,
            list_id=list_id,
            email=candidate.email or None,
            first_name=candidate.first_name or None,
            last_name=candidate.last_name or None,
            company=candidate.company or None,
            status=candidate.status.value,
            message=candidate.message or None,
            template_title=candidate.template_title or None,
        )
        self.session.add(contact)
        self._adjust_count(list_id, 1)

        self._commit()
        self.session.refresh(contact)
        return contact

    def get_contact(self, user_id: str, contact_id: str) -> Contact:
        contact = self.session.query(Contact).filter(
            Contact.id == contact_id,
            Contact.user_id == user_id
        ).first()
        if contact is None:
            raise ContactNotFound(contact_id)
        return contact

    def update_contact(self, user_id: str, contact_id: str, changes: Mapping[str, Any]) -> Contact:
        values = normalize_contact_changes(changes)
        contact = self.get_contact(user_id, contact_id)

        new_list_id = values.get("list_id", contact.list_id)
        if new_list_id != contact.list_id:
            if new_list_id:
                self.get_list(user_id, new_list_id)
            self._adjust_count(contact.list_id, -1)
            self._adjust_count(new_list_id, 1)
            logger.debug(f"Moved contact {contact_id}: {contact.list_id} -> {new_list_id}")

        for key, value in values.items():
            setattr(contact, key, value)
        contact.updated_at = datetime.utcnow()
        self._commit()
        self.session.refresh(contact)
        return contact

    def delete_contact(self, user_id: str, contact_id: str) -> None:
        contact = self.get_contact(user_id, contact_id)
        self._adjust_count(contact.list_id, -1)
        self.session.delete(contact)
        self._commit()

    def list_contacts(self, user_id: str, list_id: Optional[str] = None) -> List[Contact]:
        if list_id:
            self.get_list(user_id, list_id)
        query = self.session.query(Contact).filter(Contact.user_id == user_id)
        if list_id:
            query = query.filter(Contact.list_id == list_id)
        return query.order_by(Contact.created_at).all()

    def recount_contacts(self, user_id: str, list_id: str) -> int:
        contact_list = self.get_list(user_id, list_id)
        actual = self.session.query(Contact).filter(Contact.list_id == list_id).count()
        if actual != contact_list.contact_count:
            logger.info(f"List {list_id}: contact_count {contact_list.contact_count} -> {actual}")
            contact_list.contact_count = actual
            self._commit()
        return actual
