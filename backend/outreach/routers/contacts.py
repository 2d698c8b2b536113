"""
Contacts router: list, edit, move and delete individual contacts.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_contact_repository, get_current_user_id
from ..models.contact import ContactStatus
from ..repositories import ContactNotFound, ContactRepository, InvalidUpdate, ListNotFound
from ..schemas.contact_list import ContactResponse, ContactUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/contacts", tags=["contacts"])


@router.get("/", response_model=List[ContactResponse])
def list_contacts(
    list_id: Optional[str] = Query(None),
    status: Optional[ContactStatus] = Query(None),
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    """List the caller's contacts, optionally filtered by list and status."""
    try:
        contacts = repository.list_contacts(user_id, list_id)
    except ListNotFound:
        raise HTTPException(status_code=404, detail="Contact list not found")
    if status:
        contacts = [c for c in contacts if c.status == status.value]
    return contacts


@router.put("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: str,
    payload: ContactUpdate,
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    """
    Update a contact.
    Changing list_id moves the contact and adjusts both lists' contact counts.
    """
    try:
        return repository.update_contact(
            user_id, contact_id, payload.model_dump(exclude_unset=True)
        )
    except ContactNotFound:
        raise HTTPException(status_code=404, detail="Contact not found")
    except ListNotFound:
        raise HTTPException(status_code=404, detail="Contact list not found")
    except InvalidUpdate as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: str,
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    try:
        repository.delete_contact(user_id, contact_id)
    except ContactNotFound:
        raise HTTPException(status_code=404, detail="Contact not found")
    logger.info(f"User {user_id} deleted contact {contact_id}")
    return {"message": "Contact deleted"}
