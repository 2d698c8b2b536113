"""
Contact lists router: list, create, inspect, rename and delete contact lists.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_contact_repository, get_current_user_id, get_import_workflow
from ..models.contact import CONTACT_STATUS_CONFIG
from ..repositories import ContactRepository, InvalidUpdate, ListNotFound
from ..schemas.contact_list import (
    ContactListCreate,
    ContactListResponse,
    ContactListUpdate,
    ContactResponse,
    ContactStatusInfo,
)
from ..services.csv_import_service import DuplicateListName, ImportWorkflow, InvalidListName

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/contact-lists", tags=["contact-lists"])


@router.get("/", response_model=List[ContactListResponse])
def list_contact_lists(
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    """List the caller's contact lists, most recently updated first."""
    return repository.list_lists(user_id)


# NOTE: must come before /{list_id}
@router.get("/statuses", response_model=List[ContactStatusInfo])
def get_available_statuses():
    """Contact statuses with their display labels."""
    statuses = [
        ContactStatusInfo(value=s.value, label=config["label"], order=config["order"])
        for s, config in CONTACT_STATUS_CONFIG.items()
    ]
    return sorted(statuses, key=lambda x: x.order)


@router.post("/", response_model=ContactListResponse, status_code=status.HTTP_201_CREATED)
def create_contact_list(
    payload: ContactListCreate,
    user_id: str = Depends(get_current_user_id),
    workflow: ImportWorkflow = Depends(get_import_workflow),
):
    """Create an empty manual list named <name>_<dd/mm/yyyy>."""
    try:
        return workflow.create_manual_list(user_id, payload.name, payload.description)
    except InvalidListName as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateListName as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{list_id}", response_model=ContactListResponse)
def get_contact_list(
    list_id: str,
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    try:
        return repository.get_list(user_id, list_id)
    except ListNotFound:
        raise HTTPException(status_code=404, detail="Contact list not found")


@router.put("/{list_id}", response_model=ContactListResponse)
def update_contact_list(
    list_id: str,
    payload: ContactListUpdate,
    user_id: str = Depends(get_current_user_id),
    workflow: ImportWorkflow = Depends(get_import_workflow),
):
    """Rename a list or change its description."""
    try:
        return workflow.update_list(user_id, list_id, payload.model_dump(exclude_unset=True))
    except ListNotFound:
        raise HTTPException(status_code=404, detail="Contact list not found")
    except (InvalidListName, InvalidUpdate) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateListName as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{list_id}")
def delete_contact_list(
    list_id: str,
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    """Delete a list and all its contacts."""
    try:
        removed = repository.delete_list(user_id, list_id)
    except ListNotFound:
        raise HTTPException(status_code=404, detail="Contact list not found")
    logger.info(f"User {user_id} deleted list {list_id} ({removed} contacts)")
    return {"message": "Contact list deleted", "contacts_deleted": removed}


@router.get("/{list_id}/contacts", response_model=List[ContactResponse])
def list_contacts_in_list(
    list_id: str,
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    try:
        return repository.list_contacts(user_id, list_id)
    except ListNotFound:
        raise HTTPException(status_code=404, detail="Contact list not found")


@router.post("/{list_id}/recount")
def recount_contact_list(
    list_id: str,
    user_id: str = Depends(get_current_user_id),
    repository: ContactRepository = Depends(get_contact_repository),
):
    """Repair contact_count from the stored contacts."""
    try:
        count = repository.recount_contacts(user_id, list_id)
    except ListNotFound:
        raise HTTPException(status_code=404, detail="Contact list not found")
    return {"list_id": list_id, "contact_count": count}
