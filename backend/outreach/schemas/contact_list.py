"""
Contact list and contact schemas for API validation.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from ..models.contact import ContactStatus
from ..models.contact_list import ListSource


class ContactListCreate(BaseModel):
    """Schema for creating a manual list; the date suffix is added server-side."""
    name: str
    description: Optional[str] = None


class ContactListResponse(BaseModel):
    """Schema for ContactList API response."""
    id: str
    name: str
    description: Optional[str] = None
    source: ListSource
    csv_file_name: Optional[str] = None
    contact_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ContactResponse(BaseModel):
    """Schema for Contact API response."""
    id: str
    list_id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    status: ContactStatus
    message: Optional[str] = None
    template_title: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ContactStatusInfo(BaseModel):
    value: str
    label: str
    order: int


class ContactListUpdate(BaseModel):
    """Schema for renaming a list; omitted fields are left unchanged."""
    name: Optional[str] = None
    description: Optional[str] = None


class ContactUpdate(BaseModel):
    """Schema for editing a contact; set list_id to move it to another list."""
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    status: Optional[ContactStatus] = None
    message: Optional[str] = None
    template_title: Optional[str] = None
    list_id: Optional[str] = None
