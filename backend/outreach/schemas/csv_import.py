"""
CSV Import schemas for API validation.
"""
from typing import Optional, List, Dict
from pydantic import BaseModel

from ..models.contact import ContactStatus
from .contact_list import ContactListResponse


class CandidateContactSchema(BaseModel):
    """A mapped (and possibly hand-edited) CSV row."""
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    status: ContactStatus = ContactStatus.NOT_CONTACTED
    message: Optional[str] = None
    template_title: Optional[str] = None

    class Config:
        from_attributes = True


class CSVPreviewResponse(BaseModel):
    """Response for CSV preview endpoint."""
    file_name: Optional[str] = None
    headers: List[str]
    column_mapping: Dict[str, Optional[str]]
    total_rows: int
    importable_count: int
    contacts: List[CandidateContactSchema]


class CSVImportRequest(BaseModel):
    """Request to execute CSV import."""
    file_name: Optional[str] = None
    contacts: List[CandidateContactSchema]


class CSVImportResponse(BaseModel):
    """Response for CSV import execution."""
    contact_list: ContactListResponse
    imported: int
    failed: int
    skipped: int
    errors: List[str] = []
