"""
Pydantic schemas for request/response validation.
"""
from .contact_list import (
    ContactListCreate, ContactListResponse, ContactListUpdate,
    ContactResponse, ContactStatusInfo, ContactUpdate,
)
from .csv_import import CandidateContactSchema, CSVPreviewResponse, CSVImportRequest, CSVImportResponse

__all__ = [
    "ContactListCreate", "ContactListResponse", "ContactListUpdate",
    "ContactResponse", "ContactStatusInfo", "ContactUpdate",
    "CandidateContactSchema", "CSVPreviewResponse", "CSVImportRequest", "CSVImportResponse",
]
