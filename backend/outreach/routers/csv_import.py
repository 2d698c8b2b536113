"""
CSV Import router for uploading contact exports and importing them as a list.
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, status

from ..config import get_settings
from ..dependencies import get_current_user_id, get_import_workflow
from ..schemas.csv_import import (
    CandidateContactSchema,
    CSVPreviewResponse,
    CSVImportRequest,
    CSVImportResponse,
)
from ..schemas.contact_list import ContactListResponse
from ..services.csv_parser import EmptyInputError, decode_csv_bytes
from ..services.csv_import_service import (
    CandidateContact,
    DuplicateFileName,
    DuplicateListName,
    ImportWorkflow,
    InvalidColumnMapping,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/import", tags=["csv-import"])

ALLOWED_EXTENSIONS = (".csv",)


def _parse_mapping_field(raw: Optional[str]) -> Optional[dict]:
    if not raw:
        return None
    try:
        overrides = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="column_mapping must be a JSON object")
    if not isinstance(overrides, dict):
        raise HTTPException(status_code=400, detail="column_mapping must be a JSON object")
    return overrides


@router.post("/preview", response_model=CSVPreviewResponse)
async def preview_csv_import(
    file: UploadFile = File(...),
    column_mapping: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id),
    workflow: ImportWorkflow = Depends(get_import_workflow),
):
    """
    Upload a CSV file and preview the import.
    Returns the detected column mapping and the mapped contacts for review.
    """
    if not file.filename or not file.filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(status_code=400, detail="File must be a CSV file (.csv)")

    overrides = _parse_mapping_field(column_mapping)
    limit = get_settings().max_upload_bytes
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise HTTPException(status_code=413, detail="CSV file is too large")

    try:
        preview = workflow.preview(decode_csv_bytes(content), overrides)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidColumnMapping as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        f"User {user_id} previewed {file.filename}: {preview.total_rows} rows, "
        f"{preview.importable_count} importable"
    )
    return CSVPreviewResponse(
        file_name=file.filename,
        headers=preview.headers,
        column_mapping=preview.column_mapping,
        total_rows=preview.total_rows,
        importable_count=preview.importable_count,
        contacts=[CandidateContactSchema.model_validate(c) for c in preview.contacts],
    )


@router.post("/execute", response_model=CSVImportResponse, status_code=status.HTTP_201_CREATED)
def execute_csv_import(
    request: CSVImportRequest,
    user_id: str = Depends(get_current_user_id),
    workflow: ImportWorkflow = Depends(get_import_workflow),
):
    """
    Execute the import: create the dated list and its contacts.
    Expects the (possibly edited) contacts from the preview step.
    """
    contacts = [CandidateContact(**c.model_dump()) for c in request.contacts]
    if not any(c.has_identity() for c in contacts):
        raise HTTPException(
            status_code=400,
            detail="Please add at least one contact with some information",
        )

    try:
        result = workflow.submit(user_id, contacts, request.file_name)
    except (DuplicateListName, DuplicateFileName) as e:
        raise HTTPException(status_code=409, detail=str(e))

    return CSVImportResponse(
        contact_list=ContactListResponse.model_validate(result.contact_list),
        imported=result.imported,
        failed=result.failed,
        skipped=result.skipped,
        errors=result.errors,
    )
