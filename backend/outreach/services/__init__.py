"""
Business logic services.
"""
from .csv_parser import CsvTable, EmptyInputError, parse_csv
from .csv_import_service import (
    CandidateContact,
    ContactListDraft,
    DuplicateFileName,
    DuplicateListName,
    ImportWorkflow,
    auto_detect_mapping,
    import_csv,
    map_rows,
)

__all__ = [
    "CsvTable",
    "EmptyInputError",
    "parse_csv",
    "CandidateContact",
    "ContactListDraft",
    "DuplicateFileName",
    "DuplicateListName",
    "ImportWorkflow",
    "auto_detect_mapping",
    "import_csv",
    "map_rows",
]
