"""
CSV import service: column mapping, row mapping and list materialization.

The pipeline is raw text -> parse_csv -> auto_detect_mapping (+ overrides)
-> map_rows -> import_csv -> repository. Everything up to import_csv is pure;
ImportWorkflow drives the repository writes.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..models.contact import ContactStatus, CONTACT_STATUS_CONFIG
from ..models.contact_list import ListSource
from .csv_parser import CsvImportError, CsvTable, parse_csv

logger = logging.getLogger(__name__)

# Logical contact fields a CSV column can be mapped to, in display order
CONTACT_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "company",
    "status",
    "message",
    "template_title",
)

# A row must carry at least one of these to become a contact
IDENTITY_FIELDS = ("email", "first_name", "last_name", "company")

DEFAULT_CSV_LIST_NAME = "CSV Import"

_CSV_EXTENSION = re.compile(r"\.csv$", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DuplicateListName(CsvImportError):
    """A list with the derived name already exists for this user."""

    def __init__(self, list_name: str):
        self.list_name = list_name
        super().__init__(
            f'A list with the name "{list_name}" already exists. '
            "Please use a different file name or delete the existing list first."
        )


class DuplicateFileName(CsvImportError):
    """A CSV file with the same name has already been imported."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(
            f'A CSV file with the name "{file_name}" has already been imported. '
            "Please use a different file name or delete the existing list first."
        )


class InvalidColumnMapping(CsvImportError):
    """A mapping override names an unknown field or a missing column."""


class InvalidListName(CsvImportError):
    """A manual list name is empty."""


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass
class CandidateContact:
    """A mapped CSV row, not yet persisted."""
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    status: ContactStatus = ContactStatus.NOT_CONTACTED
    message: Optional[str] = None
    template_title: Optional[str] = None

    def has_identity(self) -> bool:
        """True if any of email/first_name/last_name/company is non-blank."""
        return any((getattr(self, name) or "").strip() for name in IDENTITY_FIELDS)


@dataclass
class ContactListDraft:
    """List metadata produced by an import, before the repository stores it."""
    name: str
    source: ListSource
    csv_file_name: Optional[str] = None
    contact_count: int = 0
    description: Optional[str] = None


@dataclass
class ImportPlan:
    contact_list: ContactListDraft
    contacts: List[CandidateContact] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Column mapping
# ---------------------------------------------------------------------------

_DETECTION_RULES = (
    ("email", lambda h: "email" in h),
    ("first_name", lambda h: "first" in h and "name" in h),
    ("last_name", lambda h: "last" in h and "name" in h),
    ("company", lambda h: "company" in h),
    ("status", lambda h: "status" in h),
    ("message", lambda h: "message" in h or "sent" in h),
    ("template_title", lambda h: "template" in h),
)


def empty_mapping() -> Dict[str, Optional[str]]:
    return {name: None for name in CONTACT_FIELDS}


def auto_detect_mapping(headers: Iterable[str]) -> Dict[str, Optional[str]]:
    """
    Guess which CSV column feeds which contact field.

    Each header is lower-cased and tested against the rules in priority
    order; the first rule it satisfies decides its field. A field keeps the
    first header that claims it.
    Returns {field: csv_header or None}.
    """
    mapping = empty_mapping()

    for header in headers:
        lowered = header.lower()
        for field_name, matches in _DETECTION_RULES:
            if matches(lowered):
                if mapping[field_name] is None:
                    mapping[field_name] = header
                break

    return mapping


def apply_mapping_overrides(
    mapping: Mapping[str, Optional[str]],
    overrides: Optional[Mapping[str, Optional[str]]],
    headers: Iterable[str],
) -> Dict[str, Optional[str]]:
    """Return a copy of mapping with caller overrides applied; "" unmaps a field."""
    result = dict(mapping)
    if not overrides:
        return result

    known_headers = set(headers)
    for field_name, header in overrides.items():
        if field_name not in CONTACT_FIELDS:
            raise InvalidColumnMapping(f"Unknown contact field: {field_name}")
        if not header:
            result[field_name] = None
            continue
        if header not in known_headers:
            raise InvalidColumnMapping(f'Column "{header}" is not in the CSV file')
        result[field_name] = header

    return result


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------

def match_status(raw: Optional[str]) -> ContactStatus:
    """Match a CSV status cell by enum value or display label."""
    if not raw:
        return ContactStatus.NOT_CONTACTED

    as_value = _WHITESPACE.sub("_", raw.lower())
    lowered = raw.lower()
    for status, config in CONTACT_STATUS_CONFIG.items():
        if status.value == as_value or config["label"].lower() == lowered:
            return status

    return ContactStatus.NOT_CONTACTED


def map_row(row: Mapping[str, str], mapping: Mapping[str, Optional[str]]) -> CandidateContact:
    """Map one CSV row to a CandidateContact using the column mapping."""
    values: Dict[str, Any] = {}
    for field_name in CONTACT_FIELDS:
        header = mapping.get(field_name)
        if not header:
            continue
        values[field_name] = row.get(header, "") or ""

    values["status"] = match_status(values.get("status"))
    return CandidateContact(**values)


def map_rows(table: CsvTable, mapping: Mapping[str, Optional[str]]) -> List[CandidateContact]:
    """Map every row of the table, keeping row order. Blank rows are kept."""
    return [map_row(row, mapping) for row in table.rows]


# ---------------------------------------------------------------------------
# Materialization
# ---------------------------------------------------------------------------

def strip_csv_extension(name: str) -> str:
    """Drop a trailing .csv (any case), then trim."""
    return _CSV_EXTENSION.sub("", name).strip()


def format_date_suffix(today: date) -> str:
    return today.strftime("%d/%m/%Y")


def build_list_name(base_name: str, today: Optional[date] = None) -> str:
    """<base>_<dd/mm/yyyy> using today's date unless one is given."""
    day = today or datetime.now().date()
    return f"{base_name}_{format_date_suffix(day)}"


def _entry_value(entry: Any, key: str) -> Optional[str]:
    if isinstance(entry, Mapping):
        return entry.get(key)
    return getattr(entry, key, None)


def check_duplicate_list_name(list_name: str, existing_lists: Iterable[Any]) -> None:
    target = list_name.strip().lower()
    for entry in existing_lists:
        name = _entry_value(entry, "name") or ""
        if name.strip().lower() == target:
            raise DuplicateListName(list_name)


def check_duplicate_file_name(file_name: str, existing_lists: Iterable[Any]) -> None:
    target = strip_csv_extension(file_name).lower()
    for entry in existing_lists:
        existing = _entry_value(entry, "csv_file_name")
        if existing and strip_csv_extension(existing).lower() == target:
            raise DuplicateFileName(file_name)


def import_csv(
    contacts: Iterable[CandidateContact],
    file_name_or_list_name: Optional[str],
    existing_lists: Iterable[Any],
    *,
    source: ListSource = ListSource.CSV_IMPORT,
    description: Optional[str] = None,
    today: Optional[date] = None,
) -> ImportPlan:
    """
    Derive the list for an import and the contacts that belong in it.

    existing_lists holds the user's current lists (objects or dicts with
    ``name`` and ``csv_file_name``). Nothing is written; duplicates raise
    before any contact is looked at.

    Raises:
        DuplicateFileName: a CSV import of the same file name already exists
        DuplicateListName: the derived list name is taken (case-insensitive)
    """
    existing = list(existing_lists)
    raw_name = (file_name_or_list_name or "").strip()
    is_csv = source == ListSource.CSV_IMPORT

    if raw_name:
        base_name = strip_csv_extension(file_name_or_list_name)
    else:
        base_name = DEFAULT_CSV_LIST_NAME
    list_name = build_list_name(base_name, today)

    # A re-uploaded file is reported as such even when its list name collides too
    csv_file_name = None
    if is_csv and raw_name:
        check_duplicate_file_name(file_name_or_list_name, existing)
        csv_file_name = file_name_or_list_name

    check_duplicate_list_name(list_name, existing)

    survivors = [contact for contact in contacts if contact.has_identity()]

    if description is None and is_csv:
        description = f"Imported {len(survivors)} contacts"

    contact_list = ContactListDraft(
        name=list_name,
        source=source,
        csv_file_name=csv_file_name,
        contact_count=len(survivors),
        description=description,
    )
    return ImportPlan(contact_list=contact_list, contacts=survivors)


def plan_manual_list(
    name: str,
    existing_lists: Iterable[Any],
    description: Optional[str] = None,
    today: Optional[date] = None,
) -> ContactListDraft:
    """Name and validate a manually created, initially empty list."""
    if not name or not name.strip():
        raise InvalidListName("List name cannot be empty.")
    plan = import_csv(
        [],
        name,
        existing_lists,
        source=ListSource.MANUAL,
        description=description,
        today=today,
    )
    return plan.contact_list


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------

@dataclass
class ImportPreview:
    headers: List[str]
    column_mapping: Dict[str, Optional[str]]
    contacts: List[CandidateContact]

    @property
    def total_rows(self) -> int:
        return len(self.contacts)

    @property
    def importable_count(self) -> int:
        return sum(1 for contact in self.contacts if contact.has_identity())


@dataclass
class ImportResult:
    contact_list: Any
    imported: int = 0
    failed: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


class ImportWorkflow:
    """
    Upload -> map -> review -> submit, as plain sequential calls.

    preview() is pure; submit() reads the user's lists, materializes the
    import and writes the list and its contacts through the repository.
    """

    def __init__(self, repository):
        self.repository = repository

    def preview(
        self,
        text: str,
        overrides: Optional[Mapping[str, Optional[str]]] = None,
    ) -> ImportPreview:
        """Parse CSV text and map its rows. Raises EmptyInputError / InvalidColumnMapping."""
        table = parse_csv(text)
        mapping = apply_mapping_overrides(
            auto_detect_mapping(table.headers), overrides, table.headers
        )
        contacts = map_rows(table, mapping)
        return ImportPreview(headers=table.headers, column_mapping=mapping, contacts=contacts)

    def submit(
        self,
        user_id: str,
        contacts: List[CandidateContact],
        file_name: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ImportResult:
        """Create the list and its contacts; per-contact failures are collected."""
        existing = self.repository.list_lists(user_id)
        plan = import_csv(contacts, file_name, existing, today=today)

        stored_list = self.repository.create_list(user_id, plan.contact_list)
        logger.info(
            f"Importing {len(plan.contacts)} contacts into list '{stored_list.name}' "
            f"for user {user_id}"
        )

        result = ImportResult(
            contact_list=stored_list,
            skipped=len(contacts) - len(plan.contacts),
        )
        for index, candidate in enumerate(plan.contacts):
            try:
                self.repository.create_contact(user_id, stored_list.id, candidate)
                result.imported += 1
            except Exception as e:
                logger.error(f"Error importing contact #{index + 1}: {e}")
                result.failed += 1
                result.errors.append(f"Contact #{index + 1}: {e}")

        result.contact_list = self.repository.get_list(user_id, stored_list.id)
        if result.contact_list.contact_count != plan.contact_list.contact_count:
            logger.warning(
                f"List '{stored_list.name}' holds {result.contact_list.contact_count} contacts, "
                f"expected {plan.contact_list.contact_count}"
            )
        return result

    def create_manual_list(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        today: Optional[date] = None,
    ):
        draft = plan_manual_list(name, self.repository.list_lists(user_id), description, today)
        return self.repository.create_list(user_id, draft)

    def update_list(self, user_id: str, list_id: str, changes: Mapping[str, Any]):
        """
        Rename a list and/or change its description.

        A new name is stored as given (no date suffix) and must not collide
        with another of the user's lists.
        """
        self.repository.get_list(user_id, list_id)
        if "name" in changes:
            name = changes["name"]
            if not name or not name.strip():
                raise InvalidListName("List name cannot be empty.")
            others = [l for l in self.repository.list_lists(user_id) if l.id != list_id]
            check_duplicate_list_name(name, others)
        return self.repository.update_list(user_id, list_id, changes)
