"""
Tolerant CSV parser for user-supplied contact exports.

Handles quoted fields with embedded delimiters, escaped quotes ("") and
embedded newlines, and auto-detects comma vs tab delimiters. Malformed
quoting never raises; the parser degrades to its best reading of the text.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

logger = logging.getLogger(__name__)

QUOTE = '"'
COMMA = ","
TAB = "\t"


class CsvImportError(Exception):
    """Base class for errors raised by the CSV import pipeline."""


class EmptyInputError(CsvImportError):
    """The CSV text contains no data rows."""

    def __init__(self, message: str = "CSV file is empty or contains no data rows"):
        super().__init__(message)


@dataclass
class CsvTable:
    """Header row plus data rows keyed by header name."""
    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def decode_csv_bytes(content: bytes) -> str:
    """Decode uploaded bytes, dropping a UTF-8 byte-order mark if present."""
    for encoding in ("utf-8-sig", "cp1252"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 maps every byte, so this cannot fail
    return content.decode("latin-1")


# ---------------------------------------------------------------------------
# Tokenizing
# ---------------------------------------------------------------------------

def split_rows(text: str) -> List[str]:
    """
    Split CSV text into raw row strings.

    Newlines inside quoted fields stay part of the row. Quote characters are
    kept verbatim so that parse_line can still see field boundaries; an
    escaped quote ("") inside a quoted field is consumed as one unit and does
    not toggle the quote state. Blank rows are dropped.
    """
    rows: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(text)

    while i < length:
        char = text[i]
        if char == QUOTE:
            if in_quotes and i + 1 < length and text[i + 1] == QUOTE:
                current.append(QUOTE + QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            current.append(char)
        elif char == "\n" and not in_quotes:
            row = "".join(current)
            if row.strip():
                rows.append(row)
            current = []
        else:
            current.append(char)
        i += 1

    row = "".join(current)
    if row.strip():
        rows.append(row)

    if in_quotes:
        logger.debug("CSV text ends inside a quoted field; keeping trailing content as-is")

    return rows


def detect_delimiter(header_row: str) -> str:
    """Comma if the header has one, else tab if it has one, else comma."""
    if COMMA in header_row:
        return COMMA
    if TAB in header_row:
        return TAB
    return COMMA


def parse_line(line: str, delimiter: str = COMMA) -> List[str]:
    """
    Split one raw row into trimmed field values.

    Enclosing quotes are consumed by the state machine rather than kept and
    stripped afterwards, so a literal quote produced by "" survives even at
    the edge of a field.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_csv(text: str) -> CsvTable:
    """
    Parse CSV text into a CsvTable.

    The first non-blank row is the header. Values pair with headers by
    position: short rows are padded with "", extra values are dropped, and a
    repeated header name keeps the value of its last occurrence.

    Raises:
        EmptyInputError: if there is no data row after the header
    """
    raw_rows = split_rows(text)
    if len(raw_rows) < 2:
        raise EmptyInputError()

    delimiter = detect_delimiter(raw_rows[0])
    headers = parse_line(raw_rows[0], delimiter)

    rows: List[Dict[str, str]] = []
    for raw in raw_rows[1:]:
        values = parse_line(raw, delimiter)
        row: Dict[str, str] = {}
        for index, header in enumerate(headers):
            row[header] = values[index] if index < len(values) else ""
        rows.append(row)

    logger.info(
        f"Parsed CSV: {len(headers)} columns, {len(rows)} rows "
        f"(delimiter={'tab' if delimiter == TAB else 'comma'})"
    )
    return CsvTable(headers=headers, rows=rows)
