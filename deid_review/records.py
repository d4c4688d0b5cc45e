"""CSV encoding/decoding for review sessions.

The decoder is a character scanner rather than ``str.split`` so quoted
fields may hold commas, doubled quotes and line breaks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Dict, List, NamedTuple, Optional

__all__ = [
    "Record",
    "DecodedRecords",
    "parse_rows",
    "decode_records",
    "escape_field",
    "encode_records",
]

logger = logging.getLogger(__name__)

Record = Dict[str, str]

_NEEDS_QUOTES = (",", '"', "\n", "\r")


class DecodedRecords(NamedTuple):
    header: List[str]
    rows: List[Record]
    # 1-based line numbers where rejected rows start
    skipped: List[int]


class _Row(NamedTuple):
    line: int
    fields: List[str]


def parse_rows(raw: str) -> List[_Row]:
    """Scan ``raw`` into rows of fields, dropping blank rows."""
    rows: List[_Row] = []
    fields: List[str] = []
    field: List[str] = []
    in_quotes = False
    quoted = False  # current field had a quoted section
    any_quoted = False
    line = 1
    row_line = 1

    def end_field() -> None:
        nonlocal field, quoted, any_quoted
        value = "".join(field)
        fields.append(value if quoted else value.strip())
        any_quoted = any_quoted or quoted
        field = []
        quoted = False

    def end_row() -> None:
        nonlocal fields, any_quoted
        end_field()
        if any_quoted or any(fields):
            rows.append(_Row(row_line, fields))
        fields = []
        any_quoted = False

    i = 0
    n = len(raw)
    while i < n:
        ch = raw[i]

        if in_quotes:
            if ch == '"':
                if i + 1 < n and raw[i + 1] == '"':
                    field.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                if ch == "\n" or (ch == "\r" and raw[i + 1 : i + 2] != "\n"):
                    line += 1
                field.append(ch)
        elif ch == '"':
            if not quoted and not "".join(field).strip():
                # whitespace before the opening quote is not part of the value
                field = []
            quoted = True
            in_quotes = True
        elif ch == ",":
            end_field()
        elif ch in "\r\n":
            if ch == "\r" and raw[i + 1 : i + 2] == "\n":
                i += 1
            end_row()
            line += 1
            row_line = line
        elif quoted and ch.isspace():
            pass
        else:
            field.append(ch)
        i += 1

    if field or fields or quoted:
        end_row()

    return rows


def decode_records(raw: str) -> DecodedRecords:
    """
    Decode CSV text into a lower-cased header and one record per data row.

    Rows with a different number of fields than the header are skipped and
    reported through ``DecodedRecords.skipped``; the rest are still decoded.
    """
    parsed = parse_rows(raw)
    if not parsed:
        return DecodedRecords([], [], [])

    header = [name.strip().lower() for name in parsed[0].fields]
    rows: List[Record] = []
    skipped: List[int] = []

    for row in parsed[1:]:
        if len(row.fields) != len(header):
            logger.warning(
                "Skipping row at line %d: expected %d fields, got %d",
                row.line,
                len(header),
                len(row.fields),
            )
            skipped.append(row.line)
            continue
        rows.append(dict(zip(header, row.fields)))

    return DecodedRecords(header, rows, skipped)


def escape_field(value: Optional[Any], force_quotes: bool = False) -> str:
    if value is None:
        value = ""
    value = str(value)
    if (
        force_quotes
        or any(ch in value for ch in _NEEDS_QUOTES)
        or value != value.strip()
    ):
        return '"' + value.replace('"', '""') + '"'
    return value


def encode_records(
    header: Sequence[str], rows: Iterable[Mapping[str, Optional[Any]]]
) -> str:
    """Encode ``rows`` as CSV text with ``header`` first and ``\\n`` separators."""
    lines = [",".join(escape_field(name) for name in header)]
    for row in rows:
        values = [row.get(name) for name in header]
        # an all-empty row would read back as a blank line
        force = all(v in (None, "") for v in values)
        lines.append(",".join(escape_field(v, force_quotes=force) for v in values))
    return "\n".join(lines)
