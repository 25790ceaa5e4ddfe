"""Row normalization for fetched sheet data.

This module rewrites structured date literals into ISO-like strings
and rounds fractional numbers before rows are encoded to CSV.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
import math
import re
from typing import Iterable

from core.constants import ROUNDING_DECIMAL_PLACES
from core.types import Cell, Row

_DATE_LITERAL_PATTERN = re.compile(
    r"^Date\(\s*(-?\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*"
    r"(?:,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*\d+\s*)*)?\)$"
)
_ROUNDING_QUANTUM = Decimal(1).scaleb(-ROUNDING_DECIMAL_PLACES)


def sanitize_rows(rows: Iterable[Row], skip_header: bool = False) -> list[Row]:
    """Normalize date literals and fractional numbers in a row matrix.

    Date conversion runs before rounding. Input rows are not mutated.

    Args:
        rows: Fetched row matrix.
        skip_header: Leave the first row untouched when it is a header.

    Returns:
        New row matrix with normalized cells.
    """
    sanitized: list[Row] = []
    for index, row in enumerate(rows):
        if skip_header and index == 0:
            sanitized.append(list(row))
            continue
        converted = convert_date_cell(row)
        sanitized.append([round_cell(cell) for cell in converted])
    return sanitized


def convert_date_cell(row: Row) -> Row:
    """Rewrite a ``Date(y,m,d[,hh,mm])`` first cell.

    The month in the literal is zero-based, so the output stores month + 1.

    Args:
        row: One fetched row.

    Returns:
        Copy of the row with the first cell converted when it matches.
    """
    converted = list(row)
    if not converted or not isinstance(converted[0], str):
        return converted
    formatted = format_date_literal(converted[0])
    if formatted is not None:
        converted[0] = formatted
    return converted


def format_date_literal(value: str) -> str | None:
    """Format one date literal, or return None when it does not match."""
    match = _DATE_LITERAL_PATTERN.match(value.strip())
    if match is None:
        return None
    year, month, day, hour, minute = match.groups()
    formatted = f"{year}-{int(month) + 1:02d}-{int(day):02d}"
    if hour is not None and minute is not None:
        formatted += f" {int(hour):02d}:{int(minute):02d}"
    return formatted


def round_cell(cell: Cell) -> Cell:
    """Round non-integral floats to two decimal places.

    Rounding is half away from zero on the exact binary value.
    Integers, integral floats, booleans, and strings pass through.
    """
    if isinstance(cell, bool) or not isinstance(cell, float):
        return cell
    if not math.isfinite(cell) or cell.is_integer():
        return cell
    return float(Decimal(cell).quantize(_ROUNDING_QUANTUM, rounding=ROUND_HALF_UP))
