"""CSV text encoding for sanitized rows.

Cells are joined with commas and rows with newlines. No quoting or
escaping is applied, so embedded delimiters are written verbatim.
"""

from __future__ import annotations

from typing import Iterable

from core.constants import CSV_CELL_DELIMITER, CSV_ROW_DELIMITER
from core.types import Cell, Row


def encode_csv(rows: Iterable[Row]) -> str:
    """Encode a row matrix into CSV text.

    Args:
        rows: Sanitized row matrix.

    Returns:
        CSV text without a trailing newline.
    """
    return CSV_ROW_DELIMITER.join(
        CSV_CELL_DELIMITER.join(render_cell(cell) for cell in row) for row in rows
    )


def render_cell(cell: Cell) -> str:
    """Render one cell as CSV text.

    Args:
        cell: Cell value.

    Returns:
        Text form; None is empty, booleans are lowercase, and integral
        floats drop their fractional part.
    """
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)
