"""Unit tests for CSV encoding."""

from __future__ import annotations

from transforms.csv_encoding import encode_csv, render_cell


def test_encode_csv_joins_cells_and_rows() -> None:
    """Cells join with commas and rows with newlines, without a trailing newline."""
    text = encode_csv([["a", 1], ["b", 2.5]])

    assert text == "a,1\nb,2.5"


def test_encode_csv_does_not_quote_delimiters() -> None:
    """Embedded commas are written verbatim."""
    assert encode_csv([["x,y", "z"]]) == "x,y,z"


def test_render_cell_handles_none_and_booleans() -> None:
    """None renders empty and booleans render lowercase."""
    assert [render_cell(None), render_cell(True), render_cell(False)] == ["", "true", "false"]


def test_render_cell_drops_fraction_of_integral_floats() -> None:
    """Integral floats render like integers."""
    assert render_cell(3.0) == "3"
