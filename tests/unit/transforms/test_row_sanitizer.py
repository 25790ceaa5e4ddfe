"""Unit tests for row sanitization."""

from __future__ import annotations

from transforms.row_sanitizer import format_date_literal, round_cell, sanitize_rows


def test_date_literal_uses_one_based_month() -> None:
    """Zero-based source months should be shifted by one."""
    rows = sanitize_rows([["Date(2023,0,15)", 1]])

    assert rows[0][0] == "2023-01-15"


def test_date_literal_with_time_keeps_hours_and_minutes() -> None:
    """Time components should render as zero-padded HH:MM."""
    rows = sanitize_rows([["Date(2023,11,1,9,30)"]])

    assert rows[0][0] == "2023-12-01 09:30"


def test_date_literal_drops_seconds() -> None:
    """Seconds in the literal should not appear in the output."""
    assert format_date_literal("Date(2024,5,3,14,5,59)") == "2024-06-03 14:05"


def test_only_first_cell_is_date_converted() -> None:
    """Date literals outside the first column should stay untouched."""
    rows = sanitize_rows([["label", "Date(2023,0,15)"]])

    assert rows[0][1] == "Date(2023,0,15)"


def test_non_matching_strings_pass_through() -> None:
    """Strings that only resemble a date literal should not change."""
    assert format_date_literal("Date(soon)") is None


def test_fractional_numbers_round_to_two_places() -> None:
    """Non-integral floats should round to two decimals."""
    assert round_cell(3.14159) == 3.14


def test_integers_are_unchanged() -> None:
    """Integer cells should pass through as-is."""
    assert round_cell(5) == 5


def test_rounding_breaks_ties_away_from_zero() -> None:
    """Exact binary ties should round up like fixed-point formatting."""
    assert round_cell(0.125) == 0.13


def test_booleans_are_not_treated_as_numbers() -> None:
    """Boolean cells should never be rounded."""
    assert round_cell(True) is True


def test_header_row_is_left_untouched() -> None:
    """Header labels should not be converted when flagged."""
    rows = sanitize_rows([["Date(2023,0,15)", "x"], ["Date(2023,0,15)", 1.005]], skip_header=True)

    assert rows[0][0] == "Date(2023,0,15)" and rows[1][0] == "2023-01-15"


def test_sanitize_does_not_mutate_input() -> None:
    """Sanitizing should return new rows."""
    source = [["Date(2023,0,15)", 2.345]]

    sanitize_rows(source)

    assert source == [["Date(2023,0,15)", 2.345]]
