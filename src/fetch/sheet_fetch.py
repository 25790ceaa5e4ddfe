"""Google Sheets table fetching.

This module resolves a sheet gid to its display name through the
Sheets API and downloads the table rows from the gviz query endpoint.
"""

from __future__ import annotations

import json
import re
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
import httplib2
import httpx

from core.constants import (
    FORBIDDEN_SHEET_NAME_CHARS,
    GVIZ_QUERY_URL_TEMPLATE,
    MAX_SHEET_NAME_LENGTH,
    SHEETS_API_FIELDS,
    SHEETS_API_SERVICE_NAME,
    SHEETS_API_VERSION,
)
from core.logging_config import get_logger
from core.types import FetchedTable, FetchFailure, Row, TableFetchResult

_LOGGER = get_logger(__name__)
_JSONP_PATTERN = re.compile(r"setResponse\((.*)\)\s*;?\s*$", re.DOTALL)


class SheetFetcher:
    """Fetch sheet names and table rows for one API key.

    The Sheets API service is built lazily unless one is injected.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.Client,
        sheets_service: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._http_client = http_client
        self._sheets_service = sheets_service

    def lookup_sheet_name(self, sheet_id: str, gid: str) -> str | FetchFailure:
        """Resolve a gid to a validated sheet display name.

        Args:
            sheet_id: Spreadsheet id.
            gid: Sheet gid within the spreadsheet.

        Returns:
            Sheet name, or a failure describing why it is unusable.
        """
        try:
            response = (
                self._service()
                .spreadsheets()
                .get(spreadsheetId=sheet_id, fields=SHEETS_API_FIELDS)
                .execute()
            )
        except (HttpError, httplib2.HttpLib2Error, OSError) as error:
            return FetchFailure("transport_error", f"sheet lookup failed: {error}")
        title = _find_sheet_title(response, gid)
        if title is None:
            return FetchFailure(
                "sheet_not_found", f"sheet with gid {gid} not found in spreadsheet {sheet_id}"
            )
        if not is_valid_sheet_name(title):
            return FetchFailure(
                "invalid_sheet_name", f"sheet name {title!r} for gid {gid} is invalid"
            )
        return title

    def fetch_table(
        self,
        sheet_id: str,
        gid: str,
        query: str | None = None,
        headers: int = 1,
    ) -> TableFetchResult:
        """Fetch one sheet table with its display name.

        Args:
            sheet_id: Spreadsheet id.
            gid: Sheet gid within the spreadsheet.
            query: Optional gviz query string.
            headers: 1 to prepend a header row built from column labels.

        Returns:
            Fetched table, or an empty result with a failure reason.
        """
        lookup = self.lookup_sheet_name(sheet_id, gid)
        if isinstance(lookup, FetchFailure):
            return _failed(sheet_id, gid, lookup)
        try:
            response = self._http_client.get(
                GVIZ_QUERY_URL_TEMPLATE.format(sheet_id=sheet_id),
                params=_build_query_params(gid, self._api_key, query),
            )
            response.raise_for_status()
        except httpx.HTTPError as error:
            return _failed(sheet_id, gid, FetchFailure("transport_error", str(error)))
        try:
            payload = parse_gviz_response(response.text)
        except ValueError as error:
            return _failed(sheet_id, gid, FetchFailure("parse_error", str(error)))
        table = payload.get("table") if isinstance(payload, dict) else None
        if not isinstance(table, dict) or not isinstance(table.get("rows"), list):
            return _failed(
                sheet_id,
                gid,
                FetchFailure("malformed_payload", "'table' or 'rows' missing in response"),
            )
        try:
            rows = extract_rows(table)
        except (KeyError, TypeError) as error:
            return _failed(sheet_id, gid, FetchFailure("malformed_payload", str(error)))
        has_header = headers == 1 and isinstance(table.get("cols"), list)
        if has_header:
            rows.insert(0, [_column_label(column) for column in table["cols"]])
        _LOGGER.debug(
            "sheet_table_fetched",
            sheet_id=sheet_id,
            gid=gid,
            sheet_name=lookup,
            row_count=len(rows),
        )
        return TableFetchResult(
            table=FetchedTable(sheet_name=lookup, rows=rows, has_header=has_header)
        )

    def _service(self) -> Any:
        if self._sheets_service is None:
            self._sheets_service = build(
                SHEETS_API_SERVICE_NAME,
                SHEETS_API_VERSION,
                developerKey=self._api_key,
                cache_discovery=False,
            )
        return self._sheets_service


def is_valid_sheet_name(sheet_name: Any) -> bool:
    """Return whether a sheet title is usable as a dataset name."""
    if not isinstance(sheet_name, str) or not sheet_name.strip():
        return False
    if len(sheet_name) > MAX_SHEET_NAME_LENGTH:
        return False
    return not any(char in FORBIDDEN_SHEET_NAME_CHARS for char in sheet_name)


def parse_gviz_response(text: str) -> Any:
    """Strip the JSONP wrapper from a gviz response and decode it.

    Args:
        text: Raw response body.

    Returns:
        Decoded JSON payload.

    Raises:
        ValueError: If the wrapper or JSON body is invalid.
    """
    match = _JSONP_PATTERN.search(text)
    if match is None:
        raise ValueError("response is not wrapped in google.visualization.Query.setResponse")
    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as error:
        raise ValueError(f"invalid gviz JSON body: {error.msg}") from error


def extract_rows(table: dict[str, Any]) -> list[Row]:
    """Extract cell values from a gviz table payload.

    Null cells become empty strings; present cells contribute ``v``.

    Raises:
        KeyError: If a row lacks its ``c`` cell list.
        TypeError: If a row or cell is not a JSON object.
    """
    rows: list[Row] = []
    for row in table["rows"]:
        rows.append([_cell_value(cell) for cell in row["c"]])
    return rows


def _cell_value(cell: Any) -> Any:
    if cell is None:
        return ""
    if not isinstance(cell, dict):
        raise TypeError(f"expected a cell object, got {type(cell).__name__}")
    return cell.get("v")


def _build_query_params(gid: str, api_key: str, query: str | None) -> dict[str, str]:
    params = {"gid": gid, "key": api_key}
    if query:
        params["tq"] = query
    return params


def _find_sheet_title(response: Any, gid: str) -> str | None:
    try:
        target_id = int(gid)
    except ValueError:
        return None
    sheets = response.get("sheets") if isinstance(response, dict) else None
    for sheet in sheets if isinstance(sheets, list) else []:
        properties = sheet.get("properties") if isinstance(sheet, dict) else None
        if isinstance(properties, dict) and properties.get("sheetId") == target_id:
            return properties.get("title")
    return None


def _column_label(column: Any) -> str:
    label = column.get("label") if isinstance(column, dict) else None
    return "" if label is None else str(label)


def _failed(sheet_id: str, gid: str, failure: FetchFailure) -> TableFetchResult:
    _LOGGER.error(
        "sheet_fetch_failed",
        sheet_id=sheet_id,
        gid=gid,
        reason=failure.reason,
        detail=failure.detail,
    )
    return TableFetchResult(failure=failure)
