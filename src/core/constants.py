"""Core constants used across SheetSync modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".")
METADATA_FILE_NAME = "datasets_metadata.json"
CSV_FILE_SUFFIX = ".csv"
DEFAULT_MANIFEST_URL = (
    "https://raw.githubusercontent.com/CITIES-Dashboard/cities-dashboard.github.io/"
    "main/frontend/src/temp_database.json"
)
DEFAULT_RAW_BASE_URL = "https://raw.githubusercontent.com/CITIES-Dashboard/datasets"
DEFAULT_LATEST_REF = "main"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
GVIZ_QUERY_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq"
SHEETS_API_SERVICE_NAME = "sheets"
SHEETS_API_VERSION = "v4"
SHEETS_API_FIELDS = "sheets(properties(sheetId,title))"
MAX_SHEET_NAME_LENGTH = 100
FORBIDDEN_SHEET_NAME_CHARS = frozenset("*?:/\\[]'")
DEFAULT_HEADERS_FLAG = 1
HASH_ALGORITHM = "sha256"
ROUNDING_DECIMAL_PLACES = 2
CSV_CELL_DELIMITER = ","
CSV_ROW_DELIMITER = "\n"
METADATA_JSON_INDENT = 2
