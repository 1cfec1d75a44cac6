"""Spreadsheet reading and AdSet row filtering.

Usage:
    from delivery_qa.sheets import read_sheet_rows, filter_rows

    sheet_name, rows = read_sheet_rows("/tmp/uploads/abc123.xlsx")
    result = filter_rows(rows, "BR_Prospecting_01", max_rows=80)
"""
from .filter import (
    HEADER_MARKERS,
    HEADER_SCAN_ROWS,
    MAX_COLUMNS,
    detect_header_row,
    filter_rows,
    row_matches,
)
from .reader import SheetNotFoundError, cell_text, pick_sheet_name, read_sheet_rows
from .schemas import DatasetSummary, FilterResult, MatchedRow

__all__ = [
    "HEADER_MARKERS",
    "HEADER_SCAN_ROWS",
    "MAX_COLUMNS",
    "detect_header_row",
    "filter_rows",
    "row_matches",
    "SheetNotFoundError",
    "cell_text",
    "pick_sheet_name",
    "read_sheet_rows",
    "DatasetSummary",
    "FilterResult",
    "MatchedRow",
]
