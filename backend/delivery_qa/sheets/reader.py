"""Spreadsheet loading.

Workbooks are opened with pandas (openpyxl for xlsx, xlrd for legacy
xls). CSV files are read as a single sheet, padded to the widest row so
title lines above the header do not fix the column count. Every cell is
handed to the filter as text.
"""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from delivery_qa.errors import ServiceError

logger = logging.getLogger(__name__)

CSV_SUFFIXES = {".csv", ".txt"}
CSV_SHEET_NAME = "Sheet1"


class SheetNotFoundError(ServiceError):
    """Raised when a workbook has no sheet to read."""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No sheet found in workbook: {Path(path).name}", status_code=500)


def pick_sheet_name(sheet_names: Sequence[str], preferred: Optional[str] = None) -> Optional[str]:
    """Choose the sheet to read.

    Returns the preferred name when the workbook has it, otherwise the first
    sheet, or None for a workbook without sheets.
    """
    if not sheet_names:
        return None
    if preferred and preferred in sheet_names:
        return preferred
    return sheet_names[0]


def cell_text(value: object) -> str:
    """Render a cell as text. Blank cells become "" and whole floats lose ".0"."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def frame_to_rows(df: pd.DataFrame) -> List[List[str]]:
    """Convert a header-less DataFrame to row-major lists of strings."""
    return [[cell_text(v) for v in row] for row in df.itertuples(index=False, name=None)]


def _csv_width(path: Path) -> int:
    with path.open(newline="", encoding="utf-8", errors="replace") as fh:
        return max((len(row) for row in csv.reader(fh)), default=0)


def _read_csv_rows(path: Path) -> List[List[str]]:
    # pandas takes the column count from the first line unless names are given.
    width = _csv_width(path)
    if width == 0:
        return []
    df = pd.read_csv(
        path,
        header=None,
        names=range(width),
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=False,
    )
    return frame_to_rows(df)


def read_sheet_rows(path: str, preferred_sheet: Optional[str] = None) -> Tuple[str, List[List[str]]]:
    """Open a spreadsheet and return the chosen sheet's name and rows.

    Args:
        path: File on disk.
        preferred_sheet: Sheet to read when present; the first sheet otherwise.

    Returns:
        Tuple of (sheet name, rows).

    Raises:
        SheetNotFoundError: If the workbook contains no sheets.
        Exception: Whatever pandas raises for unreadable files.
    """
    file_path = Path(path)
    if file_path.suffix.lower() in CSV_SUFFIXES:
        return CSV_SHEET_NAME, _read_csv_rows(file_path)

    with pd.ExcelFile(file_path) as xls:
        sheet_name = pick_sheet_name(xls.sheet_names, preferred_sheet)
        if sheet_name is None:
            raise SheetNotFoundError(str(file_path))
        df = xls.parse(sheet_name, header=None, dtype=object, keep_default_na=False)

    rows = frame_to_rows(df)
    logger.debug("Read %d rows from %s [%s]", len(rows), file_path.name, sheet_name)
    return sheet_name, rows
