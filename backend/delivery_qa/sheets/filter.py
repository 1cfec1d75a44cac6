"""Row filtering for delivery spreadsheets.

Pure functions over row-major string data: no file access happens here.

Delivery exports usually carry a few title or note lines above the real
header, so the header row is located heuristically by looking for column
names such as "AdSet Name", "Impressions" or "Campaign" near the top of
the sheet.
"""
from typing import List, Sequence

from .schemas import FilterResult, MatchedRow

HEADER_MARKERS = ("adset", "impress", "campaign")
HEADER_SCAN_ROWS = 15
MAX_COLUMNS = 80
DEFAULT_MAX_ROWS = 80

Rows = Sequence[Sequence[str]]


def _row_text(row: Sequence[str]) -> str:
    return " ".join(str(cell).lower() for cell in row)


def detect_header_row(rows: Rows) -> int:
    """Return the index of the header row, or 0 if no marker is found.

    Only the first HEADER_SCAN_ROWS rows are considered.
    """
    for i, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        text = _row_text(row or [])
        if any(marker in text for marker in HEADER_MARKERS):
            return i
    return 0


def row_matches(row: Sequence[str], needle: str) -> bool:
    """Check a row against an already normalised (lower-cased, stripped) needle."""
    if not needle:
        return False
    return needle in _row_text(row[:MAX_COLUMNS])


def filter_rows(rows: Rows, token: str, max_rows: int = DEFAULT_MAX_ROWS) -> FilterResult:
    """Select the rows below the header that contain ``token``.

    Matching is a case-insensitive substring test on the row's cells joined
    by single spaces, limited to the first MAX_COLUMNS columns. A blank
    token matches nothing.

    Args:
        rows: Sheet content, one list of cell strings per row.
        token: The search token (an AdSet name or fragment).
        max_rows: Stop after this many matches.

    Returns:
        FilterResult: Header index, header names and matches in sheet order.
    """
    if not rows:
        return FilterResult()

    header_index = detect_header_row(rows)
    headers = [str(cell).strip() for cell in (rows[header_index] or [])][:MAX_COLUMNS]
    needle = (token or "").lower().strip()

    matches: List[MatchedRow] = []
    if needle:
        for i in range(header_index + 1, len(rows)):
            row = list(rows[i] or [])[:MAX_COLUMNS]
            if row_matches(row, needle):
                matches.append(MatchedRow(rowIndex=i + 1, values=[str(cell) for cell in row]))
                if len(matches) >= max_rows:
                    break

    return FilterResult(header_row_index=header_index, headers=headers, rows=matches)
