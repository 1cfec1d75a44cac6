"""Pydantic schemas for sheet filtering results."""
from typing import List

from pydantic import BaseModel, Field


class MatchedRow(BaseModel):
    """A data row whose text contains the search token.

    rowIndex is 1-based and counts from the first row of the sheet, so it
    points back at the row number shown by spreadsheet software.
    """
    rowIndex: int = Field(..., ge=1)
    values: List[str] = Field(default_factory=list)


class FilterResult(BaseModel):
    """Header and matched rows extracted from one sheet."""
    header_row_index: int = 0
    headers: List[str] = Field(default_factory=list)
    rows: List[MatchedRow] = Field(default_factory=list)


class DatasetSummary(BaseModel):
    """Filter result plus provenance, as embedded in the answer prompt."""
    kind: str
    originalName: str
    sheetName: str
    matchCount: int
    headers: List[str] = Field(default_factory=list)
    rows: List[MatchedRow] = Field(default_factory=list)
