"""
loader.py - Input Workbook Loader
==================================
This module reads the input workbook and turns a rectangular region of its
first worksheet into a flat, row-major list of strings.

Every cell is first classified into a CellValue (EMPTY, NUMBER, TEXT,
BOOLEAN or OTHER) so the rest of the application never deals with the
workbook's native types, only with the stringified form:

    EMPTY    -> ""
    NUMBER   -> "100" for 100.0, "1.5" for 1.5
    TEXT     -> the text itself
    BOOLEAN  -> "True" / "False"
    OTHER    -> "unknown"   (dates, times, anything else)

The processor groups the flat list into (action, client code, lot code)
triples, so a sheet laid out with those three columns yields one record
per row.
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Number
from pathlib import Path
from typing import Any, List

import pandas as pd
from openpyxl.utils.cell import range_boundaries

from .errors import InputReadError


class CellKind(Enum):
    EMPTY = "empty"
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    OTHER = "other"


@dataclass(frozen=True)
class CellValue:
    """One classified worksheet cell."""

    kind: CellKind
    value: Any = None

    @classmethod
    def classify(cls, raw: Any) -> "CellValue":
        if raw is None:
            return cls(CellKind.EMPTY)
        # bool before Number: True is an int too
        if isinstance(raw, bool):
            return cls(CellKind.BOOLEAN, raw)
        if isinstance(raw, str):
            return cls(CellKind.TEXT, raw)
        if isinstance(raw, Number):
            # pandas marks empty cells with NaN
            if pd.isna(raw):
                return cls(CellKind.EMPTY)
            return cls(CellKind.NUMBER, raw)
        if pd.isna(raw) is True:
            return cls(CellKind.EMPTY)
        return cls(CellKind.OTHER, raw)

    def as_text(self) -> str:
        if self.kind is CellKind.EMPTY:
            return ""
        if self.kind is CellKind.NUMBER:
            return _format_number(self.value)
        if self.kind is CellKind.TEXT:
            return self.value
        if self.kind is CellKind.BOOLEAN:
            return "True" if self.value else "False"
        return "unknown"


def _format_number(value: Number) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


# =============================================================================
# WORKBOOK READING
# =============================================================================

def read_cells(filepath: str, cell_range: str = "A1:J1000") -> List[CellValue]:
    """
    Read `cell_range` of the first worksheet and classify every cell.

    Only the part of the range that actually holds data is returned:
    pandas stops at the last used row and column, so a generous range such
    as A1:J1000 does not produce thousands of empty cells.

    Args:
        filepath: Path to the .xlsx workbook
        cell_range: Excel-style region, e.g. "A1:J1000"

    Returns:
        CellValues in row-major order (A1, B1, C1, ..., A2, B2, ...)

    Raises:
        InputReadError: If the file is missing, unreadable, or the range is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise InputReadError(f"Input file not found: {filepath}")

    try:
        min_col, min_row, max_col, max_row = range_boundaries(cell_range)
    except (TypeError, ValueError) as e:
        raise InputReadError(f"Invalid cell range {cell_range!r}: {e}") from e

    try:
        # header=None: the first row is data, not column names
        # dtype=object: keep text such as "00123" exactly as typed
        df = pd.read_excel(
            path,
            sheet_name=0,
            header=None,
            dtype=object,
            engine="openpyxl",
        )
    except Exception as e:
        raise InputReadError(f"Could not read workbook {filepath}: {e}") from e

    # Whole-column ("A:C") and whole-row ("1:5") ranges leave bounds as None
    region = df.iloc[(min_row or 1) - 1:max_row, (min_col or 1) - 1:max_col]

    return [
        CellValue.classify(raw)
        for row in region.itertuples(index=False, name=None)
        for raw in row
    ]


def load_cell_values(filepath: str, cell_range: str = "A1:J1000") -> List[str]:
    """Flat row-major list of stringified cell values; see read_cells()."""
    return [cell.as_text() for cell in read_cells(filepath, cell_range)]
