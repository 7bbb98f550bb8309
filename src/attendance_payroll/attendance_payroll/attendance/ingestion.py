"""Turn a decoded worksheet grid into typed raw rows.

Expected layout (first sheet only):

    row 0..4   one of them contains "MES DE <month>"
    ...
    header     Codigo | Nombre | Dni | Cargo | Sueldo Mensual | Sueldo Diario | Dia1 | Dia2 | ...
    data       one employee per row, until the first row with an empty code cell
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Any, Sequence

from ..common.cells import is_blank, to_decimal, to_text
from ..core.constants import (
    COL_CODE,
    COL_DAILY_SALARY,
    COL_FIRST_DAY,
    COL_MONTHLY_SALARY,
    COL_NAME,
    COL_NATIONAL_ID,
    COL_OCCUPATION,
    DAY_HEADER_PREFIX,
    HEADER_FIRST_CELL,
    MONTH_MARKER,
    MONTH_SCAN_ROWS,
    NO_MONTH_LABEL,
)
from ..core.exceptions import FormatError
from .codes import parse_code
from .edits import recount
from .model import ParsedSheet, RawRow

_MARKER_RE = re.compile(r".*" + re.escape(MONTH_MARKER), re.IGNORECASE | re.DOTALL)
_DIGITS_RE = re.compile(r"\d+")

Grid = Sequence[Sequence[Any]]


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def extract_period_label(grid: Grid) -> str:
    for row in list(grid)[:MONTH_SCAN_ROWS]:
        if not row:
            continue
        # Cells are concatenated as-is; a marker may be split across cells.
        text = "".join(c if isinstance(c, str) else to_text(c) for c in row if not is_blank(c))
        if MONTH_MARKER.lower() not in text.lower():
            continue
        label = _DIGITS_RE.sub("", _MARKER_RE.sub("", text, count=1))
        return " ".join(label.split())
    return NO_MONTH_LABEL


def find_header_row(grid: Grid) -> int:
    for index, row in enumerate(grid):
        if row and _cell(row, 0) == HEADER_FIRST_CELL:
            return index
    raise FormatError("Formato de archivo incorrecto: no se encontró la fila 'Codigo'")


def count_day_columns(header: Sequence[Any]) -> int:
    return sum(1 for c in header if isinstance(c, str) and c.startswith(DAY_HEADER_PREFIX))


def _parse_row(row: Sequence[Any], *, position: int, days_in_period: int) -> RawRow:
    days = {
        day: parse_code(_cell(row, COL_FIRST_DAY + day - 1))
        for day in range(1, days_in_period + 1)
    }
    return RawRow(
        position=position,
        employee_code=to_text(_cell(row, COL_CODE)),
        full_name=to_text(_cell(row, COL_NAME)),
        national_id=to_text(_cell(row, COL_NATIONAL_ID)),
        occupation=to_text(_cell(row, COL_OCCUPATION)),
        monthly_salary=to_decimal(_cell(row, COL_MONTHLY_SALARY)),
        daily_salary=to_decimal(_cell(row, COL_DAILY_SALARY)),
        days=days,
        counts=recount(days),
    )


def parse_attendance_grid(grid: Grid) -> ParsedSheet:
    """Parse a full worksheet grid.

    Raises FormatError when no header row exists. A sheet with a header but
    no data rows yields an empty row list.
    """
    period_label = extract_period_label(grid)
    header_index = find_header_row(grid)
    days_in_period = count_day_columns(grid[header_index])

    raw_rows: list[RawRow] = []
    for row in list(grid)[header_index + 1:]:
        if not row or is_blank(_cell(row, COL_CODE)):
            break
        raw_rows.append(_parse_row(row, position=len(raw_rows), days_in_period=days_in_period))

    return ParsedSheet(period_label=period_label, raw_rows=raw_rows, days_in_period=days_in_period)


def report_name_for(file_name: str) -> str:
    """Report label for a source file: "planilla_lima-marzo.xlsx" -> "planilla lima marzo"."""
    stem = PurePath(file_name).stem if file_name else ""
    label = " ".join(re.sub(r"[_\-]+", " ", stem).split())
    return label or file_name


def day_header(day: int) -> str:
    return f"{DAY_HEADER_PREFIX}{day}"
