from __future__ import annotations

from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from .export import CellStyle, ExportDocument, SheetData


def _apply_style(cell, style: Optional[CellStyle]) -> None:
    if not style:
        return
    cell.font = Font(bold=style.bold, italic=style.italic, color=style.color, size=style.size)
    if style.fill:
        cell.fill = PatternFill(start_color=style.fill, end_color=style.fill, fill_type="solid")
    if style.align:
        cell.alignment = Alignment(horizontal=style.align)


def _write_sheet(ws, sheet: SheetData) -> None:
    ws.title = sheet.title
    for row_idx, row in enumerate(sheet.rows, start=1):
        for col_idx, item in enumerate(row, start=1):
            if item is None:
                continue
            cell = ws.cell(row=row_idx, column=col_idx)
            # Decimals are written as-is; openpyxl stores them as numbers.
            cell.value = item.value
            if item.number_format:
                cell.number_format = item.number_format
            _apply_style(cell, item.style)

    for col_idx, width in enumerate(sheet.column_widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def write_xlsx(document: ExportDocument) -> BytesIO:
    """Render an ExportDocument to an in-memory .xlsx stream."""
    wb = Workbook()
    first = True
    for sheet in document.sheets:
        ws = wb.active if first else wb.create_sheet()
        first = False
        _write_sheet(ws, sheet)

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output
