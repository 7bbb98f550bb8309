from io import BytesIO

import pytest
from openpyxl import Workbook

from src.attendance_payroll.attendance_payroll.attendance.ingestion import parse_attendance_grid
from src.attendance_payroll.attendance_payroll.common.spreadsheets import decode_workbook
from src.attendance_payroll.attendance_payroll.core.exceptions import FormatError


def _xlsx(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    out = BytesIO()
    wb.save(out)
    return out.getvalue()


def test_decode_xlsx_into_grid_with_none_for_empty_cells():
    content = _xlsx(
        [
            ["PLANILLA", None, "MES DE ENERO 2025"],
            ["Codigo", "Nombre", "Dni", "Cargo", "Sueldo Mensual", "Sueldo Diario", "Dia1", "Dia2"],
            ["E01", "ANA PEREZ", 40123456, "Operaria", 1500, 50, "PU", None],
        ]
    )

    grid = decode_workbook(content, "enero.xlsx")

    assert grid[0][1] is None
    assert grid[1][0] == "Codigo"

    sheet = parse_attendance_grid(grid)
    assert sheet.period_label == "ENERO"
    assert sheet.raw_rows[0].national_id == "40123456"
    assert sheet.raw_rows[0].counts.on_time == 1


def test_decode_csv():
    content = "MES DE FEBRERO\nCodigo,Nombre,Dni,Cargo,Sueldo Mensual,Sueldo Diario,Dia1\nE01,ANA,1,Op,100,5,TA\n"
    grid = decode_workbook(content.encode("utf-8"), "febrero.csv")

    sheet = parse_attendance_grid(grid)

    assert sheet.period_label == "FEBRERO"
    assert sheet.raw_rows[0].counts.late == 1


def test_garbage_content_is_a_format_error():
    with pytest.raises(FormatError):
        decode_workbook(b"not a workbook", "x.xlsx")


def test_unsupported_extension():
    with pytest.raises(FormatError):
        decode_workbook(b"", "notes.txt")
