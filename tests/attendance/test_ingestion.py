from decimal import Decimal

import pytest

from src.attendance_payroll.attendance_payroll.attendance.ingestion import (
    extract_period_label,
    parse_attendance_grid,
    report_name_for,
)
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceCode
from src.attendance_payroll.attendance_payroll.core.exceptions import FormatError

HEADER = ["Codigo", "Nombre", "Dni", "Cargo", "Sueldo Mensual", "Sueldo Diario", "Dia1", "Dia2", "Dia3"]


def _grid(*rows):
    return [
        ["EMPRESA SAC", None],
        [None, "PLANILLA", "MES DE Marzo 2025"],
        [],
        HEADER,
        *rows,
    ]


def test_parses_rows_until_first_blank_code():
    grid = _grid(
        ["E01", "ANA PEREZ", "40123456", "Operaria", 1500, 50, "PU", "TA", "FA"],
        ["E02", "LUIS RAMOS", "41234567", "Chofer", "2,400.50", "80", "DE", "PU", "PU"],
        [None, "fin de tabla"],
        ["E03", "NO DEBE", "1", "x", 1, 1, "PU", "PU", "PU"],
    )

    sheet = parse_attendance_grid(grid)

    assert sheet.period_label == "Marzo"
    assert sheet.days_in_period == 3
    assert [r.employee_code for r in sheet.raw_rows] == ["E01", "E02"]
    assert [r.position for r in sheet.raw_rows] == [0, 1]

    first = sheet.raw_rows[0]
    assert first.monthly_salary == Decimal("1500")
    assert (first.counts.on_time, first.counts.late, first.counts.absent) == (1, 1, 1)

    second = sheet.raw_rows[1]
    assert second.monthly_salary == Decimal("2400.50")
    assert second.counts.extra_days == 1
    assert second.counts.on_time == 2


def test_missing_day_cell_defaults_to_nl_and_is_not_counted():
    grid = _grid(["E01", "ANA", "40123456", "Operaria", 1500, 50, "PU", "PU"])

    row = parse_attendance_grid(grid).raw_rows[0]

    assert row.days[3] == AttendanceCode.NL
    assert row.counts.on_time == 2
    assert row.counts.late == row.counts.absent == row.counts.extra_days == 0


def test_non_numeric_salary_becomes_zero_and_numeric_codes_are_normalised():
    grid = _grid([1001.0, "ANA", 40123456.0, "Operaria", "n/a", None, "PU", "PU", "PU"])

    row = parse_attendance_grid(grid).raw_rows[0]

    assert row.employee_code == "1001"
    assert row.national_id == "40123456"
    assert row.monthly_salary == Decimal("0")
    assert row.daily_salary == Decimal("0")


def test_header_without_data_rows_is_an_empty_sheet():
    sheet = parse_attendance_grid(_grid())
    assert sheet.raw_rows == []
    assert sheet.days_in_period == 3


def test_grid_without_header_row_is_rejected():
    with pytest.raises(FormatError):
        parse_attendance_grid([["MES DE ABRIL"], ["Code", "Name"], ["E01", "ANA"]])


def test_period_label_defaults_when_marker_missing():
    assert extract_period_label([["PLANILLA"], ["Codigo"]]) == "SIN MES"


def test_period_label_is_case_insensitive_and_strips_digits():
    assert extract_period_label([["planilla mes de  abril   2024 "]]) == "abril"


def test_period_label_marker_split_across_cells():
    assert extract_period_label([["MES", " DE MARZO"]]) == "MARZO"
    assert extract_period_label([["PLANILLA", None, "MES DE ENERO 2025"]]) == "ENERO"


def test_period_label_only_scans_first_rows():
    grid = [[], [], [], [], [], ["MES DE MAYO"]]
    assert extract_period_label(grid) == "SIN MES"


@pytest.mark.parametrize(
    "file_name, expected",
    [
        ("planilla_lima-marzo.xlsx", "planilla lima marzo"),
        ("Reporte  Sede__Norte.csv", "Reporte Sede Norte"),
        ("marzo", "marzo"),
    ],
)
def test_report_name_for(file_name, expected):
    assert report_name_for(file_name) == expected
