from datetime import datetime
from decimal import Decimal

from openpyxl import load_workbook

from src.attendance_payroll.attendance_payroll.attendance.edits import recount
from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceRecord
from src.attendance_payroll.attendance_payroll.attendance.service import ComputedRecord
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceCode as C
from src.attendance_payroll.attendance_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.attendance_payroll.attendance_payroll.payroll.model import PeriodSettings
from src.attendance_payroll.attendance_payroll.reports.export import build_export
from src.attendance_payroll.attendance_payroll.reports.xlsx_writer import write_xlsx


def test_written_workbook_can_be_read_back():
    settings = PeriodSettings(days_in_period=2)
    days = {1: C.PU, 2: C.FA}
    record = AttendanceRecord(
        employee_code="E01",
        national_id="40123456",
        full_name="ANA PEREZ",
        occupation="Operaria",
        monthly_salary=Decimal("1500"),
        daily_salary=Decimal("50"),
        days=days,
        counts=recount(days),
        source_file="marzo.xlsx",
        report_name="marzo",
        month="MARZO",
    )
    rows = [ComputedRecord(record, StandardPayrollCalculator().compute(record, settings))]
    doc = build_export(rows, settings, now=datetime(2025, 4, 1, 9, 0, 0))

    wb = load_workbook(write_xlsx(doc))

    assert wb.sheetnames == ["Detalle Asistencias", "Resumen Pagos"]
    detail = wb["Detalle Asistencias"]
    assert detail["A1"].value == "PLANILLA DETALLADA DE ASISTENCIAS"
    assert detail["A1"].font.bold
    assert detail["A6"].value == "Codigo"
    assert detail["G7"].value == "PU"
    assert detail["H7"].value == "FA"
    assert float(detail["E7"].value) == 1500.0
    assert detail["E7"].number_format == "#,##0.00"

    summary = wb["Resumen Pagos"]
    net = [row for row in summary.iter_rows(values_only=True) if row[0] == "TOTALES"][0][5]
    assert float(net) == 1450.0
