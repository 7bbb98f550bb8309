from decimal import Decimal

from src.attendance_payroll.attendance_payroll.attendance.edits import recount
from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceRecord
from src.attendance_payroll.attendance_payroll.attendance.service import ComputedRecord
from src.attendance_payroll.attendance_payroll.core.constants import GROUP_PALETTE
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceCode as C, PensionScheme
from src.attendance_payroll.attendance_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.attendance_payroll.attendance_payroll.payroll.model import PeriodSettings
from src.attendance_payroll.attendance_payroll.reports.aggregation import build_groupings, group_by, totals


def _row(code, salary, *, report="marzo", occupation="Operario", business_line="", days=None, **kwargs):
    days = days or {}
    record = AttendanceRecord(
        employee_code=code,
        national_id=code,
        full_name=code,
        occupation=occupation,
        monthly_salary=Decimal(salary),
        daily_salary=Decimal("10"),
        days=days,
        counts=recount(days),
        source_file=f"{report}.xlsx",
        report_name=report,
        month="MARZO",
        business_line=business_line,
        **kwargs,
    )
    return ComputedRecord(record=record, financials=StandardPayrollCalculator().compute(record, PeriodSettings()))


def test_blank_keys_use_sentinels():
    groups = build_groupings([_row("A", "100", occupation=" ", business_line="")])

    assert groups.by_business_line[0].key == "Sin Rubro"
    assert groups.by_occupation[0].key == "Sin Especificar"


def test_groups_sorted_by_net_pay_with_insertion_colours():
    rows = [
        _row("A", "100", report="enero"),
        _row("B", "900", report="febrero"),
        _row("C", "300", report="marzo"),
        _row("D", "50", report="enero"),
    ]

    groups = group_by(rows, lambda r: r.record.report_name)

    assert [g.key for g in groups] == ["febrero", "marzo", "enero"]
    colours = {g.key: g.color for g in groups}
    assert colours == {"enero": GROUP_PALETTE[0], "febrero": GROUP_PALETTE[1], "marzo": GROUP_PALETTE[2]}
    enero = groups[-1]
    assert enero.count == 2
    assert enero.sum_net_pay == Decimal("150")


def test_ties_keep_first_seen_order():
    rows = [_row("A", "100", report="x"), _row("B", "100", report="y")]
    assert [g.key for g in group_by(rows, lambda r: r.record.report_name)] == ["x", "y"]


def test_palette_cycles():
    rows = [_row(str(i), str(1000 - i), report=f"r{i}") for i in range(len(GROUP_PALETTE) + 1)]
    groups = group_by(rows, lambda r: r.record.report_name)
    assert groups[-1].color == GROUP_PALETTE[0]


def test_sums_split_deductions_and_bonuses():
    rows = [
        _row("A", "1000", days={1: C.FA, 2: C.DE, 3: C.DE}, pension_scheme=PensionScheme.AFP),
        _row("B", "500", bonus_extra=Decimal("20")),
    ]

    t = totals(rows)
    group = build_groupings(rows).by_report[0]

    assert t.count == 2
    assert t.monthly_salary == Decimal("1500")
    assert t.deductions == Decimal("10") + Decimal("117.000")
    assert t.bonuses == Decimal("20") + Decimal("20")
    assert t.net_pay == Decimal("1000") - Decimal("10") - Decimal("117") + Decimal("20") + Decimal("520")
    assert group.sum_deductions == t.deductions
    assert group.sum_bonuses == t.bonuses
    assert group.sum_net_pay == t.net_pay


def test_empty_input():
    groups = build_groupings([])
    assert groups.by_report == groups.by_business_line == groups.by_occupation == []
    assert totals([]).net_pay == 0
