from __future__ import annotations

from decimal import Decimal

from ...attendance.model import AttendanceRecord
from ...core.constants import AFP_RATE, ONP_RATE
from ...core.enums import PayrollType, PensionScheme
from ..model import Financials, PeriodSettings
from .base import PayrollCalculator

ZERO = Decimal("0")

PENSION_RATES = {
    PensionScheme.AFP: AFP_RATE,
    PensionScheme.ONP: ONP_RATE,
}


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule:

    deductions = late x penalty + absent x daily rate
    pension    = monthly salary x scheme rate (regular payroll only)
    net pay    = salary - deductions - pension + extra days x daily rate + bonus, not below 0
    """

    def attendance_deduction(self, record: AttendanceRecord, settings: PeriodSettings) -> Decimal:
        return record.counts.late * settings.late_penalty + record.counts.absent * record.daily_salary

    def pension_deduction(self, record: AttendanceRecord) -> Decimal:
        if record.payroll_type == PayrollType.FEE_BASED:
            return ZERO
        rate = PENSION_RATES.get(record.pension_scheme)
        if rate is None:
            return ZERO
        return record.monthly_salary * rate

    def compute(self, record: AttendanceRecord, settings: PeriodSettings) -> Financials:
        attendance = self.attendance_deduction(record, settings)
        pension = self.pension_deduction(record)
        extra_days = record.counts.extra_days * record.daily_salary
        bonus = record.bonus_extra

        net = record.monthly_salary - attendance - pension + extra_days + bonus
        return Financials(
            attendance_deduction=attendance,
            pension_deduction=pension,
            extra_days_value=extra_days,
            bonus=bonus,
            net_pay=max(net, ZERO),
        )
