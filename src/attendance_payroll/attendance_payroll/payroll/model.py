from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from ..core.constants import DEFAULT_DAYS_IN_PERIOD, DEFAULT_LATE_PENALTY
from ..core.enums import PayrollType, PensionScheme


@dataclass(frozen=True)
class PeriodSettings:
    """Session-wide settings shared by every record.

    Passed explicitly into each computation so a change (e.g. the late
    penalty) is seen by all records on the next read.
    """

    days_in_period: int = DEFAULT_DAYS_IN_PERIOD
    late_penalty: Decimal = DEFAULT_LATE_PENALTY
    default_payroll_type: PayrollType = PayrollType.PAYROLL
    default_pension_scheme: PensionScheme = PensionScheme.NONE
    default_site: str = ""

    def grow_days(self, days: int) -> "PeriodSettings":
        if days <= self.days_in_period:
            return self
        return replace(self, days_in_period=days)


@dataclass(frozen=True)
class Financials:
    attendance_deduction: Decimal
    pension_deduction: Decimal
    extra_days_value: Decimal
    bonus: Decimal
    net_pay: Decimal

    @property
    def total_deductions(self) -> Decimal:
        return self.attendance_deduction + self.pension_deduction

    @property
    def total_bonuses(self) -> Decimal:
        return self.extra_days_value + self.bonus
