from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from ..core.enums import AttendanceCode, PayrollType, PensionScheme


@dataclass(frozen=True)
class AttendanceCounts:
    on_time: int = 0
    late: int = 0
    absent: int = 0
    extra_days: int = 0


@dataclass(frozen=True)
class RecordKey:
    """Identifies a record inside the session: the same employee code may
    appear in several files (e.g. two months), so the source file is part
    of the key."""

    source_file: str
    employee_code: str


@dataclass(frozen=True)
class RawRow:
    """A data row as read from the sheet, before directory validation."""

    position: int
    employee_code: str
    full_name: str
    national_id: str
    occupation: str
    monthly_salary: Decimal
    daily_salary: Decimal
    days: Mapping[int, AttendanceCode]
    counts: AttendanceCounts


@dataclass(frozen=True)
class ParsedSheet:
    period_label: str
    raw_rows: list[RawRow]
    days_in_period: int


@dataclass(frozen=True)
class AttendanceRecord:
    """Entidad de dominio: planilla de asistencia de un empleado en un periodo.

    Derived money figures are deliberately absent; they are computed from
    this record and the current PeriodSettings on every read.
    """

    employee_code: str
    national_id: str
    full_name: str
    occupation: str
    monthly_salary: Decimal
    daily_salary: Decimal
    days: Mapping[int, AttendanceCode]
    counts: AttendanceCounts
    source_file: str
    report_name: str
    month: str
    payroll_type: PayrollType = PayrollType.PAYROLL
    pension_scheme: PensionScheme = PensionScheme.NONE
    bonus_extra: Decimal = Decimal("0")
    site: str = ""
    employer: str = ""
    business_line: str = ""

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.source_file, self.employee_code)

    def code_for(self, day: int) -> AttendanceCode:
        return self.days.get(day, AttendanceCode.NL)
