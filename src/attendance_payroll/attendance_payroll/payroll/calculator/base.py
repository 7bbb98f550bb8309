from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...attendance.model import AttendanceRecord
from ..model import Financials, PeriodSettings


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    Implementations are stateless: the same record and settings always give
    the same Financials.
    """

    @abstractmethod
    def attendance_deduction(self, record: AttendanceRecord, settings: PeriodSettings) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def pension_deduction(self, record: AttendanceRecord) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def compute(self, record: AttendanceRecord, settings: PeriodSettings) -> Financials:
        raise NotImplementedError
