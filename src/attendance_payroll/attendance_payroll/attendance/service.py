from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from ..common.spreadsheets import decode_workbook
from ..common.validators import require_day_in_period, require_non_negative_amount
from ..core.constants import ALL_MONTHS
from ..core.enums import PayrollType, PensionScheme
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..payroll.model import Financials, PeriodSettings
from . import edits
from .codes import require_code
from .ingestion import Grid, parse_attendance_grid, report_name_for
from .model import AttendanceRecord, RecordKey
from .repository import AttendanceRepository
from .validation import RowValidator, ValidationReport, enrich

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFilter:
    search: str = ""
    month: str = ALL_MONTHS
    report_name: str = ""

    def matches(self, record: AttendanceRecord) -> bool:
        if self.month and self.month != ALL_MONTHS and record.month != self.month:
            return False
        if self.report_name and record.report_name != self.report_name:
            return False
        term = self.search.strip().lower()
        if not term:
            return True
        return any(
            term in value.lower()
            for value in (record.employee_code, record.full_name, record.national_id, record.occupation)
        )


@dataclass(frozen=True)
class ComputedRecord:
    record: AttendanceRecord
    financials: Financials


@dataclass(frozen=True)
class IngestionResult:
    file_name: str
    report_name: str
    period_label: str
    days_in_period: int
    report: ValidationReport
    discarded: bool = False

    @property
    def accepted_count(self) -> int:
        return 0 if self.discarded else self.report.accepted_count

    @property
    def rejected_count(self) -> int:
        return self.report.rejected_count


@dataclass(frozen=True)
class FileFailure:
    file_name: str
    message: str


@dataclass
class BatchIngestionResult:
    results: list[IngestionResult] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return sum(r.accepted_count for r in self.results)

    @property
    def rejected_count(self) -> int:
        return sum(r.rejected_count for r in self.results)

    def summary_message(self) -> str:
        msg = f"{self.accepted_count} registros aceptados, {self.rejected_count} rechazados"
        if self.failures:
            msg += f"; {len(self.failures)} archivo(s) con error"
        return msg


def _payroll_type(value: Any) -> PayrollType:
    try:
        return PayrollType(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Tipo de planilla desconocido: {value!r}") from None


def _pension_scheme(value: Any) -> PensionScheme:
    try:
        return PensionScheme(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Régimen de pensión desconocido: {value!r}") from None


class AttendanceService:
    """Use cases of an attendance session: import, edit, filter, remove.

    Writes to one record are serialised through a per-key lock; different
    records can be edited concurrently.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        validator: RowValidator,
        *,
        calculator: Optional[PayrollCalculator] = None,
        settings: Optional[PeriodSettings] = None,
        decoder: Callable[[bytes, str], Grid] = decode_workbook,
    ):
        self._attendance = attendance
        self._validator = validator
        self._calculator = calculator or StandardPayrollCalculator()
        self._settings = settings or PeriodSettings()
        self._decoder = decoder

        self._lock = threading.RLock()
        self._key_locks: dict[RecordKey, threading.Lock] = {}
        self._generations: dict[str, int] = {}

    # -- settings ---------------------------------------------------------

    @property
    def settings(self) -> PeriodSettings:
        return self._settings

    def update_settings(
        self,
        *,
        late_penalty: Any = None,
        default_payroll_type: Optional[PayrollType] = None,
        default_pension_scheme: Optional[PensionScheme] = None,
        default_site: Optional[str] = None,
    ) -> PeriodSettings:
        changes: dict[str, Any] = {}
        if late_penalty is not None:
            changes["late_penalty"] = require_non_negative_amount(late_penalty, "Descuento por tardanza")
        if default_payroll_type is not None:
            changes["default_payroll_type"] = _payroll_type(default_payroll_type)
        if default_pension_scheme is not None:
            changes["default_pension_scheme"] = _pension_scheme(default_pension_scheme)
        if default_site is not None:
            changes["default_site"] = default_site.strip()
        with self._lock:
            self._settings = replace(self._settings, **changes)
            return self._settings

    # -- ingestion --------------------------------------------------------

    def _begin(self, file_name: str) -> int:
        with self._lock:
            return self._generations.setdefault(file_name, 0)

    def ingest_file(self, file_name: str, content: bytes) -> IngestionResult:
        grid = self._decoder(content, file_name)
        return self.ingest_grid(file_name, grid)

    def ingest_grid(self, file_name: str, grid: Grid) -> IngestionResult:
        """Parse, validate and commit one file.

        Raises FormatError when the grid has no header row; nothing is added
        in that case.
        """
        generation = self._begin(file_name)
        sheet = parse_attendance_grid(grid)
        with self._lock:
            self._settings = self._settings.grow_days(sheet.days_in_period)

        report = self._validator.validate(sheet.raw_rows)
        report_name = report_name_for(file_name)

        with self._lock:
            if self._generations.get(file_name, 0) != generation:
                _logger.warning("discarding late results for removed file %s", file_name)
                return IngestionResult(
                    file_name=file_name,
                    report_name=report_name,
                    period_label=sheet.period_label,
                    days_in_period=sheet.days_in_period,
                    report=report,
                    discarded=True,
                )

            records = [
                enrich(
                    row,
                    source_file=file_name,
                    report_name=report_name,
                    month=sheet.period_label,
                    settings=self._settings,
                )
                for row in report.accepted
            ]
            # Re-importing a file replaces what it loaded before.
            self._attendance.remove_source(file_name)
            self._attendance.register_source(file_name)
            self._attendance.add_many(records)

        _logger.info(
            "imported %s: month=%s days=%s accepted=%s rejected=%s",
            file_name,
            sheet.period_label,
            sheet.days_in_period,
            report.accepted_count,
            report.rejected_count,
        )
        return IngestionResult(
            file_name=file_name,
            report_name=report_name,
            period_label=sheet.period_label,
            days_in_period=sheet.days_in_period,
            report=report,
        )

    def ingest_many(self, files: Iterable[tuple[str, bytes]]) -> BatchIngestionResult:
        """Files are processed one after another; a failing file does not stop the rest."""
        batch = BatchIngestionResult()
        for file_name, content in files:
            try:
                batch.results.append(self.ingest_file(file_name, content))
            except DomainError as e:
                _logger.warning("file %s rejected: %s", file_name, e)
                batch.failures.append(FileFailure(file_name=file_name, message=str(e)))
        return batch

    def remove_source(self, file_name: str) -> int:
        """Drop every record loaded from file_name; in-flight imports of it are discarded."""
        with self._lock:
            self._generations[file_name] = self._generations.get(file_name, 0) + 1
            removed = self._attendance.remove_source(file_name)
            for key in [k for k in self._key_locks if k.source_file == file_name]:
                del self._key_locks[key]
        _logger.info("removed %s (%s records)", file_name, removed)
        return removed

    # -- edits ------------------------------------------------------------

    def _key_lock(self, key: RecordKey) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault(key, threading.Lock())

    def _update(self, key: RecordKey, change: Callable[[AttendanceRecord], AttendanceRecord]) -> ComputedRecord:
        with self._key_lock(key):
            record = self._attendance.get(key)
            if not record:
                raise NotFoundError(f"No existe el registro {key.employee_code} de {key.source_file}")
            updated = change(record)
            with self._lock:
                # The source file may have been removed while the change was built.
                if self._attendance.get(key) is None:
                    raise NotFoundError(f"No existe el registro {key.employee_code} de {key.source_file}")
                self._attendance.put(updated)
        return self.compute(updated)

    def edit_day(self, key: RecordKey, day: Any, code: Any) -> ComputedRecord:
        day_number = require_day_in_period(day, self._settings.days_in_period)
        new_code = require_code(code)
        return self._update(key, lambda r: edits.apply_day_edit(r, day_number, new_code))

    def set_payroll_type(self, key: RecordKey, payroll_type: Any) -> ComputedRecord:
        value = _payroll_type(payroll_type)
        return self._update(key, lambda r: edits.with_payroll_type(r, value))

    def set_pension_scheme(self, key: RecordKey, scheme: Any) -> ComputedRecord:
        value = _pension_scheme(scheme)
        return self._update(key, lambda r: edits.with_pension_scheme(r, value))

    def set_bonus(self, key: RecordKey, amount: Any) -> ComputedRecord:
        value = require_non_negative_amount(amount, "Bono extra")
        return self._update(key, lambda r: edits.with_bonus(r, value))

    def set_site(self, key: RecordKey, site: str) -> ComputedRecord:
        value = (site or "").strip()
        return self._update(key, lambda r: edits.with_site(r, value))

    def update_fields(
        self,
        key: RecordKey,
        *,
        payroll_type: Any = None,
        pension_scheme: Any = None,
        bonus: Any = None,
        site: Optional[str] = None,
    ) -> ComputedRecord:
        """Apply several field changes as one edit.

        Every value is validated before anything is written, so a rejected
        request leaves the record unchanged.
        """
        changes: list[Callable[[AttendanceRecord], AttendanceRecord]] = []
        if payroll_type is not None:
            payroll_value = _payroll_type(payroll_type)
            changes.append(lambda r: edits.with_payroll_type(r, payroll_value))
        if pension_scheme is not None:
            scheme_value = _pension_scheme(pension_scheme)
            changes.append(lambda r: edits.with_pension_scheme(r, scheme_value))
        if bonus is not None:
            bonus_value = require_non_negative_amount(bonus, "Bono extra")
            changes.append(lambda r: edits.with_bonus(r, bonus_value))
        if site is not None:
            site_value = str(site).strip()
            changes.append(lambda r: edits.with_site(r, site_value))

        def apply_all(record: AttendanceRecord) -> AttendanceRecord:
            for change in changes:
                record = change(record)
            return record

        return self._update(key, apply_all)

    # -- queries ----------------------------------------------------------

    def compute(self, record: AttendanceRecord) -> ComputedRecord:
        return ComputedRecord(record=record, financials=self._calculator.compute(record, self._settings))

    def get(self, key: RecordKey) -> ComputedRecord:
        record = self._attendance.get(key)
        if not record:
            raise NotFoundError(f"No existe el registro {key.employee_code} de {key.source_file}")
        return self.compute(record)

    def filtered(self, flt: Optional[RecordFilter] = None) -> list[AttendanceRecord]:
        flt = flt or RecordFilter()
        return [r for r in self._attendance.list_all() if flt.matches(r)]

    def computed_rows(self, flt: Optional[RecordFilter] = None) -> list[ComputedRecord]:
        return [self.compute(r) for r in self.filtered(flt)]

    def available_months(self) -> list[str]:
        months: list[str] = []
        for r in self._attendance.list_all():
            if r.month not in months:
                months.append(r.month)
        return [ALL_MONTHS, *months]

    def sources(self) -> Sequence[str]:
        return self._attendance.list_sources()

    def total_net_pay(self, flt: Optional[RecordFilter] = None) -> Decimal:
        return sum((c.financials.net_pay for c in self.computed_rows(flt)), Decimal("0"))
