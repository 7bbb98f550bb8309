"""Validate imported rows against the employee directory and merge its data.

Lookups of one batch run on a small thread pool. Every result is tied to
the position of its row and the report is assembled in input order, so the
accepted rows keep the order of the sheet.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from ..core.constants import DEFAULT_LOOKUP_TIMEOUT_SECONDS, DEFAULT_LOOKUP_WORKERS
from ..core.enums import RejectionKind
from ..core.exceptions import LookupFailure
from ..employees.directory import EmployeeDirectory, Found, LookupResult, NotFound, ServiceError
from ..employees.model import Employee
from ..payroll.model import PeriodSettings
from .model import AttendanceRecord, RawRow

_logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "No se encontró el DNI ni el nombre en el padrón de personal"
MSG_INACTIVE = "El empleado figura como inactivo en el padrón de personal"
MSG_TIMEOUT = "Tiempo de espera agotado al consultar el padrón de personal"
MSG_NOT_STARTED = "No se consultó el padrón de personal: consultas anteriores sin respuesta"
MSG_DUPLICATE_CODE = "Código de empleado duplicado en el archivo"


@dataclass(frozen=True)
class RowRejection:
    position: int
    national_id: str
    full_name: str
    kind: RejectionKind
    reason: str


@dataclass(frozen=True)
class ValidatedRow:
    raw: RawRow
    employee: Employee


@dataclass
class ValidationReport:
    accepted: list[ValidatedRow] = field(default_factory=list)
    errors: dict[str, RowRejection] = field(default_factory=dict)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    @property
    def rejected_count(self) -> int:
        return len(self.errors)

    def add_error(self, rejection: RowRejection) -> None:
        key = rejection.national_id or f"fila-{rejection.position + 1}"
        if key in self.errors:
            key = f"{key} (fila-{rejection.position + 1})"
        self.errors[key] = rejection


RowOutcome = Union[Employee, RowRejection]


def _active_entry(result: LookupResult) -> tuple[Optional[Employee], bool]:
    """Return (first active entry, whether any entry matched at all)."""
    if isinstance(result, Found):
        return result.first_active(), bool(result.entries)
    if isinstance(result, NotFound):
        return None, False
    if isinstance(result, ServiceError):
        raise LookupFailure(result.reason)
    raise TypeError(f"Unexpected lookup result: {result!r}")


class RowValidator:
    def __init__(
        self,
        directory: EmployeeDirectory,
        *,
        timeout_seconds: float = DEFAULT_LOOKUP_TIMEOUT_SECONDS,
        max_workers: int = DEFAULT_LOOKUP_WORKERS,
    ):
        self._directory = directory
        self._timeout = float(timeout_seconds)
        self._max_workers = max(1, int(max_workers))

    def _reject(self, raw: RawRow, kind: RejectionKind, reason: str) -> RowRejection:
        return RowRejection(
            position=raw.position,
            national_id=raw.national_id,
            full_name=raw.full_name,
            kind=kind,
            reason=reason,
        )

    def validate_row(self, raw: RawRow) -> RowOutcome:
        """National ID first, then name tokens; first active match wins."""
        matched_inactive = False
        try:
            if raw.national_id:
                employee, matched = _active_entry(self._directory.lookup_by_national_id(raw.national_id))
                if employee:
                    return employee
                matched_inactive = matched

            employee, matched = _active_entry(self._directory.lookup_by_name(raw.full_name))
            if employee:
                return employee
            matched_inactive = matched_inactive or matched
        except LookupFailure as e:
            return self._reject(raw, RejectionKind.LOOKUP, f"Padrón de personal no disponible: {e}")

        return self._reject(raw, RejectionKind.VALIDATION, MSG_INACTIVE if matched_inactive else MSG_NOT_FOUND)

    def validate(self, rows: Sequence[RawRow]) -> ValidationReport:
        """Validate a batch; the report lists rows in input order.

        Each lookup gets `timeout_seconds` from the moment it starts. Once
        every worker is held by a timed-out lookup, rows still queued are
        rejected without being looked up.
        """
        report = ValidationReport()
        if not rows:
            return report

        outcomes: dict[int, RowOutcome] = {}
        unique: list[RawRow] = []
        seen_codes: set[str] = set()
        for raw in rows:
            if raw.employee_code in seen_codes:
                outcomes[raw.position] = self._reject(
                    raw, RejectionKind.VALIDATION, f"{MSG_DUPLICATE_CODE}: {raw.employee_code}"
                )
                continue
            seen_codes.add(raw.employee_code)
            unique.append(raw)

        started: dict[int, float] = {}

        def run(raw: RawRow) -> RowOutcome:
            started[raw.position] = time.monotonic()
            return self.validate_row(raw)

        executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="directory-lookup")
        try:
            waiting: dict[Future, RawRow] = {executor.submit(run, raw): raw for raw in unique}
            stuck = 0
            while waiting and stuck < self._max_workers:
                now = time.monotonic()
                deadlines = [started[r.position] + self._timeout for r in waiting.values() if r.position in started]
                wait_for = max(0.0, min(deadlines) - now) if deadlines else self._timeout
                done, _ = wait(list(waiting), timeout=wait_for, return_when=FIRST_COMPLETED)
                for future in done:
                    raw = waiting.pop(future)
                    outcomes[raw.position] = future.result()

                now = time.monotonic()
                for future, raw in list(waiting.items()):
                    begun = started.get(raw.position)
                    if begun is None or now - begun < self._timeout:
                        continue
                    del waiting[future]
                    stuck += 1
                    _logger.warning("directory lookup timed out for row %s (%s)", raw.position + 1, raw.national_id)
                    outcomes[raw.position] = self._reject(raw, RejectionKind.LOOKUP, MSG_TIMEOUT)

            for future, raw in waiting.items():
                future.cancel()
                outcomes[raw.position] = self._reject(raw, RejectionKind.LOOKUP, MSG_NOT_STARTED)
            if waiting:
                _logger.warning("%s rows not looked up: directory workers blocked", len(waiting))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for raw in rows:
            outcome = outcomes[raw.position]
            if isinstance(outcome, RowRejection):
                report.add_error(outcome)
            else:
                report.accepted.append(ValidatedRow(raw=raw, employee=outcome))
        return report


def enrich(
    row: ValidatedRow,
    *,
    source_file: str,
    report_name: str,
    month: str,
    settings: PeriodSettings,
) -> AttendanceRecord:
    """Build a record; directory values win over file values when present."""
    raw, employee = row.raw, row.employee
    return AttendanceRecord(
        employee_code=raw.employee_code,
        national_id=raw.national_id or employee.national_id,
        full_name=raw.full_name or employee.full_name,
        occupation=employee.occupation or raw.occupation,
        monthly_salary=employee.salary if employee.salary > 0 else raw.monthly_salary,
        daily_salary=raw.daily_salary,
        days=dict(raw.days),
        counts=raw.counts,
        source_file=source_file,
        report_name=report_name,
        month=month,
        payroll_type=settings.default_payroll_type,
        pension_scheme=settings.default_pension_scheme,
        site=employee.site or settings.default_site,
        employer=employee.employer,
        business_line=employee.business_line,
    )
