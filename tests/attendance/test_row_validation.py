import threading
import time
from decimal import Decimal

from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceCounts, RawRow
from src.attendance_payroll.attendance_payroll.attendance.validation import (
    MSG_DUPLICATE_CODE,
    MSG_INACTIVE,
    MSG_NOT_FOUND,
    MSG_NOT_STARTED,
    MSG_TIMEOUT,
    RowValidator,
    ValidatedRow,
    enrich,
)
from src.attendance_payroll.attendance_payroll.core.enums import PayrollType, PensionScheme, RejectionKind
from src.attendance_payroll.attendance_payroll.employees.directory import Found, NotFound, ServiceError
from src.attendance_payroll.attendance_payroll.employees.model import Employee
from src.attendance_payroll.attendance_payroll.payroll.model import PeriodSettings


def _employee(employee_id, national_id, full_name, *, is_active=True, **kwargs):
    return Employee(
        employee_id=employee_id,
        national_id=national_id,
        full_name=full_name,
        occupation=kwargs.pop("occupation", "Operario"),
        is_active=is_active,
        **kwargs,
    )


def _raw(position, national_id, full_name, *, code=None):
    return RawRow(
        position=position,
        employee_code=code or f"E{position:02d}",
        full_name=full_name,
        national_id=national_id,
        occupation="Ayudante",
        monthly_salary=Decimal("1200"),
        daily_salary=Decimal("40"),
        days={},
        counts=AttendanceCounts(),
    )


class FakeDirectory:
    def __init__(self, *, by_id=None, by_name=None, delays=None):
        self.by_id = by_id or {}
        self.by_name = by_name or {}
        self.delays = delays or {}
        self.calls = []

    def lookup_by_national_id(self, national_id):
        self.calls.append(("dni", national_id))
        time.sleep(self.delays.get(national_id, 0))
        return self.by_id.get(national_id, NotFound())

    def lookup_by_name(self, name):
        self.calls.append(("name", name))
        return self.by_name.get(name, NotFound())


def test_national_id_match_wins_over_name():
    by_dni = _employee(1, "40123456", "ANA PEREZ")
    by_name = _employee(2, "99999999", "ANA PEREZ")
    directory = FakeDirectory(
        by_id={"40123456": Found((by_dni,))},
        by_name={"ANA PEREZ": Found((by_name,))},
    )

    outcome = RowValidator(directory).validate_row(_raw(0, "40123456", "ANA PEREZ"))

    assert outcome == by_dni
    assert directory.calls == [("dni", "40123456")]


def test_falls_back_to_name_when_national_id_blank():
    emp = _employee(3, "41234567", "LUIS RAMOS")
    directory = FakeDirectory(by_name={"LUIS RAMOS": Found((emp,))})

    outcome = RowValidator(directory).validate_row(_raw(0, "", "LUIS RAMOS"))

    assert outcome == emp
    assert directory.calls == [("name", "LUIS RAMOS")]


def test_first_active_entry_is_chosen():
    inactive = _employee(1, "40123456", "ANA PEREZ", is_active=False)
    active = _employee(2, "40123456", "ANA PEREZ")
    directory = FakeDirectory(by_id={"40123456": Found((inactive, active))})

    assert RowValidator(directory).validate_row(_raw(0, "40123456", "ANA PEREZ")) == active


def test_inactive_and_missing_have_different_reasons():
    inactive = _employee(1, "40123456", "ANA PEREZ", is_active=False)
    directory = FakeDirectory(by_id={"40123456": Found((inactive,))})
    validator = RowValidator(directory)

    report = validator.validate([_raw(0, "40123456", "ANA PEREZ"), _raw(1, "", "NADIE")])

    assert report.accepted_count == 0
    assert report.errors["40123456"].reason == MSG_INACTIVE
    assert report.errors["40123456"].kind == RejectionKind.VALIDATION
    assert report.errors["fila-2"].reason == MSG_NOT_FOUND


def test_service_error_is_a_lookup_rejection():
    directory = FakeDirectory(by_id={"40123456": ServiceError("connection refused")})

    report = RowValidator(directory).validate([_raw(0, "40123456", "ANA PEREZ")])

    rejection = report.errors["40123456"]
    assert rejection.kind == RejectionKind.LOOKUP
    assert "connection refused" in rejection.reason


def test_accepted_rows_keep_input_order_despite_slow_lookups():
    employees = {str(40000000 + i): _employee(i, str(40000000 + i), f"EMP {i}") for i in range(6)}
    directory = FakeDirectory(
        by_id={dni: Found((e,)) for dni, e in employees.items()},
        delays={"40000000": 0.15, "40000002": 0.05},
    )
    rows = [_raw(i, str(40000000 + i), f"EMP {i}") for i in range(6)]

    report = RowValidator(directory, max_workers=4).validate(rows)

    assert [v.raw.position for v in report.accepted] == [0, 1, 2, 3, 4, 5]
    assert [v.employee.employee_id for v in report.accepted] == [0, 1, 2, 3, 4, 5]


def test_lookup_timeout_rejects_row_without_failing_batch():
    release = threading.Event()

    class SlowDirectory(FakeDirectory):
        def lookup_by_national_id(self, national_id):
            if national_id == "40123456":
                release.wait(2)
            return super().lookup_by_national_id(national_id)

    ok = _employee(2, "41234567", "LUIS RAMOS")
    directory = SlowDirectory(by_id={"41234567": Found((ok,))})
    try:
        report = RowValidator(directory, timeout_seconds=0.05, max_workers=2).validate(
            [_raw(0, "40123456", "ANA PEREZ"), _raw(1, "41234567", "LUIS RAMOS")]
        )
    finally:
        release.set()

    assert report.errors["40123456"].reason == MSG_TIMEOUT
    assert report.errors["40123456"].kind == RejectionKind.LOOKUP
    assert [v.employee for v in report.accepted] == [ok]


def test_hung_directory_times_out_running_rows_and_skips_queued_ones():
    release = threading.Event()

    class HungDirectory(FakeDirectory):
        def lookup_by_national_id(self, national_id):
            release.wait(5)
            return super().lookup_by_national_id(national_id)

    rows = [_raw(i, str(40000000 + i), f"EMP {i}") for i in range(10)]
    started = time.monotonic()
    try:
        report = RowValidator(HungDirectory(), timeout_seconds=0.2, max_workers=2).validate(rows)
    finally:
        release.set()
    elapsed = time.monotonic() - started

    assert elapsed < 1.5
    reasons = [e.reason for e in report.errors.values()]
    assert reasons.count(MSG_TIMEOUT) == 2
    assert reasons.count(MSG_NOT_STARTED) == 8
    assert all(e.kind == RejectionKind.LOOKUP for e in report.errors.values())
    assert report.accepted == []


def test_queued_rows_wait_for_a_free_worker_without_timing_out():
    employees = {str(40000000 + i): _employee(i, str(40000000 + i), f"EMP {i}") for i in range(6)}
    directory = FakeDirectory(
        by_id={dni: Found((e,)) for dni, e in employees.items()},
        delays={dni: 0.1 for dni in employees},
    )
    rows = [_raw(i, str(40000000 + i), f"EMP {i}") for i in range(6)]

    # Each lookup fits its own timeout, the batch as a whole does not.
    report = RowValidator(directory, timeout_seconds=0.25, max_workers=1).validate(rows)

    assert report.rejected_count == 0
    assert len(report.accepted) == 6


def test_repeated_employee_code_rejects_later_rows():
    ana = _employee(1, "40123456", "ANA PEREZ")
    luis = _employee(2, "41234567", "LUIS RAMOS")
    directory = FakeDirectory(by_id={"40123456": Found((ana,)), "41234567": Found((luis,))})

    report = RowValidator(directory).validate(
        [_raw(0, "40123456", "ANA PEREZ", code="E01"), _raw(1, "41234567", "LUIS RAMOS", code="E01")]
    )

    assert [v.employee for v in report.accepted] == [ana]
    assert report.errors["41234567"].kind == RejectionKind.VALIDATION
    assert report.errors["41234567"].reason.startswith(MSG_DUPLICATE_CODE)
    assert ("dni", "41234567") not in directory.calls


def test_duplicate_national_ids_keep_both_errors():
    report = RowValidator(FakeDirectory()).validate([_raw(0, "1", "A"), _raw(1, "1", "B")])

    assert report.rejected_count == 2
    assert set(report.errors) == {"1", "1 (fila-2)"}


def test_enrich_prefers_directory_values():
    emp = _employee(
        1,
        "40123456",
        "ANA PEREZ",
        occupation="Supervisora",
        salary=Decimal("2000"),
        site="Lima",
        employer="Agro SAC",
        business_line="Agricola",
    )
    row = ValidatedRow(raw=_raw(0, "40123456", "ANA PEREZ"), employee=emp)
    settings = PeriodSettings(
        default_payroll_type=PayrollType.FEE_BASED,
        default_pension_scheme=PensionScheme.AFP,
        default_site="Ica",
    )

    record = enrich(row, source_file="marzo.xlsx", report_name="marzo", month="MARZO", settings=settings)

    assert record.occupation == "Supervisora"
    assert record.monthly_salary == Decimal("2000")
    assert record.daily_salary == Decimal("40")
    assert record.site == "Lima"
    assert record.business_line == "Agricola"
    assert record.payroll_type == PayrollType.FEE_BASED
    assert record.pension_scheme == PensionScheme.AFP


def test_enrich_falls_back_to_file_and_settings():
    emp = _employee(1, "40123456", "ANA PEREZ", occupation="")
    row = ValidatedRow(raw=_raw(0, "40123456", "ANA PEREZ"), employee=emp)

    record = enrich(row, source_file="f.xlsx", report_name="f", month="SIN MES", settings=PeriodSettings(default_site="Ica"))

    assert record.occupation == "Ayudante"
    assert record.monthly_salary == Decimal("1200")
    assert record.site == "Ica"
