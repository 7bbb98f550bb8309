from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .attendance.repository import InMemoryAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.validation import RowValidator
from .core.constants import (
    DEFAULT_DAYS_IN_PERIOD,
    DEFAULT_LATE_PENALTY,
    DEFAULT_LOOKUP_TIMEOUT_SECONDS,
    DEFAULT_LOOKUP_WORKERS,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.directory import RepositoryEmployeeDirectory
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.model import PeriodSettings


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: InMemoryAttendanceRepository

    employee_service: EmployeeService
    attendance_service: AttendanceService


def build_container(
    *,
    db_config: dict,
    late_penalty: Any = DEFAULT_LATE_PENALTY,
    days_in_period: int = DEFAULT_DAYS_IN_PERIOD,
    lookup_timeout_seconds: float = DEFAULT_LOOKUP_TIMEOUT_SECONDS,
    lookup_workers: int = DEFAULT_LOOKUP_WORKERS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = InMemoryAttendanceRepository()

    employee_service = EmployeeService(employees_repo)
    validator = RowValidator(
        RepositoryEmployeeDirectory(employees_repo),
        timeout_seconds=lookup_timeout_seconds,
        max_workers=lookup_workers,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        validator,
        calculator=StandardPayrollCalculator(),
        settings=PeriodSettings(days_in_period=int(days_in_period), late_penalty=Decimal(str(late_penalty))),
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        employee_service=employee_service,
        attendance_service=attendance_service,
    )
