from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, normalize_mysql_decimal
from .model import Employee, EmployeeInput
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, national_id, full_name, occupation, salary, site, plant,
    employer, business_line, hire_date, is_active, phone, email
"""


def _to_employee(row: dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        national_id=row["national_id"],
        full_name=row["full_name"],
        occupation=row.get("occupation") or "",
        salary=normalize_mysql_decimal(row.get("salary")),
        site=row.get("site") or "",
        plant=row.get("plant") or "",
        employer=row.get("employer") or "",
        business_line=row.get("business_line") or "",
        hire_date=normalize_mysql_date(row.get("hire_date")),
        is_active=bool(row.get("is_active", True)),
        phone=row.get("phone") or "",
        email=row.get("email") or "",
    )


def _params(data: EmployeeInput) -> tuple:
    return (
        data.national_id,
        data.full_name,
        data.occupation,
        data.salary,
        data.site,
        data.plant,
        data.employer,
        data.business_line,
        data.hire_date,
        1 if data.is_active else 0,
        data.phone,
        data.email,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def find_by_national_id(self, national_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE national_id=%s
                ORDER BY is_active DESC, employee_id ASC
                """,
                (national_id,),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def search_by_name(self, tokens: Sequence[str]) -> Sequence[Employee]:
        if not tokens:
            return []
        where = " AND ".join("LOWER(full_name) LIKE %s" for _ in tokens)
        params = tuple(f"%{t.lower()}%" for t in tokens)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE {where}
                ORDER BY is_active DESC, employee_id ASC
                """,
                params,
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY full_name ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, data: EmployeeInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(national_id, full_name, occupation, salary, site, plant,
                                      employer, business_line, hire_date, is_active, phone, email)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _params(data),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, data: EmployeeInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET national_id=%s, full_name=%s, occupation=%s, salary=%s, site=%s, plant=%s,
                    employer=%s, business_line=%s, hire_date=%s, is_active=%s, phone=%s, email=%s
                WHERE employee_id=%s
                """,
                _params(data) + (employee_id,),
            )
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (employee_id,))
            return cur.rowcount > 0

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s WHERE employee_id=%s",
                (1 if is_active else 0, employee_id),
            )
            return cur.rowcount > 0
