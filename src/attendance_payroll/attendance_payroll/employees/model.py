from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Entidad de dominio: empleado del padrón maestro.

    Note: Plain data object (no DB access code here).
    """

    employee_id: int
    national_id: str
    full_name: str
    occupation: str
    salary: Decimal = Decimal("0")
    site: str = ""
    plant: str = ""
    employer: str = ""
    business_line: str = ""
    hire_date: Optional[date] = None
    is_active: bool = True
    phone: str = ""
    email: str = ""


@dataclass(frozen=True)
class EmployeeInput:
    """Fields accepted when creating or updating an employee."""

    national_id: str
    full_name: str
    occupation: str
    salary: Decimal = Decimal("0")
    site: str = ""
    plant: str = ""
    employer: str = ""
    business_line: str = ""
    hire_date: Optional[date] = None
    is_active: bool = True
    phone: str = ""
    email: str = ""
