from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime
from io import BytesIO
from typing import Any, Optional, Sequence

import pandas as pd

from ..common.cells import is_blank, to_decimal, to_text
from ..common.spreadsheets import read_table
from ..common.validators import require_non_empty, require_non_negative_amount
from ..core.exceptions import NotFoundError, ValidationError
from .model import Employee, EmployeeInput
from .repository import EmployeeRepository

_logger = logging.getLogger(__name__)

# Spreadsheet column -> EmployeeInput field
SHEET_COLUMNS = {
    "DNI": "national_id",
    "Nombre": "full_name",
    "Ocupación": "occupation",
    "Salario": "salary",
    "Fecha Ingreso": "hire_date",
    "Activo": "is_active",
    "Sede": "site",
    "Planta": "plant",
    "Empleador": "employer",
    "Rubro": "business_line",
    "Celular": "phone",
    "Correo": "email",
}

SEARCHABLE_FIELDS = {"national_id", "full_name", "occupation", "site", "plant", "email", "employer", "business_line"}


@dataclass(frozen=True)
class EmployeeImportResult:
    inserted: int
    updated: int
    skipped: int


def _parse_date(value: Any) -> Optional[date]:
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


class EmployeeService:
    """Use cases of the employee master list (padrón de personal)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def _clean(self, data: EmployeeInput) -> EmployeeInput:
        return EmployeeInput(
            national_id=require_non_empty(data.national_id, "DNI"),
            full_name=require_non_empty(data.full_name, "Nombre"),
            occupation=require_non_empty(data.occupation, "Ocupación"),
            salary=require_non_negative_amount(data.salary, "Salario"),
            site=(data.site or "").strip(),
            plant=(data.plant or "").strip(),
            employer=(data.employer or "").strip(),
            business_line=(data.business_line or "").strip(),
            hire_date=data.hire_date,
            is_active=bool(data.is_active),
            phone=(data.phone or "").strip(),
            email=(data.email or "").strip(),
        )

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Empleado no existe")
        return employee

    def create(self, data: EmployeeInput) -> int:
        clean = self._clean(data)
        if self._employees.find_by_national_id(clean.national_id):
            raise ValidationError(f"Ya existe un empleado con DNI {clean.national_id}")
        return self._employees.create(clean)

    def update(self, employee_id: int, data: EmployeeInput) -> None:
        self.get(employee_id)
        clean = self._clean(data)
        clash = [e for e in self._employees.find_by_national_id(clean.national_id) if e.employee_id != employee_id]
        if clash:
            raise ValidationError(f"Ya existe un empleado con DNI {clean.national_id}")
        self._employees.update(employee_id, clean)

    def delete(self, employee_id: int) -> None:
        if not self._employees.delete_by_id(employee_id):
            raise NotFoundError("Empleado no existe")

    def set_active(self, employee_id: int, *, is_active: bool) -> None:
        if not self._employees.set_active(employee_id, is_active=is_active):
            raise NotFoundError("Empleado no existe")

    def search(self, term: str = "", *, field: str = "all") -> list[Employee]:
        """Case-insensitive substring search over every field, or a single one."""
        employees = list(self._employees.list_all())
        term = (term or "").strip().lower()
        if not term:
            return employees
        if field != "all" and field not in SEARCHABLE_FIELDS:
            raise ValidationError(f"Campo de búsqueda no válido: {field}")

        def matches(e: Employee) -> bool:
            values = asdict(e).values() if field == "all" else [getattr(e, field)]
            return any(term in str(v).lower() for v in values if v is not None)

        return [e for e in employees if matches(e)]

    # -- spreadsheets -----------------------------------------------------

    def _row_to_input(self, row: dict[str, Any]) -> EmployeeInput:
        return EmployeeInput(
            national_id=to_text(row.get("DNI")),
            full_name=to_text(row.get("Nombre")),
            occupation=to_text(row.get("Ocupación")),
            salary=to_decimal(row.get("Salario")),
            hire_date=_parse_date(row.get("Fecha Ingreso")),
            is_active=to_text(row.get("Activo")).lower() in {"sí", "si"},
            site=to_text(row.get("Sede")),
            plant=to_text(row.get("Planta")),
            employer=to_text(row.get("Empleador")),
            business_line=to_text(row.get("Rubro")),
            phone=to_text(row.get("Celular")),
            email=to_text(row.get("Correo")),
        )

    def import_sheet(self, content: bytes, file_name: str) -> EmployeeImportResult:
        """Upsert employees by DNI. Rows without DNI, Nombre or Ocupación are skipped."""
        df = read_table(content, file_name, header=0)
        df.columns = [str(c).strip() for c in df.columns]

        inserted = updated = skipped = 0
        for row in df.to_dict(orient="records"):
            data = self._row_to_input(row)
            if not (data.national_id and data.full_name and data.occupation):
                skipped += 1
                continue
            try:
                clean = self._clean(data)
            except ValidationError as e:
                _logger.info("skipping employee row %s: %s", data.national_id, e)
                skipped += 1
                continue

            existing = self._employees.find_by_national_id(clean.national_id)
            if existing:
                self._employees.update(existing[0].employee_id, clean)
                updated += 1
            else:
                self._employees.create(clean)
                inserted += 1

        _logger.info("employee import %s: inserted=%s updated=%s skipped=%s", file_name, inserted, updated, skipped)
        return EmployeeImportResult(inserted=inserted, updated=updated, skipped=skipped)

    def export_sheet(self, employees: Optional[Sequence[Employee]] = None) -> BytesIO:
        employees = list(self._employees.list_all()) if employees is None else list(employees)
        data = []
        for e in employees:
            data.append(
                {
                    "DNI": e.national_id,
                    "Nombre": e.full_name,
                    "Ocupación": e.occupation,
                    "Salario": float(e.salary),
                    "Fecha Ingreso": e.hire_date.strftime("%Y-%m-%d") if e.hire_date else "",
                    "Activo": "Sí" if e.is_active else "No",
                    "Sede": e.site,
                    "Planta": e.plant,
                    "Empleador": e.employer,
                    "Rubro": e.business_line,
                    "Celular": e.phone,
                    "Correo": e.email,
                }
            )
        df = pd.DataFrame(data, columns=list(SHEET_COLUMNS))

        output = BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Personal")
        output.seek(0)
        return output

    @staticmethod
    def export_file_name(today: date) -> str:
        return f"Personal_{today.strftime('%Y%m%d')}.xlsx"
