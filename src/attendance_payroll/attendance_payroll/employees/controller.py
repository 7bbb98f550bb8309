from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from flask import Flask, request, send_file

from ..common.cells import to_decimal
from ..common.http import as_amount, fail, json_api, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Employee, EmployeeInput

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _employee_json(e: Employee) -> dict[str, Any]:
    data = asdict(e)
    data["salary"] = as_amount(e.salary)
    data["hire_date"] = e.hire_date.isoformat() if e.hire_date else None
    return data


def _parse_date(value: Any):
    if not value:
        return None
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Fecha de ingreso no válida (AAAA-MM-DD)") from None


def _input_from_json(payload: dict[str, Any]) -> EmployeeInput:
    return EmployeeInput(
        national_id=str(payload.get("national_id") or ""),
        full_name=str(payload.get("full_name") or ""),
        occupation=str(payload.get("occupation") or ""),
        salary=to_decimal(payload.get("salary")),
        site=str(payload.get("site") or ""),
        plant=str(payload.get("plant") or ""),
        employer=str(payload.get("employer") or ""),
        business_line=str(payload.get("business_line") or ""),
        hire_date=_parse_date(payload.get("hire_date")),
        is_active=bool(payload.get("is_active", True)),
        phone=str(payload.get("phone") or ""),
        email=str(payload.get("email") or ""),
    )


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @json_api
    def employees_list():
        employees = service.search(request.args.get("q", ""), field=request.args.get("field", "all"))
        return ok({"employees": [_employee_json(e) for e in employees]})

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @json_api
    def employees_create():
        payload = request.get_json(silent=True) or {}
        employee_id = service.create(_input_from_json(payload))
        return ok(_employee_json(service.get(employee_id)), message="Empleado registrado", status=201)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @json_api
    def employees_get(employee_id: int):
        return ok(_employee_json(service.get(employee_id)))

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @json_api
    def employees_update(employee_id: int):
        payload = request.get_json(silent=True) or {}
        service.update(employee_id, _input_from_json(payload))
        return ok(_employee_json(service.get(employee_id)), message="Empleado actualizado")

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @json_api
    def employees_delete(employee_id: int):
        service.delete(employee_id)
        return ok(message="Empleado eliminado")

    @app.route("/api/employees/<int:employee_id>/active", methods=["PUT"], endpoint="employees_set_active")
    @json_api
    def employees_set_active(employee_id: int):
        payload = request.get_json(silent=True) or {}
        service.set_active(employee_id, is_active=bool(payload.get("is_active")))
        return ok(_employee_json(service.get(employee_id)))

    @app.route("/api/employees/import", methods=["POST"], endpoint="employees_import")
    @json_api
    def employees_import():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return fail("Seleccione un archivo", 400)
        result = service.import_sheet(upload.read(), upload.filename)
        return ok(asdict(result), message=f"{result.inserted} nuevos, {result.updated} actualizados")

    @app.route("/api/employees/export", methods=["GET"], endpoint="employees_export")
    @json_api
    def employees_export():
        employees = service.search(request.args.get("q", ""), field=request.args.get("field", "all"))
        return send_file(
            service.export_sheet(employees),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=service.export_file_name(date.today()),
        )
