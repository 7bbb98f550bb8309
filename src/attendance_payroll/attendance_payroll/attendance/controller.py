from __future__ import annotations

from dataclasses import asdict
from typing import Any

from flask import Flask, request, send_file

from ..common.datetime_utils import now_local
from ..common.http import as_amount, fail, json_api, ok
from ..container import Container
from ..core.constants import ALL_MONTHS
from ..reports.aggregation import GroupSummary, PayrollTotals, build_groupings, totals
from ..reports.export import build_export
from ..reports.xlsx_writer import write_xlsx
from .model import RecordKey
from .service import ComputedRecord, IngestionResult, RecordFilter

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _record_json(row: ComputedRecord) -> dict[str, Any]:
    r, f = row.record, row.financials
    return {
        "source_file": r.source_file,
        "employee_code": r.employee_code,
        "national_id": r.national_id,
        "full_name": r.full_name,
        "occupation": r.occupation,
        "monthly_salary": as_amount(r.monthly_salary),
        "daily_salary": as_amount(r.daily_salary),
        "days": {str(day): code.value for day, code in sorted(r.days.items())},
        "counts": asdict(r.counts),
        "report_name": r.report_name,
        "month": r.month,
        "payroll_type": r.payroll_type.value,
        "pension_scheme": r.pension_scheme.value,
        "bonus_extra": as_amount(r.bonus_extra),
        "site": r.site,
        "employer": r.employer,
        "business_line": r.business_line,
        "attendance_deduction": as_amount(f.attendance_deduction),
        "pension_deduction": as_amount(f.pension_deduction),
        "extra_days_value": as_amount(f.extra_days_value),
        "net_pay": as_amount(f.net_pay),
    }


def _ingestion_json(result: IngestionResult) -> dict[str, Any]:
    return {
        "file_name": result.file_name,
        "report_name": result.report_name,
        "period_label": result.period_label,
        "days_in_period": result.days_in_period,
        "accepted": result.accepted_count,
        "rejected": result.rejected_count,
        "discarded": result.discarded,
        "errors": {
            key: {"row": e.position + 1, "full_name": e.full_name, "kind": e.kind.value, "reason": e.reason}
            for key, e in result.report.errors.items()
        },
    }


def _group_json(group: GroupSummary) -> dict[str, Any]:
    return {
        "key": group.key,
        "count": group.count,
        "sum_monthly_salary": as_amount(group.sum_monthly_salary),
        "sum_deductions": as_amount(group.sum_deductions),
        "sum_bonuses": as_amount(group.sum_bonuses),
        "sum_net_pay": as_amount(group.sum_net_pay),
        "color": group.color,
    }


def _totals_json(t: PayrollTotals) -> dict[str, Any]:
    return {
        "count": t.count,
        "monthly_salary": as_amount(t.monthly_salary),
        "deductions": as_amount(t.deductions),
        "bonuses": as_amount(t.bonuses),
        "net_pay": as_amount(t.net_pay),
    }


def _filter_from_args() -> RecordFilter:
    return RecordFilter(
        search=request.args.get("search", ""),
        month=request.args.get("month", ALL_MONTHS) or ALL_MONTHS,
        report_name=request.args.get("report", ""),
    )


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/files", methods=["POST"], endpoint="attendance_upload")
    @json_api
    def attendance_upload():
        uploads = request.files.getlist("files")
        if not uploads:
            return fail("Seleccione al menos un archivo", 400)
        batch = service.ingest_many((u.filename or "", u.read()) for u in uploads)
        return ok(
            {
                "accepted": batch.accepted_count,
                "rejected": batch.rejected_count,
                "files": [_ingestion_json(r) for r in batch.results],
                "failures": [{"file_name": f.file_name, "message": f.message} for f in batch.failures],
            },
            message=batch.summary_message(),
        )

    @app.route("/api/attendance/files/<file_name>", methods=["DELETE"], endpoint="attendance_remove_file")
    @json_api
    def attendance_remove_file(file_name: str):
        removed = service.remove_source(file_name)
        return ok({"removed": removed})

    @app.route("/api/attendance/files", methods=["GET"], endpoint="attendance_files")
    @json_api
    def attendance_files():
        return ok({"files": list(service.sources()), "months": service.available_months()})

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    @json_api
    def attendance_records():
        rows = service.computed_rows(_filter_from_args())
        return ok({"records": [_record_json(r) for r in rows], "total_net_pay": as_amount(totals(rows).net_pay)})

    @app.route(
        "/api/attendance/records/<file_name>/<employee_code>/days/<int:day>",
        methods=["PATCH"],
        endpoint="attendance_edit_day",
    )
    @json_api
    def attendance_edit_day(file_name: str, employee_code: str, day: int):
        payload = request.get_json(silent=True) or {}
        row = service.edit_day(RecordKey(file_name, employee_code), day, payload.get("code"))
        return ok(_record_json(row))

    @app.route("/api/attendance/records/<file_name>/<employee_code>", methods=["PATCH"], endpoint="attendance_edit")
    @json_api
    def attendance_edit(file_name: str, employee_code: str):
        key = RecordKey(file_name, employee_code)
        payload = request.get_json(silent=True) or {}
        row = service.update_fields(
            key,
            payroll_type=payload.get("payroll_type"),
            pension_scheme=payload.get("pension_scheme"),
            bonus=payload.get("bonus"),
            site=payload.get("site"),
        )
        return ok(_record_json(row))

    @app.route("/api/attendance/settings", methods=["GET"], endpoint="attendance_settings")
    @json_api
    def attendance_settings():
        s = service.settings
        return ok(
            {
                "days_in_period": s.days_in_period,
                "late_penalty": as_amount(s.late_penalty),
                "default_payroll_type": s.default_payroll_type.value,
                "default_pension_scheme": s.default_pension_scheme.value,
                "default_site": s.default_site,
            }
        )

    @app.route("/api/attendance/settings", methods=["PUT"], endpoint="attendance_update_settings")
    @json_api
    def attendance_update_settings():
        payload = request.get_json(silent=True) or {}
        service.update_settings(
            late_penalty=payload.get("late_penalty"),
            default_payroll_type=payload.get("default_payroll_type"),
            default_pension_scheme=payload.get("default_pension_scheme"),
            default_site=payload.get("default_site"),
        )
        return attendance_settings()

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @json_api
    def attendance_summary():
        rows = service.computed_rows(_filter_from_args())
        groups = build_groupings(rows)
        return ok(
            {
                "totals": _totals_json(totals(rows)),
                "by_report": [_group_json(g) for g in groups.by_report],
                "by_business_line": [_group_json(g) for g in groups.by_business_line],
                "by_occupation": [_group_json(g) for g in groups.by_occupation],
            }
        )

    @app.route("/api/attendance/export", methods=["GET"], endpoint="attendance_export")
    @json_api
    def attendance_export():
        rows = service.computed_rows(_filter_from_args())
        if not rows:
            return fail("No hay registros para exportar", 404)
        document = build_export(rows, service.settings, now=now_local())
        return send_file(
            write_xlsx(document),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=document.file_name,
        )
