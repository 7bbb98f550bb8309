"""Row/column content of the consolidated payroll workbook.

The builder only decides what goes in each cell (value, type, style hint);
rendering to a binary file is done by xlsx_writer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence

from ..attendance.codes import LABEL_BY_CODE, code_color
from ..attendance.ingestion import day_header
from ..attendance.service import ComputedRecord
from ..common.datetime_utils import file_timestamp
from ..core.constants import CURRENCY_SYMBOL, EXPORT_FILE_PREFIX
from ..core.enums import AttendanceCode
from ..payroll.model import PeriodSettings
from .aggregation import PayrollTotals, totals

DETAIL_SHEET = "Detalle Asistencias"
SUMMARY_SHEET = "Resumen Pagos"

MONEY_FORMAT = "#,##0.00"
COUNT_FORMAT = "0"


@dataclass(frozen=True)
class CellStyle:
    bold: bool = False
    italic: bool = False
    color: Optional[str] = None
    fill: Optional[str] = None
    size: Optional[int] = None
    align: Optional[str] = None


TITLE = CellStyle(bold=True, size=16, color="1F497D", align="center")
HEADER = CellStyle(bold=True, color="FFFFFF", fill="4F81BD", align="center")
FOOTER = CellStyle(italic=True, color="7F7F7F")
TOTAL = CellStyle(bold=True, color="000000", fill="F2F2F2")
BOLD = CellStyle(bold=True)
ITALIC = CellStyle(italic=True)
RED = CellStyle(color="FF0000")
GREEN = CellStyle(color="00B050")
DARK_RED = CellStyle(color="C00000")


@dataclass(frozen=True)
class Cell:
    value: Any
    kind: str = "s"
    style: Optional[CellStyle] = None
    number_format: Optional[str] = None


@dataclass(frozen=True)
class SheetData:
    title: str
    rows: list[list[Optional[Cell]]]
    column_widths: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class ExportDocument:
    file_name: str
    sheets: list[SheetData]
    totals: PayrollTotals


def format_amount(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def text(value: Any, style: Optional[CellStyle] = None) -> Cell:
    return Cell(value="" if value is None else str(value), kind="s", style=style)


def money(value: Decimal, style: Optional[CellStyle] = None) -> Cell:
    return Cell(value=value, kind="n", style=style, number_format=MONEY_FORMAT)


def count(value: int, style: Optional[CellStyle] = None) -> Cell:
    return Cell(value=int(value), kind="n", style=style, number_format=COUNT_FORMAT)


def _distinct(values: Sequence[str]) -> list[str]:
    seen: list[str] = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return seen


def legend_rows(settings: PeriodSettings) -> list[list[Optional[Cell]]]:
    """Fixed legend; the late line shows the current penalty."""

    def item(code: AttendanceCode, suffix: str = "", style: CellStyle = FOOTER) -> Cell:
        return text(f"{code.value} = {LABEL_BY_CODE[code]}{suffix}", style)

    penalty = f" (-{CURRENCY_SYMBOL}{format_amount(settings.late_penalty)})"
    return [
        [
            item(AttendanceCode.PU), None,
            item(AttendanceCode.TA, penalty, CellStyle(italic=True, color="FF0000")), None,
            item(AttendanceCode.FA, " (-1 día de sueldo)", CellStyle(italic=True, color="C00000")), None,
            item(AttendanceCode.NL),
        ],
        [
            item(AttendanceCode.AS), None,
            item(AttendanceCode.DM), None,
            item(AttendanceCode.PE), None,
            item(AttendanceCode.VA),
        ],
        [
            item(AttendanceCode.DE, " (+1 día de sueldo)"), None,
            item(AttendanceCode.JU),
        ],
    ]


def _detail_sheet(rows: Sequence[ComputedRecord], settings: PeriodSettings, sources: str, months: str) -> SheetData:
    days = settings.days_in_period
    header = [
        "Codigo", "Empleado", "Dni", "Cargo", "Sueldo Mensual", "Sueldo Diario",
        *[day_header(d) for d in range(1, days + 1)],
        "Puntual", "Tardanza", "Faltas", "Dias Extra", "Descuentos", "Desc. Pension",
        "Bonos", "Sueldo Final", "Mes", "Archivo Origen",
    ]

    out: list[list[Optional[Cell]]] = [
        [text("PLANILLA DETALLADA DE ASISTENCIAS", TITLE)],
        [text("Fuente de datos:"), text(sources)],
        [text("Meses:"), text(months)],
        [text("Descuento por tardanza:"), text(f"{CURRENCY_SYMBOL}{format_amount(settings.late_penalty)}")],
        [],
        [text(h, HEADER) for h in header],
    ]

    for row in rows:
        r, f = row.record, row.financials
        day_cells = []
        for d in range(1, days + 1):
            code = r.code_for(d)
            day_cells.append(text(code.value, CellStyle(color=code_color(code))))
        out.append(
            [
                text(r.employee_code),
                text(r.full_name),
                text(r.national_id),
                text(r.occupation),
                money(r.monthly_salary),
                money(r.daily_salary),
                *day_cells,
                count(r.counts.on_time, GREEN),
                count(r.counts.late, RED),
                count(r.counts.absent, DARK_RED),
                count(r.counts.extra_days),
                money(f.attendance_deduction, RED),
                money(f.pension_deduction, RED),
                money(f.total_bonuses),
                money(f.net_pay, BOLD),
                text(r.month),
                text(r.source_file),
            ]
        )

    out.append([])
    out.extend(legend_rows(settings))
    out.append([text(f"Exportado desde: {sources}", ITALIC)])

    widths = [8, 40, 10, 30, 15, 15, *([5] * days), 8, 8, 8, 8, 12, 12, 12, 12, 10, 60]
    return SheetData(title=DETAIL_SHEET, rows=out, column_widths=widths)


def _summary_sheet(
    rows: Sequence[ComputedRecord],
    settings: PeriodSettings,
    sources: str,
    months: str,
    grand: PayrollTotals,
    now: datetime,
) -> SheetData:
    header = ["Empleado", "DNI", "Sueldo Mensual", "Descuentos", "Bonos", "Sueldo Final", "Archivo Origen"]
    out: list[list[Optional[Cell]]] = [
        [text("RESUMEN DE PAGOS", TITLE)],
        [None, text(f"MESES: {months}", BOLD)],
        [None, text(f"Fuente de datos: {sources}", ITALIC)],
        [None, text(f"Descuento por tardanza: {CURRENCY_SYMBOL}{format_amount(settings.late_penalty)}", RED)],
        [],
        [text(h, HEADER) for h in header],
    ]
    for row in rows:
        r, f = row.record, row.financials
        out.append(
            [
                text(r.full_name),
                text(r.national_id),
                money(r.monthly_salary),
                money(f.total_deductions, RED),
                money(f.total_bonuses),
                money(f.net_pay, BOLD),
                text(r.source_file),
            ]
        )
    out.append([])
    out.append(
        [
            text("TOTALES", TOTAL),
            text("", TOTAL),
            money(grand.monthly_salary, TOTAL),
            money(grand.deductions, CellStyle(bold=True, color="FF0000", fill="F2F2F2")),
            money(grand.bonuses, TOTAL),
            money(grand.net_pay, CellStyle(bold=True, color="00B050", fill="F2F2F2")),
            text("", TOTAL),
        ]
    )
    out.append([])
    out.append(
        [
            text(f"Documento generado el: {now.strftime('%d/%m/%Y %H:%M:%S')}", FOOTER),
            None,
            text(f"Fuente: {sources}", FOOTER),
        ]
    )
    return SheetData(title=SUMMARY_SHEET, rows=out, column_widths=[40, 12, 15, 15, 15, 15, 60])


def export_file_name(rows: Sequence[ComputedRecord], now: datetime) -> str:
    reports = _distinct([r.record.report_name for r in rows])
    label = "-".join("_".join(name.split()) for name in reports) or "SIN_DATOS"
    return f"{EXPORT_FILE_PREFIX}_{label}_{file_timestamp(now)}.xlsx"


def build_export(rows: Sequence[ComputedRecord], settings: PeriodSettings, *, now: datetime) -> ExportDocument:
    """Build both sheets from the (already filtered) computed rows.

    Totals are exact sums of the same rows that appear in the sheets;
    rounding happens only in the cell number format.
    """
    sources = ", ".join(_distinct([r.record.source_file for r in rows]))
    months = ", ".join(_distinct([r.record.month for r in rows]))
    grand = totals(rows)
    return ExportDocument(
        file_name=export_file_name(rows, now),
        sheets=[
            _detail_sheet(rows, settings, sources, months),
            _summary_sheet(rows, settings, sources, months, grand, now),
        ],
        totals=grand,
    )
