"""Attendance code vocabulary and its financial meaning."""

from __future__ import annotations

from typing import Any

from ..common.cells import to_text
from ..core.enums import AttendanceCategory, AttendanceCode
from ..core.exceptions import ValidationError

CATEGORY_BY_CODE: dict[AttendanceCode, AttendanceCategory] = {
    AttendanceCode.PU: AttendanceCategory.ON_TIME,
    AttendanceCode.AS: AttendanceCategory.ON_TIME,
    AttendanceCode.TA: AttendanceCategory.LATE,
    AttendanceCode.FA: AttendanceCategory.ABSENT,
    AttendanceCode.DE: AttendanceCategory.EXTRA_DAY,
    AttendanceCode.NL: AttendanceCategory.NEUTRAL,
    AttendanceCode.DM: AttendanceCategory.NEUTRAL,
    AttendanceCode.PE: AttendanceCategory.NEUTRAL,
    AttendanceCode.VA: AttendanceCategory.NEUTRAL,
    AttendanceCode.JU: AttendanceCategory.NEUTRAL,
}

LABEL_BY_CODE: dict[AttendanceCode, str] = {
    AttendanceCode.PU: "Puntual",
    AttendanceCode.TA: "Tardanza",
    AttendanceCode.FA: "Falta",
    AttendanceCode.NL: "No Laborable",
    AttendanceCode.AS: "Asistió",
    AttendanceCode.DM: "Descanso Médico",
    AttendanceCode.PE: "Permiso",
    AttendanceCode.VA: "Vacaciones",
    AttendanceCode.DE: "Día Extra",
    AttendanceCode.JU: "Justificado",
}

# Font colours used for day cells in exported sheets.
COLOR_BY_CODE: dict[AttendanceCode, str] = {
    AttendanceCode.PU: "00B050",
    AttendanceCode.TA: "FF0000",
    AttendanceCode.FA: "C00000",
    AttendanceCode.NL: "7F7F7F",
}
DEFAULT_CODE_COLOR = "000000"


def category_of(code: AttendanceCode) -> AttendanceCategory:
    return CATEGORY_BY_CODE[code]


def parse_code(value: Any) -> AttendanceCode:
    """Lenient parse for imported cells: blank or unknown tokens become NL."""
    token = to_text(value).upper()
    try:
        return AttendanceCode(token)
    except ValueError:
        return AttendanceCode.NL


def require_code(value: Any) -> AttendanceCode:
    """Strict parse for user edits."""
    if isinstance(value, AttendanceCode):
        return value
    token = to_text(value).upper()
    try:
        return AttendanceCode(token)
    except ValueError:
        raise ValidationError(f"Código de asistencia desconocido: {value!r}") from None


def code_color(code: AttendanceCode) -> str:
    return COLOR_BY_CODE.get(code, DEFAULT_CODE_COLOR)
