from __future__ import annotations

from enum import Enum


class AttendanceCode(str, Enum):
    """Códigos de asistencia por día (dos letras)."""

    PU = "PU"
    TA = "TA"
    FA = "FA"
    NL = "NL"
    AS = "AS"
    DM = "DM"
    PE = "PE"
    VA = "VA"
    DE = "DE"
    JU = "JU"


class AttendanceCategory(str, Enum):
    """How a code counts towards the per-employee tallies."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EXTRA_DAY = "EXTRA_DAY"
    NEUTRAL = "NEUTRAL"


class PayrollType(str, Enum):
    """Fee-based (recibo por honorarios) or regular payroll."""

    FEE_BASED = "RXH"
    PAYROLL = "PLANILLA"


class PensionScheme(str, Enum):
    """Pension withholding tier; only applies to regular payroll.

    AFP is scheme A (11.7%), ONP is scheme B (13%).
    """

    NONE = "NINGUNO"
    AFP = "AFP"
    ONP = "ONP"


class RejectionKind(str, Enum):
    VALIDATION = "validation"
    LOOKUP = "lookup"
