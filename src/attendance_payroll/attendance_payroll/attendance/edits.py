"""Pure record transitions.

Every function returns a new AttendanceRecord; callers swap it into the
session collection. Counters are kept in step with the day mapping.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Mapping

from ..core.enums import AttendanceCategory, AttendanceCode, PayrollType, PensionScheme
from .codes import category_of
from .model import AttendanceCounts, AttendanceRecord

_FIELD_BY_CATEGORY = {
    AttendanceCategory.ON_TIME: "on_time",
    AttendanceCategory.LATE: "late",
    AttendanceCategory.ABSENT: "absent",
    AttendanceCategory.EXTRA_DAY: "extra_days",
}


def recount(days: Mapping[int, AttendanceCode]) -> AttendanceCounts:
    """Full recount of a day mapping."""
    totals = {name: 0 for name in _FIELD_BY_CATEGORY.values()}
    for code in days.values():
        name = _FIELD_BY_CATEGORY.get(category_of(code))
        if name:
            totals[name] += 1
    return AttendanceCounts(**totals)


def _shift(counts: AttendanceCounts, category: AttendanceCategory, delta: int) -> AttendanceCounts:
    name = _FIELD_BY_CATEGORY.get(category)
    if not name:
        return counts
    return replace(counts, **{name: getattr(counts, name) + delta})


def apply_day_edit(record: AttendanceRecord, day: int, new_code: AttendanceCode) -> AttendanceRecord:
    """Replace one day's code, adjusting only the two affected counters."""
    old_code = record.code_for(day)
    counts = _shift(record.counts, category_of(old_code), -1)
    counts = _shift(counts, category_of(new_code), +1)

    days = dict(record.days)
    days[day] = new_code
    return replace(record, days=days, counts=counts)


def with_payroll_type(record: AttendanceRecord, payroll_type: PayrollType) -> AttendanceRecord:
    return replace(record, payroll_type=payroll_type)


def with_pension_scheme(record: AttendanceRecord, scheme: PensionScheme) -> AttendanceRecord:
    return replace(record, pension_scheme=scheme)


def with_bonus(record: AttendanceRecord, bonus: Decimal) -> AttendanceRecord:
    return replace(record, bonus_extra=bonus)


def with_site(record: AttendanceRecord, site: str) -> AttendanceRecord:
    return replace(record, site=site)
