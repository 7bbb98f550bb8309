from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Sequence

from ..attendance.service import ComputedRecord
from ..core.constants import GROUP_PALETTE, NO_BUSINESS_LINE, NO_OCCUPATION

ZERO = Decimal("0")


@dataclass(frozen=True)
class GroupSummary:
    key: str
    count: int
    sum_monthly_salary: Decimal
    sum_deductions: Decimal
    sum_bonuses: Decimal
    sum_net_pay: Decimal
    color: str


@dataclass(frozen=True)
class Groupings:
    by_report: list[GroupSummary]
    by_business_line: list[GroupSummary]
    by_occupation: list[GroupSummary]


@dataclass(frozen=True)
class PayrollTotals:
    count: int
    monthly_salary: Decimal
    deductions: Decimal
    bonuses: Decimal
    net_pay: Decimal


def totals(rows: Sequence[ComputedRecord]) -> PayrollTotals:
    return PayrollTotals(
        count=len(rows),
        monthly_salary=sum((r.record.monthly_salary for r in rows), ZERO),
        deductions=sum((r.financials.total_deductions for r in rows), ZERO),
        bonuses=sum((r.financials.total_bonuses for r in rows), ZERO),
        net_pay=sum((r.financials.net_pay for r in rows), ZERO),
    )


def group_by(rows: Sequence[ComputedRecord], key_of: Callable[[ComputedRecord], str]) -> list[GroupSummary]:
    """Group rows by key, sorted by net pay (highest first).

    Colours follow the order in which keys are first seen, cycling the palette.
    """
    buckets: dict[str, list[ComputedRecord]] = {}
    for row in rows:
        buckets.setdefault(key_of(row), []).append(row)

    groups = []
    for index, (key, members) in enumerate(buckets.items()):
        t = totals(members)
        groups.append(
            GroupSummary(
                key=key,
                count=t.count,
                sum_monthly_salary=t.monthly_salary,
                sum_deductions=t.deductions,
                sum_bonuses=t.bonuses,
                sum_net_pay=t.net_pay,
                color=GROUP_PALETTE[index % len(GROUP_PALETTE)],
            )
        )
    groups.sort(key=lambda g: g.sum_net_pay, reverse=True)
    return groups


def _report_key(row: ComputedRecord) -> str:
    return row.record.report_name


def _business_line_key(row: ComputedRecord) -> str:
    return row.record.business_line.strip() or NO_BUSINESS_LINE


def _occupation_key(row: ComputedRecord) -> str:
    return row.record.occupation.strip() or NO_OCCUPATION


def build_groupings(rows: Sequence[ComputedRecord]) -> Groupings:
    return Groupings(
        by_report=group_by(rows, _report_key),
        by_business_line=group_by(rows, _business_line_key),
        by_occupation=group_by(rows, _occupation_key),
    )
