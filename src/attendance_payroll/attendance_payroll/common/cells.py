"""Lenient coercion of spreadsheet cell values.

Cells come from pandas/openpyxl and can be str, int, float (including NaN),
Decimal, datetime or None. Failures never raise: numbers default to 0 and
text defaults to "".
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def to_text(value: Any) -> str:
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        # Codes and DNIs typed as numbers come back as 1234.0
        return str(int(value))
    return str(value).strip()


def to_decimal(value: Any) -> Decimal:
    if is_blank(value) or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isinf(value):
            return ZERO
        return Decimal(str(value))
    text = str(value).strip().replace(",", "")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return ZERO
    return amount if amount.is_finite() else ZERO
