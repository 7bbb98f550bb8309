from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} no es válido")
    return str(value).strip()


def require_non_negative_amount(value: Any, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} debe ser un número") from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field_name} no puede ser negativo")
    return amount


def require_day_in_period(day: Any, days_in_period: int) -> int:
    try:
        value = int(day)
    except (TypeError, ValueError):
        raise ValidationError("El día debe ser un número entero") from None
    if value < 1 or value > days_in_period:
        raise ValidationError(f"El día debe estar entre 1 y {days_in_period}")
    return value
