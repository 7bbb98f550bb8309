from decimal import Decimal

import pytest

from src.attendance_payroll.attendance_payroll.common.cells import is_blank, to_decimal, to_text


@pytest.mark.parametrize("value", [None, float("nan"), "", "   "])
def test_is_blank(value):
    assert is_blank(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1500, Decimal("1500")),
        (1500.5, Decimal("1500.5")),
        ("1,234.56", Decimal("1234.56")),
        (" 80 ", Decimal("80")),
        ("abc", Decimal("0")),
        (None, Decimal("0")),
        (float("nan"), Decimal("0")),
        (True, Decimal("0")),
    ],
)
def test_to_decimal(value, expected):
    assert to_decimal(value) == expected


def test_to_text_normalises_integral_floats():
    assert to_text(40123456.0) == "40123456"
    assert to_text(" E01 ") == "E01"
    assert to_text(None) == ""
