import math

import pytest

from cartola.amounts import parse_amount


def _format_es_cl(value: float) -> str:
    """Format like Chilean bank exports: dot thousands, comma decimals."""

    whole, _, frac = f"{abs(value):,.2f}".partition(".")
    text = whole.replace(",", ".")
    if frac != "00":
        text = f"{text},{frac}"
    return f"-{text}" if value < 0 else text


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("$ 1.234.567", 1234567.0),
        ("$ -5.990", -5990.0),
        ("10.000", 10000.0),
        ("12.50", 12.5),
        ("12,5", 12.5),
        ("1,234", 1234.0),
        ("1.234,", 1234.0),
        ("CLP 3200", 3200.0),
        ("", 0.0),
        ("abc", 0.0),
        ("-", 0.0),
    ],
)
def test_parse_amount_string_shapes(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


def test_parse_amount_numeric_and_non_string_inputs():
    assert parse_amount(5990) == 5990.0
    assert parse_amount(-12.5) == -12.5
    assert parse_amount(math.nan) == 0.0
    assert parse_amount(None) == 0.0
    assert parse_amount(True) == 0.0
    assert parse_amount(["1"]) == 0.0


@pytest.mark.parametrize("value", [5990, 1234.56, 1500000, -87.5, -1234567.89, 0.99])
def test_es_cl_formatted_values_round_trip(value):
    text = _format_es_cl(value)
    assert parse_amount(text) == pytest.approx(value)


def test_sign_handling_differs_between_decimal_comma_and_plain_branches():
    # A stray second minus survives the decimal-comma branch (value re-signed
    # as parsed) but not the plain-digit branch (absolute value re-signed).
    assert parse_amount("--5,5") == pytest.approx(5.5)
    assert parse_amount("--5") == pytest.approx(-5.0)
    # Single leading minus: both branches agree.
    assert parse_amount("-5,5") == pytest.approx(-5.5)
    assert parse_amount("-5") == pytest.approx(-5.0)
