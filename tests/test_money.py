from decimal import Decimal

import pytest

from offsite_payments.integrations.currencies import CURRENCIES
from offsite_payments.integrations.money import (
    alpha_currency_code,
    cents_to_amount,
    currency_exponent,
    format_amount,
    numeric_currency_code,
    parse_amount,
    to_decimal,
    validate_amount,
    validate_currency_code,
)


class TestMoney:

    @pytest.mark.parametrize("value,expected", [
        ("157.005", "157.01"),
        (Decimal("10"), "10.00"),
        (157, "157.00"),
        ("0.004", "0.00"),
    ])
    def test_format_amount(self, value, expected):
        assert format_amount(value) == expected

    def test_format_amount_places(self):
        assert format_amount("1000", 0) == "1000"
        assert format_amount("1.2345", 3) == "1.235"

    def test_format_amount_rejects_garbage(self):
        with pytest.raises(ValueError):
            format_amount("ten")

    @pytest.mark.parametrize("value", ["Infinity", "-Infinity", "NaN", "sNaN", Decimal("Infinity")])
    def test_non_finite_amounts_rejected(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)
        with pytest.raises(ValueError):
            format_amount(value)
        assert parse_amount(str(value)) is None

    def test_cents_to_amount(self):
        assert cents_to_amount(4995) == Decimal("49.95")
        assert cents_to_amount(0) == Decimal("0.00")
        assert cents_to_amount(Decimal("1050")) == Decimal("10.50")

    def test_cents_to_amount_exponent(self):
        assert cents_to_amount(1000, 0) == Decimal("1000")
        assert cents_to_amount(1500, 3) == Decimal("1.500")

    @pytest.mark.parametrize("cents", ["4995", -1, 49.95, Decimal("10.50"), Decimal("NaN"), True])
    def test_cents_to_amount_rejects(self, cents):
        with pytest.raises(ValueError):
            cents_to_amount(cents)

    def test_parse_amount(self):
        assert parse_amount("49.95") == Decimal("49.95")
        assert parse_amount("") is None
        assert parse_amount(None) is None
        assert parse_amount("n/a") is None

    def test_validate_currency_code(self):
        assert validate_currency_code("USD") is True
        assert validate_currency_code("usd") is False  # lowercase
        assert validate_currency_code("US") is False   # too short
        assert validate_currency_code(840) is False    # not string

    def test_validate_amount(self):
        assert validate_amount(Decimal("0.01")) is True
        assert validate_amount(Decimal("0")) is False
        assert validate_amount(Decimal("-1")) is False
        assert validate_amount(10.0) is False


class TestCurrencies:

    def test_numeric_currency_code(self):
        assert numeric_currency_code("HKD") == "344"
        assert numeric_currency_code("usd") == "840"
        assert numeric_currency_code("ALL") == "008"
        with pytest.raises(ValueError):
            numeric_currency_code("ZZZ")

    def test_alpha_currency_code(self):
        assert alpha_currency_code("344") == "HKD"
        assert alpha_currency_code("36") == "AUD"
        assert alpha_currency_code("000") is None
        assert alpha_currency_code(None) is None

    @pytest.mark.parametrize("code,exponent", [
        ("USD", 2),
        ("JPY", 0),
        ("KRW", 0),
        ("KWD", 3),
        ("TND", 3),
        ("ZZZ", 2),
        (None, 2),
    ])
    def test_currency_exponent(self, code, exponent):
        assert currency_exponent(code) == exponent

    def test_table_is_consistent(self):
        numerics = [currency.numeric for currency in CURRENCIES.values()]

        assert len(set(numerics)) == len(numerics)
        for code, currency in CURRENCIES.items():
            assert validate_currency_code(code)
            assert len(currency.numeric) == 3 and currency.numeric.isdigit()
            assert currency.exponent in (0, 2, 3)
