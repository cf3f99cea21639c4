from datetime import date

import pytest

from tracker.currency import (
    CURRENCIES,
    DEFAULT_RATES,
    ExchangeRates,
    InvalidRateTableError,
    UnknownCurrencyError,
    convert,
    convert_expenses,
    currency_info,
    format_amount,
)
from tracker.domain import Category, Expense


def test_convert_same_currency_is_exact_identity():
    for info in CURRENCIES:
        for x in (0, 1, 0.1, 123.456, -42.5, 1e12):
            assert convert(x, info.code, info.code) == x


def test_convert_through_reference_currency():
    assert convert(100, "USD", "EUR") == pytest.approx(92.0)
    assert convert(92, "EUR", "USD") == pytest.approx(100.0)
    # 100 EUR -> USD -> GBP
    assert convert(100, "EUR", "GBP") == pytest.approx(100 / 0.92 * 0.79)


def test_round_trip_is_approximately_identity():
    codes = [c.code for c in CURRENCIES]
    for a in codes:
        for b in codes:
            there = convert(1234.56, a, b)
            assert convert(there, b, a) == pytest.approx(1234.56)


def test_unknown_currency_fails_fast():
    with pytest.raises(UnknownCurrencyError):
        convert(10, "USD", "XYZ")
    with pytest.raises(KeyError):
        convert(10, "XYZ", "USD")


def test_injected_rate_table():
    rates = ExchangeRates({"EUR": 1, "USD": 1.1}, reference="EUR")
    assert convert(10, "EUR", "USD", rates) == pytest.approx(11.0)
    assert rates.codes() == ("EUR", "USD")
    with pytest.raises(UnknownCurrencyError):
        rates.convert(10, "EUR", "GBP")


def test_rate_table_requires_unit_reference():
    with pytest.raises(InvalidRateTableError):
        ExchangeRates({"USD": 1.01, "EUR": 0.92})
    with pytest.raises(InvalidRateTableError):
        ExchangeRates({"USD": 1, "EUR": 0})


def test_rate_table_is_read_only():
    with pytest.raises(TypeError):
        DEFAULT_RATES.rates["USD"] = 2


def test_default_table_covers_all_currencies():
    assert DEFAULT_RATES.rate("USD") == 1
    assert set(DEFAULT_RATES.codes()) == {c.code for c in CURRENCIES}


def test_currency_info_lookup():
    info = currency_info("INR")
    assert info.symbol == "₹"
    assert info.locale == "en-IN"
    with pytest.raises(UnknownCurrencyError):
        currency_info("ABC")


def test_format_amount_uses_locale_conventions():
    assert format_amount(1234.5, "USD") == "$1,234.50"

    euro = format_amount(1234.5, "EUR")
    assert "1.234,50" in euro
    assert "€" in euro


def test_format_amount_without_fraction_digits():
    yen = format_amount(1234.6, "JPY")
    assert "1,235" in yen
    assert "." not in yen

    won = format_amount(1234.6, "KRW")
    assert "1,235" in won
    assert "₩" in won
    assert "." not in won


def test_format_amount_symbol_after_number():
    krona = format_amount(1234.5, "SEK")
    # Swedish groups with a non-breaking space
    normalized = krona.replace("\u00a0", " ").replace("\u202f", " ")
    assert normalized.startswith("1 234,50")
    assert normalized.endswith("kr")


def test_convert_expenses_keeps_records_and_converts_amounts():
    expenses = (
        Expense("e1", date(2025, 1, 1), Category.FOOD, 100.0),
        Expense("e2", date(2025, 1, 2), Category.OTHER, 50.0),
    )
    out = convert_expenses(expenses, "USD", "EUR")
    assert [e.id for e in out] == ["e1", "e2"]
    assert out[0].amount == pytest.approx(92.0)
    assert out[1].amount == pytest.approx(46.0)
    assert expenses[0].amount == 100.0

    assert convert_expenses(expenses, "USD", "USD") == expenses
