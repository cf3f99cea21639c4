from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from babel import Locale
from babel.numbers import format_currency

from tracker.domain import CurrencyInfo, Expense


class UnknownCurrencyError(KeyError):
    """Raised for a currency code missing from the rate or metadata table."""


class InvalidRateTableError(ValueError):
    pass


CURRENCIES: Tuple[CurrencyInfo, ...] = (
    CurrencyInfo("USD", "$", "US Dollar", "en-US"),
    CurrencyInfo("EUR", "€", "Euro", "de-DE"),
    CurrencyInfo("GBP", "£", "British Pound", "en-GB"),
    CurrencyInfo("INR", "₹", "Indian Rupee", "en-IN"),
    CurrencyInfo("JPY", "¥", "Japanese Yen", "ja-JP"),
    CurrencyInfo("CAD", "C$", "Canadian Dollar", "en-CA"),
    CurrencyInfo("AUD", "A$", "Australian Dollar", "en-AU"),
    CurrencyInfo("CHF", "Fr", "Swiss Franc", "de-CH"),
    CurrencyInfo("CNY", "¥", "Chinese Yuan", "zh-CN"),
    CurrencyInfo("SGD", "S$", "Singapore Dollar", "en-SG"),
    CurrencyInfo("HKD", "HK$", "Hong Kong Dollar", "zh-HK"),
    CurrencyInfo("KRW", "₩", "South Korean Won", "ko-KR"),
    CurrencyInfo("MXN", "Mex$", "Mexican Peso", "es-MX"),
    CurrencyInfo("BRL", "R$", "Brazilian Real", "pt-BR"),
    CurrencyInfo("ZAR", "R", "South African Rand", "en-ZA"),
    CurrencyInfo("SEK", "kr", "Swedish Krona", "sv-SE"),
    CurrencyInfo("NOK", "kr", "Norwegian Krone", "nb-NO"),
    CurrencyInfo("DKK", "kr", "Danish Krone", "da-DK"),
    CurrencyInfo("NZD", "NZ$", "New Zealand Dollar", "en-NZ"),
    CurrencyInfo("AED", "د.إ", "UAE Dirham", "ar-AE"),
)

_CURRENCY_BY_CODE = {c.code: c for c in CURRENCIES}


@dataclass(frozen=True)
class ExchangeRates:
    """Fixed exchange-rate table anchored to one reference currency.

    Each rate is how many units of that currency buy one unit of the
    reference currency, so the reference itself must be exactly 1.
    Converting A -> B -> A is only approximately the identity because the
    conversion divides and multiplies floats through the reference.
    """

    rates: Mapping[str, float]
    reference: str = "USD"

    def __post_init__(self):
        rates = dict(self.rates)
        if rates.get(self.reference) != 1:
            raise InvalidRateTableError(
                f"Reference currency {self.reference} must have a rate of exactly 1"
            )
        bad = [code for code, rate in rates.items() if not rate > 0]
        if bad:
            raise InvalidRateTableError(f"Non-positive rates for: {', '.join(sorted(bad))}")
        object.__setattr__(self, "rates", MappingProxyType(rates))

    def rate(self, code: str) -> float:
        try:
            return self.rates[code]
        except KeyError:
            raise UnknownCurrencyError(code) from None

    def codes(self) -> Tuple[str, ...]:
        return tuple(self.rates)

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        if from_currency == to_currency:
            return amount
        return amount / self.rate(from_currency) * self.rate(to_currency)


DEFAULT_RATES = ExchangeRates({
    "USD": 1,
    "EUR": 0.92,
    "GBP": 0.79,
    "INR": 83.12,
    "JPY": 149.50,
    "CAD": 1.36,
    "AUD": 1.53,
    "CHF": 0.88,
    "CNY": 7.24,
    "SGD": 1.34,
    "HKD": 7.82,
    "KRW": 1320.50,
    "MXN": 17.15,
    "BRL": 4.97,
    "ZAR": 18.65,
    "SEK": 10.42,
    "NOK": 10.58,
    "DKK": 6.87,
    "NZD": 1.63,
    "AED": 3.67,
})


def convert(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: ExchangeRates = DEFAULT_RATES,
) -> float:
    return rates.convert(amount, from_currency, to_currency)


def currency_info(code: str) -> CurrencyInfo:
    try:
        return _CURRENCY_BY_CODE[code]
    except KeyError:
        raise UnknownCurrencyError(code) from None


def format_amount(amount: float, code: str) -> str:
    """Format an amount the way the currency's home locale writes it.

    Grouping, symbol placement and fraction digits all come from the CLDR
    locale data, so JPY and KRW render without decimals.
    """
    info = currency_info(code)
    return format_currency(amount, info.code, locale=Locale.parse(info.locale, sep="-"))


def convert_expenses(
    expenses: Iterable[Expense],
    from_currency: str,
    to_currency: str,
    rates: ExchangeRates = DEFAULT_RATES,
) -> Tuple[Expense, ...]:
    if from_currency == to_currency:
        return tuple(expenses)
    return tuple(
        replace(e, amount=rates.convert(e.amount, from_currency, to_currency))
        for e in expenses
    )
