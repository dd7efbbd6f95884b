"""Amount and currency helpers shared by the integrations."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from .currencies import CURRENCIES, NUMERIC_TO_ALPHA

TWO_PLACES = Decimal("0.01")
DEFAULT_EXPONENT = 2


def to_decimal(value: Any) -> Decimal:
    """Convert ``value`` to a finite ``Decimal`` without going through binary floats."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def format_amount(value: Any, places: int = DEFAULT_EXPONENT) -> str:
    """Render an amount with ``places`` decimal places, rounding half up."""
    quantum = Decimal(1).scaleb(-places)
    return str(to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def cents_to_amount(cents: Any, exponent: int = DEFAULT_EXPONENT) -> Decimal:
    """Convert a whole number of minor units into a decimal amount.

    Strings, floats, fractional decimals and negative values are rejected;
    the caller should already hold a whole number of minor units.
    """
    if isinstance(cents, (str, bytes, float, bool)):
        raise ValueError("amount must be a positive integer number of cents")
    if isinstance(cents, Decimal) and (
        not cents.is_finite() or cents != cents.to_integral_value()
    ):
        raise ValueError(f"amount must be a whole number of cents, got {cents}")
    if int(cents) < 0:
        raise ValueError("amount must be a positive integer number of cents")
    return Decimal(int(cents)).scaleb(-exponent).quantize(Decimal(1).scaleb(-exponent))


def parse_amount(value: Optional[str]) -> Optional[Decimal]:
    """Parse a wire amount, returning None for blank or unparseable values."""
    if value is None or not str(value).strip():
        return None
    try:
        return to_decimal(value)
    except ValueError:
        return None


def validate_currency_code(code: Any) -> bool:
    """Return True for a three-letter upper-case ISO 4217 code."""
    return (
        isinstance(code, str)
        and len(code) == 3
        and code.isascii()
        and code.isalpha()
        and code.isupper()
    )


def validate_amount(amount: Any) -> bool:
    """Return True for a positive ``Decimal`` amount."""
    return isinstance(amount, Decimal) and amount.is_finite() and amount > 0


def numeric_currency_code(code: str) -> str:
    """Return the ISO 4217 numeric code for ``code``.

    Raises:
        ValueError: If the currency is not supported
    """
    try:
        return CURRENCIES[code.upper()].numeric
    except KeyError:
        raise ValueError(f"Unsupported currency: {code}") from None


def alpha_currency_code(numeric: Optional[str]) -> Optional[str]:
    """Map an ISO 4217 numeric code back to its letters; None if unknown."""
    if not numeric:
        return None
    return NUMERIC_TO_ALPHA.get(numeric.strip().zfill(3))


def currency_exponent(code: Optional[str]) -> int:
    """Number of minor-unit digits for ``code``; two when the code is unknown."""
    currency = CURRENCIES.get((code or "").upper())
    return currency.exponent if currency else DEFAULT_EXPONENT
