"""Number parsing, rounding and formatting shared by every rendering."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Any

ZERO = Decimal("0")
CENTS = Decimal("0.01")

# Typed input of 10**40 or more is not a usable invoice number.
MAX_INPUT_MAGNITUDE = 40
PRECISION = 200


def decimal_context():
    """Arithmetic context wide enough for any product or sum of parsed input."""
    return localcontext(Context(prec=PRECISION, rounding=ROUND_HALF_UP))


def parse_number_or_zero(value: Any) -> Decimal:
    """Convert ``value`` to :class:`~decimal.Decimal`.

    Empty, invalid, non-finite or oversized input gives ``0`` instead of
    raising, so a half-typed number in the form never reaches the model as
    anything else. Decimal values are only checked for finiteness.
    """

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    text = str(value).strip()
    if not text:
        return ZERO
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return ZERO

    if not number.is_finite() or number.adjusted() >= MAX_INPUT_MAGNITUDE:
        return ZERO
    return number


def round2(value: Any) -> Decimal:
    """Round to two decimals, halves away from zero."""
    number = parse_number_or_zero(value)
    with decimal_context():
        try:
            result = number.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return ZERO.quantize(CENTS)
    if not result:
        # -0.00 would otherwise print with a sign
        return ZERO.quantize(CENTS)
    return result


def format_amount(amount: Any, currency: str) -> str:
    """Return ``"<amount> <currency>"`` with the amount at two decimals."""
    return f"{round2(amount):.2f} {currency}"


def format_quantity(quantity: Any) -> str:
    number = parse_number_or_zero(quantity)
    with decimal_context():
        try:
            if number == number.to_integral_value():
                return str(number.quantize(Decimal("1")))
        except InvalidOperation:
            return str(number)
        return format(number.normalize(), "f")
