"""Conversion between user-entered amounts and integer cents."""

from decimal import Decimal, InvalidOperation

from errors import InvalidAmount

_CENT = Decimal("0.01")


def parse_amount(text: str) -> int:
    """Parse a decimal amount such as "12.50" into cents.

    Args:
        text: Amount in major units, with at most two decimal places.

    Returns:
        The amount in cents.

    Raises:
        InvalidAmount: If the text is not a finite, non-negative amount
            representable in whole cents.
    """
    try:
        value = Decimal(text.strip().replace(",", "."))
        if not value.is_finite():
            raise InvalidAmount(f"Not a number: {text!r}")
        cents = value.quantize(_CENT)
    except InvalidOperation:
        raise InvalidAmount(f"Not a number: {text!r}")

    if value < 0:
        raise InvalidAmount(f"Amount cannot be negative: {text}")
    if value != cents:
        raise InvalidAmount(f"Amount has fractional cents: {text}")

    return int(cents * 100)


def format_cents(amount_cents: int) -> str:
    """Format cents as a major-unit string, e.g. 1250 -> "12.50"."""
    return str((Decimal(amount_cents) / 100).quantize(_CENT))
