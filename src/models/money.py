# src/models/money.py

"""Exact two-decimal money handling.

Prices never pass through ``float``: they are parsed into
:class:`~decimal.Decimal`, quantised to paise, stored as integer minor
units and rendered back as ``"1234.50"`` strings.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from src.config.settings import Settings
from src.services.errors import InvalidArgument

_CENT = Decimal("0.01")


def parse_money(value: object, field_name: str = "price") -> Decimal:
    """Convert a str/int/Decimal into a two-decimal ``Decimal``.

    Floats are rejected because they already carry binary rounding error.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidArgument(
            f"{field_name} must be a decimal string, got {value!r}"
        )
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InvalidArgument(
                f"{field_name} is not a number: {value!r}"
            ) from exc
    else:
        raise InvalidArgument(
            f"{field_name} must be a decimal string, got {value!r}"
        )
    if not amount.is_finite():
        raise InvalidArgument(f"{field_name} must be finite")
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def parse_optional_money(
    value: object, field_name: str,
) -> Decimal | None:
    """Like :func:`parse_money` but passes ``None`` through."""
    if value is None:
        return None
    return parse_money(value, field_name)


def to_minor_units(amount: Decimal) -> int:
    """Decimal rupees -> integer paise."""
    return int(amount.quantize(_CENT, rounding=ROUND_HALF_UP) * 100)


def from_minor_units(minor: int) -> Decimal:
    """Integer paise -> Decimal rupees with two places."""
    return (Decimal(minor) / 100).quantize(_CENT)


def format_money(amount: Decimal) -> str:
    """Wire format: plain two-decimal string."""
    return str(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def display_money(amount: Decimal) -> str:
    """Human format with currency symbol and thousands separators."""
    return f"{Settings.CURRENCY_SYMBOL}{amount:,.2f}"
