"""
fr-FR Number and Currency Formatting

Mirrors what browsers render for `toLocaleString('fr-FR')`:
- narrow no-break space (U+202F) between thousands
- decimal comma
- no-break space (U+00A0) before the unit ("€", "%")

Rounding is half-up on Decimal; the engine itself never rounds.
"""

from decimal import Decimal, ROUND_HALF_UP

GROUP_SEPARATOR = "\u202f"
UNIT_SEPARATOR = "\u00a0"


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_number(value, max_decimals: int = 3, min_decimals: int = 0) -> str:
    """
    Format a number the fr-FR way.

    Trailing zeros beyond `min_decimals` are dropped, so
    format_number(300000) -> '300 000' and format_number(Decimal('0.5')) -> '0,5'.
    """
    amount = _to_decimal(value)
    quantized = amount.quantize(Decimal(1).scaleb(-max_decimals), rounding=ROUND_HALF_UP)

    sign = "-" if quantized < 0 else ""
    whole, _, fraction = f"{abs(quantized):f}".partition(".")

    fraction = fraction.rstrip("0")
    if len(fraction) < min_decimals:
        fraction = fraction.ljust(min_decimals, "0")

    grouped = f"{int(whole):,}".replace(",", GROUP_SEPARATOR)
    return f"{sign}{grouped},{fraction}" if fraction else f"{sign}{grouped}"


def format_amount(value) -> str:
    """Plain amount with euro sign: '300 000 €' (up to 3 decimals, as entered)."""
    return f"{format_number(value)}{UNIT_SEPARATOR}€"


def format_currency(value) -> str:
    """Currency style, always two decimals: '38 194,35 €'."""
    return f"{format_number(value, max_decimals=2, min_decimals=2)}{UNIT_SEPARATOR}€"


def format_currency_whole(value) -> str:
    """Currency rounded to the euro, used for chart hover labels."""
    return f"{format_number(value, max_decimals=0)}{UNIT_SEPARATOR}€"


def format_percent(rate) -> str:
    """Rate in [0, 1] as a percentage: Decimal('0.45') -> '45 %'."""
    return f"{format_number(_to_decimal(rate) * 100, max_decimals=2)}{UNIT_SEPARATOR}%"
