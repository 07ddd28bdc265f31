from decimal import Decimal

from .types import Unit


def format_currency_unit(unit: Unit, amount: int, show_code: bool = True) -> str:
    """Format an amount in smallest units, e.g. 1500000 uatom -> "1.5 ATOM"."""
    value = Decimal(amount).scaleb(-unit.magnitude)
    text = f"{value:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if show_code:
        return f"{text} {unit.code}"
    return text
