from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Optional

from config import CURRENCY


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return Decimal(0)
    if not number.is_finite():
        return Decimal(0)
    return number


def round_money(value: Any, digits: int = 2) -> Decimal:
    quantum = Decimal(1).scaleb(-digits)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def format_currency(amount: Any, digits: int = 2, currency: Optional[str] = None) -> str:
    """KPI cards use 0 digits, detail tables 2; rounding is half-up everywhere."""
    rounded = round_money(amount, digits)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency or CURRENCY} {abs(rounded):,.{digits}f}"


def format_percentage(value: Any, digits: int = 1) -> str:
    return f"{round_money(value, digits):.{digits}f}%"
