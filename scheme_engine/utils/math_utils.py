# scheme_engine/utils/math_utils.py
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Optional

def round_percent(value: float, decimals: int = 2) -> float:
    """Round a percentage half-up to a fixed number of decimals.

    Python's round() uses banker's rounding on binary floats; order
    screens and exports expect 12.345 -> 12.35.

    Args:
        value: Percentage value
        decimals: Number of decimal places to keep

    Returns:
        Rounded percentage
    """
    if decimals < 0:
        decimals = 0

    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))

def safe_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Convert a spreadsheet/form value to an integer.

    Args:
        value: Raw value (int, float, numeric string, None)
        default: Value returned when conversion is impossible

    Returns:
        Integer value or default
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, int):
        return value

    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default

    if not number.is_finite():
        return default

    return int(number)
