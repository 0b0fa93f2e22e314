# scheme_engine/core/rescaler.py
import math

from .tiers import OrderLine, RescaleResult
from ..utils.math_utils import round_percent

def rescale_free_quantity(
    new_order_qty: int,
    base_order_qty: int,
    base_free_qty: int,
    percent_decimals: int = 2
) -> RescaleResult:
    """Recompute free quantity from a cached base ratio.

    Agrees with calculate_entitlement(generate_virtual_slabs(...)) on
    free_qty whenever the cached ratio is the scheme's base tier and every
    explicit tier sits on a base multiple with the multiple's own free
    quantity. An override such as 250:60 over a 100:20 base diverges.

    Args:
        new_order_qty: Edited order quantity
        base_order_qty: Base tier minimum quantity
        base_free_qty: Base tier free quantity
        percent_decimals: Decimals kept on the scheme percent

    Returns:
        RescaleResult; applied is False when the base ratio is unusable
    """
    if not base_order_qty or base_order_qty <= 0 or not base_free_qty or base_free_qty <= 0:
        return RescaleResult(applied=False)

    if new_order_qty is None or new_order_qty <= 0:
        return RescaleResult(multiplier=0, free_qty=0, percent=0.0, applied=True)

    multiplier = math.floor(new_order_qty / base_order_qty)
    free_qty = multiplier * base_free_qty

    percent = 0.0
    if free_qty > 0:
        percent = round_percent(free_qty / new_order_qty * 100, percent_decimals)

    return RescaleResult(
        multiplier=multiplier,
        free_qty=free_qty,
        percent=percent,
        applied=True
    )

def rescale_order_line(line: OrderLine, new_order_qty: int, percent_decimals: int = 2) -> RescaleResult:
    """Apply a manual quantity edit to an order line using its cached base ratio.

    The line's free quantity and percent are left untouched when the
    rescale is skipped; the order quantity is always updated.
    """
    result = rescale_free_quantity(
        new_order_qty,
        line.base_order_qty,
        line.base_free_qty,
        percent_decimals=percent_decimals
    )

    line.order_qty = new_order_qty
    if result.applied:
        line.free_qty = result.free_qty
        line.scheme_percent = result.percent

    return result
