from typing import Any, Dict, Mapping

def _field(record: Any, *names: str) -> Any:
    """Read the first present attribute or key from a record."""
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None

def _is_whole_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()

def validate_tier(record: Any) -> Dict[str, str]:
    """Validate an explicit scheme tier.

    Accepts a dict (camelCase or snake_case keys), a SchemeTier or a
    SchemeSlab row.

    Args:
        record: Tier to validate

    Returns:
        Dictionary with validation errors
    """
    errors = {}

    min_qty = _field(record, 'min_qty', 'minQty')
    free_qty = _field(record, 'free_qty', 'freeQty')
    percent = _field(record, 'percent', 'scheme_percent', 'schemePercent')

    if min_qty is None:
        errors['min_qty'] = 'Minimum quantity is required'
    elif not _is_whole_number(min_qty) or min_qty <= 0:
        errors['min_qty'] = 'Minimum quantity must be a positive whole number'

    if free_qty is None:
        errors['free_qty'] = 'Free quantity is required'
    elif not _is_whole_number(free_qty) or free_qty < 0:
        errors['free_qty'] = 'Free quantity must be a non-negative whole number'

    if percent is not None:
        if isinstance(percent, bool) or not isinstance(percent, (int, float)):
            errors['percent'] = 'Scheme percent must be a number'
        elif not 0 <= percent <= 100:
            errors['percent'] = 'Scheme percent must be between 0 and 100'

    return errors

def validate_order_line(line: Any) -> Dict[str, str]:
    """Validate an order line before scheme evaluation.

    Args:
        line: OrderLine or dict to validate

    Returns:
        Dictionary with validation errors
    """
    errors = {}

    if not _field(line, 'product_code', 'productCode'):
        errors['product_code'] = 'Product code is required'

    order_qty = _field(line, 'order_qty', 'orderQty')
    if order_qty is None or isinstance(order_qty, bool) or not isinstance(order_qty, (int, float)):
        errors['order_qty'] = 'Order quantity is required'
    elif order_qty <= 0:
        errors['order_qty'] = 'Invalid Qty'

    return errors
