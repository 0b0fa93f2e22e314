from .math_utils import round_percent, safe_int
from .validation import validate_tier, validate_order_line

__all__ = [
    'round_percent',
    'safe_int',
    'validate_tier',
    'validate_order_line'
]
