# scheme_engine/core/tiers.py
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from ..exceptions import ValidationError
from ..utils.math_utils import safe_int
from ..utils.validation import validate_tier

@dataclass(frozen=True)
class SchemeTier:
    """A quantity threshold and its free-goods reward.

    `percent` is informational only; it is never used to compute free
    quantities.
    """
    min_qty: int
    free_qty: int
    percent: float = 0.0
    scheme_id: Optional[str] = None
    scheme_name: Optional[str] = None
    is_virtual: bool = False

    @classmethod
    def from_record(cls, record: Any, strict: bool = False) -> 'SchemeTier':
        """Build a tier from a master-data record.

        Args:
            record: Dict with camelCase or snake_case keys, or an object
                such as a SchemeSlab row
            strict: Raise ValidationError instead of coercing bad values

        Returns:
            SchemeTier

        Raises:
            ValidationError: If strict and the record is invalid
        """
        def read(*names):
            for name in names:
                if isinstance(record, Mapping):
                    if name in record:
                        return record[name]
                elif hasattr(record, name):
                    return getattr(record, name)
            return None

        if strict:
            errors = validate_tier(record)
            if errors:
                raise ValidationError("Invalid scheme tier", code='INVALID_TIER', details=errors)

        scheme_id = read('scheme_id', 'schemeId', '_id', 'id')
        percent = read('percent', 'scheme_percent', 'schemePercent')

        return cls(
            min_qty=safe_int(read('min_qty', 'minQty'), 0),
            free_qty=safe_int(read('free_qty', 'freeQty'), 0),
            percent=float(percent or 0.0),
            scheme_id=str(scheme_id) if scheme_id is not None else None,
            scheme_name=read('scheme_name', 'schemeName'),
            is_virtual=False
        )

    def to_dict(self) -> dict:
        return {
            'min_qty': self.min_qty,
            'free_qty': self.free_qty,
            'percent': self.percent,
            'scheme_id': self.scheme_id,
            'scheme_name': self.scheme_name,
            'is_virtual': self.is_virtual
        }

@dataclass(frozen=True)
class EntitlementResult:
    """Free quantity earned at an order quantity and the tier that earned it."""
    free_qty: int = 0
    applied_slab: Optional[SchemeTier] = None

@dataclass(frozen=True)
class UpsellSuggestion:
    """The next tier above the current order quantity, if any."""
    next_tier: Optional[SchemeTier] = None

    def gap(self, order_qty: int) -> Optional[int]:
        """Units to add to reach the next tier."""
        if self.next_tier is None:
            return None
        return self.next_tier.min_qty - order_qty

@dataclass(frozen=True)
class RescaleResult:
    multiplier: int = 0
    free_qty: int = 0
    percent: float = 0.0
    applied: bool = False

@dataclass
class OrderLine:
    """An order line as seen by the scheme engine.

    Only `free_qty`, `scheme_percent` and `scheme_applied` are written
    by the engine. `base_order_qty` / `base_free_qty` cache the scheme's
    base ratio for the edit path.
    """
    product_code: str
    order_qty: int
    customer_code: Optional[str] = None
    division: Optional[str] = None
    product_name: Optional[str] = None
    free_qty: int = 0
    scheme_percent: float = 0.0
    scheme_applied: bool = False
    manual_qty: Optional[int] = None
    base_order_qty: Optional[int] = None
    base_free_qty: Optional[int] = None

Ladder = List[SchemeTier]
