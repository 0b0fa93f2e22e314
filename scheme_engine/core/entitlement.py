# scheme_engine/core/entitlement.py
from typing import Optional, Sequence

from .tiers import EntitlementResult, SchemeTier

def find_applied_slab(order_qty: int, ladder: Sequence[SchemeTier]) -> Optional[SchemeTier]:
    """Find the highest tier the order quantity has reached.

    Args:
        order_qty: Order quantity
        ladder: Ladder sorted ascending by min_qty

    Returns:
        Qualifying tier with the greatest min_qty, or None
    """
    applied = None
    for tier in ladder:
        if tier.min_qty > order_qty:
            break
        applied = tier
    return applied

def calculate_entitlement(order_qty: int, ladder: Sequence[SchemeTier]) -> EntitlementResult:
    """Calculate the free quantity already earned at an order quantity.

    Floor selection: the reward of the single highest qualifying tier is
    returned as-is. Tiers are never summed or interpolated; virtual tiers
    are already scaled by the expander.

    Args:
        order_qty: Order quantity
        ladder: Ladder from generate_virtual_slabs

    Returns:
        EntitlementResult, (0, None) when nothing qualifies
    """
    if order_qty is None or order_qty <= 0 or not ladder:
        return EntitlementResult(free_qty=0, applied_slab=None)

    applied = find_applied_slab(order_qty, ladder)
    if applied is None:
        return EntitlementResult(free_qty=0, applied_slab=None)

    return EntitlementResult(free_qty=applied.free_qty, applied_slab=applied)
