# scheme_engine/core/upsell.py
from typing import Optional, Sequence

from .tiers import SchemeTier, UpsellSuggestion

def find_next_tier(order_qty: int, ladder: Sequence[SchemeTier]) -> UpsellSuggestion:
    """Find the smallest tier strictly above the order quantity.

    Args:
        order_qty: Order quantity
        ladder: Ladder sorted ascending by min_qty

    Returns:
        UpsellSuggestion, with next_tier None past the end of the ladder
    """
    for tier in ladder or []:
        if tier.min_qty > order_qty:
            return UpsellSuggestion(next_tier=tier)
    return UpsellSuggestion(next_tier=None)

def calculate_upsell_gap(order_qty: int, ladder: Sequence[SchemeTier]) -> Optional[int]:
    """Units to add to the order to unlock the next tier."""
    return find_next_tier(order_qty, ladder).gap(order_qty)
