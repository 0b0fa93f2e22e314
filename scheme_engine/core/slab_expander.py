# scheme_engine/core/slab_expander.py
import logging
import math
from typing import Dict, Iterable, List

from .tiers import SchemeTier, Ladder

logger = logging.getLogger(__name__)

DEFAULT_CEILING_ORDER_FACTOR = 2
DEFAULT_CEILING_BASE_MULTIPLE = 10
DEFAULT_VIRTUAL_SCHEME_ID = 'virtual'

def sanitize_tiers(explicit_tiers: Iterable[SchemeTier]) -> List[SchemeTier]:
    """Drop malformed tiers and sort the rest by minimum quantity.

    The sort is stable, so tiers sharing a minimum quantity keep their
    declared order.

    Args:
        explicit_tiers: Tiers as declared in master data

    Returns:
        Valid tiers sorted ascending by min_qty
    """
    valid = []
    for tier in explicit_tiers or []:
        if tier.min_qty is None or tier.min_qty <= 0:
            logger.warning(
                f"Ignoring malformed scheme tier {tier.scheme_id!r}: min_qty={tier.min_qty}"
            )
            continue
        valid.append(tier)

    return sorted(valid, key=lambda t: t.min_qty)

def _index_by_min_qty(tiers: List[SchemeTier]) -> Dict[int, SchemeTier]:
    """Map min_qty to the first declared tier with that quantity."""
    index = {}
    for tier in tiers:
        if tier.min_qty in index:
            logger.warning(
                f"Duplicate scheme tier at min_qty={tier.min_qty}; "
                f"keeping first declared ({index[tier.min_qty].free_qty} free), "
                f"ignoring {tier.free_qty} free"
            )
            continue
        index[tier.min_qty] = tier
    return index

def calculate_ladder_ceiling(
    order_qty: int,
    base_min_qty: int,
    order_factor: int = DEFAULT_CEILING_ORDER_FACTOR,
    base_multiple: int = DEFAULT_CEILING_BASE_MULTIPLE
) -> int:
    """Calculate the quantity the ladder must reach.

    Args:
        order_qty: Current order quantity
        base_min_qty: Minimum quantity of the base tier
        order_factor: Multiple of the order quantity to cover
        base_multiple: Minimum number of base rungs to cover

    Returns:
        Ladder ceiling quantity
    """
    return max(order_factor * order_qty, base_multiple * base_min_qty)

def generate_virtual_slabs(
    explicit_tiers: Iterable[SchemeTier],
    order_qty: int,
    order_factor: int = DEFAULT_CEILING_ORDER_FACTOR,
    base_multiple: int = DEFAULT_CEILING_BASE_MULTIPLE,
    virtual_scheme_id: str = DEFAULT_VIRTUAL_SCHEME_ID
) -> Ladder:
    """Expand sparse explicit tiers into a dense ladder.

    The base tier (smallest min_qty) is repeated at every multiple of its
    quantity up to the ladder ceiling. An explicit tier at a multiple
    replaces the virtual rung; explicit tiers off the multiples, or past
    the ceiling, are merged in at their sorted position.

    Args:
        explicit_tiers: Tiers declared for one scheme scope
        order_qty: Current order quantity
        order_factor: Ladder covers at least order_factor * order_qty
        base_multiple: Ladder covers at least base_multiple base rungs
        virtual_scheme_id: Scheme id for virtual rungs when the base has none

    Returns:
        Ladder sorted strictly ascending by min_qty
    """
    tiers = sanitize_tiers(explicit_tiers)
    if not tiers:
        return []

    explicit_by_qty = _index_by_min_qty(tiers)
    base = explicit_by_qty[tiers[0].min_qty]

    ceiling = calculate_ladder_ceiling(order_qty, base.min_qty, order_factor, base_multiple)
    # Last rung must reach the ceiling, not stop short of it
    rungs = max(1, math.ceil(ceiling / base.min_qty))

    ladder = {}
    for multiplier in range(1, rungs + 1):
        current_qty = base.min_qty * multiplier
        explicit = explicit_by_qty.get(current_qty)
        if explicit is not None:
            ladder[current_qty] = explicit
            continue

        ladder[current_qty] = SchemeTier(
            min_qty=current_qty,
            free_qty=multiplier * base.free_qty,
            percent=base.percent,
            scheme_id=base.scheme_id or virtual_scheme_id,
            scheme_name=f"Auto-Pattern (x{multiplier})",
            is_virtual=True
        )

    for min_qty, explicit in explicit_by_qty.items():
        if min_qty not in ladder:
            ladder[min_qty] = explicit

    return [ladder[qty] for qty in sorted(ladder)]
