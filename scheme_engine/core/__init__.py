from .tiers import (
    SchemeTier, EntitlementResult, UpsellSuggestion, RescaleResult, OrderLine, Ladder
)
from .slab_expander import generate_virtual_slabs, sanitize_tiers, calculate_ladder_ceiling
from .entitlement import calculate_entitlement, find_applied_slab
from .upsell import find_next_tier, calculate_upsell_gap
from .rescaler import rescale_free_quantity, rescale_order_line

__all__ = [
    'SchemeTier',
    'EntitlementResult',
    'UpsellSuggestion',
    'RescaleResult',
    'OrderLine',
    'Ladder',
    'generate_virtual_slabs',
    'sanitize_tiers',
    'calculate_ladder_ceiling',
    'calculate_entitlement',
    'find_applied_slab',
    'find_next_tier',
    'calculate_upsell_gap',
    'rescale_free_quantity',
    'rescale_order_line'
]
