# scheme_engine/services/scheme_service.py
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
import logging

from scheme_engine.config import config
from scheme_engine.core.entitlement import calculate_entitlement
from scheme_engine.core.rescaler import rescale_order_line
from scheme_engine.core.slab_expander import generate_virtual_slabs, sanitize_tiers
from scheme_engine.core.tiers import (
    EntitlementResult, OrderLine, RescaleResult, SchemeTier, UpsellSuggestion
)
from scheme_engine.core.upsell import find_next_tier
from scheme_engine.exceptions import RepositoryError, ValidationError
from scheme_engine.services.scheme_repository import SchemeRepository
from scheme_engine.utils.validation import validate_order_line

logger = logging.getLogger(__name__)

STATUS_NO_SCHEME = 'NO_SCHEME'
STATUS_BELOW_MINIMUM = 'BELOW_MINIMUM'
STATUS_APPLIED = 'APPLIED'

DEFAULT_RULES = {
    'ceiling_order_factor': 2,
    'ceiling_base_multiple': 10,
    'percent_decimals': 2,
    'virtual_scheme_id': 'virtual'
}

@dataclass
class SchemeEvaluation:
    """Outcome of evaluating one order quantity against one scheme."""
    order_qty: int
    status: str
    entitlement: EntitlementResult = field(default_factory=EntitlementResult)
    upsell: UpsellSuggestion = field(default_factory=UpsellSuggestion)
    ladder: List[SchemeTier] = field(default_factory=list)

    @property
    def free_qty(self) -> int:
        return self.entitlement.free_qty

    @property
    def scheme_percent(self) -> float:
        applied = self.entitlement.applied_slab
        return applied.percent if applied is not None else 0.0

    @property
    def upsell_gap(self) -> Optional[int]:
        return self.upsell.gap(self.order_qty)

    @property
    def base_tier(self) -> Optional[SchemeTier]:
        explicit = [t for t in self.ladder if not t.is_virtual]
        if not explicit:
            return None
        return explicit[0]

class SchemeService:
    """Service evaluating order lines against scheme master data.

    Both the interactive preview and the order commit path go through
    this class, so they always run the same calculation.
    """

    def __init__(self, repository: SchemeRepository, rules: Optional[Dict] = None):
        """Initialize the scheme service.

        Args:
            repository: Source of explicit scheme tiers
            rules: Scheme rules; defaults to config.scheme_rules
        """
        if repository is None:
            raise RepositoryError("A scheme repository is required")

        self.repository = repository
        self._rules = dict(rules) if rules is not None else None

    @property
    def rules(self) -> Dict:
        """Get scheme rules.

        Returns:
            Dictionary with scheme rules
        """
        if self._rules is None:
            self._rules = dict(DEFAULT_RULES, **config.scheme_rules)
        return self._rules

    def build_ladder(self, tiers: Iterable[SchemeTier], order_qty: int) -> List[SchemeTier]:
        return generate_virtual_slabs(
            tiers,
            order_qty,
            order_factor=self.rules['ceiling_order_factor'],
            base_multiple=self.rules['ceiling_base_multiple'],
            virtual_scheme_id=self.rules['virtual_scheme_id']
        )

    def evaluate(self, tiers: Iterable[SchemeTier], order_qty: int) -> SchemeEvaluation:
        """Evaluate an order quantity against explicit tiers.

        Args:
            tiers: Explicit tiers of one scheme scope
            order_qty: Order quantity

        Returns:
            SchemeEvaluation with NO_SCHEME, BELOW_MINIMUM or APPLIED status
        """
        tiers = sanitize_tiers(tiers)
        if not tiers:
            return SchemeEvaluation(order_qty=order_qty, status=STATUS_NO_SCHEME)

        ladder = self.build_ladder(tiers, order_qty)
        entitlement = calculate_entitlement(order_qty, ladder)
        upsell = find_next_tier(order_qty, ladder)

        status = STATUS_APPLIED if entitlement.applied_slab is not None else STATUS_BELOW_MINIMUM

        return SchemeEvaluation(
            order_qty=order_qty,
            status=status,
            entitlement=entitlement,
            upsell=upsell,
            ladder=ladder
        )

    def get_tiers(self, line: OrderLine) -> List[SchemeTier]:
        return self.repository.get_tiers(
            line.product_code,
            customer_code=line.customer_code,
            division=line.division
        )

    def evaluate_line(self, line: OrderLine) -> SchemeEvaluation:
        """Evaluate an order line with tiers fetched fresh from the repository."""
        return self.evaluate(self.get_tiers(line), line.order_qty)

    def apply_to_order_line(self, line: OrderLine) -> SchemeEvaluation:
        """Write free quantity and scheme percent onto an order line.

        The line's cached base ratio, used by rescale_line, is refreshed
        from the evaluated scheme. It is cleared when the line's product
        or scope has no scheme.

        Args:
            line: Order line to update

        Returns:
            SchemeEvaluation used for the update
        """
        evaluation = self.evaluate_line(line)

        line.free_qty = evaluation.free_qty
        line.scheme_percent = evaluation.scheme_percent

        base = evaluation.base_tier
        if base is None:
            line.base_order_qty = None
            line.base_free_qty = None
        elif (line.base_order_qty, line.base_free_qty) != (base.min_qty, base.free_qty):
            logger.debug(
                f"Caching base ratio {base.min_qty}:{base.free_qty} for {line.product_code}"
            )
            line.base_order_qty = base.min_qty
            line.base_free_qty = base.free_qty

        return evaluation

    def apply_suggestion(self, line: OrderLine) -> SchemeEvaluation:
        """Raise the line to the next tier's minimum quantity.

        The typed quantity is kept so revert_suggestion can restore it.
        Lines with no next tier are re-evaluated unchanged.
        """
        evaluation = self.evaluate_line(line)
        next_tier = evaluation.upsell.next_tier
        if next_tier is None:
            return self.apply_to_order_line(line)

        if not line.scheme_applied:
            line.manual_qty = line.order_qty

        logger.info(
            f"Applying suggested quantity for {line.product_code}: "
            f"{line.order_qty} -> {next_tier.min_qty} ({next_tier.free_qty} free)"
        )
        line.order_qty = next_tier.min_qty
        line.scheme_applied = True
        return self.apply_to_order_line(line)

    def apply_active(self, line: OrderLine) -> SchemeEvaluation:
        """Accept the tier already reached, bumping to its minimum if needed."""
        evaluation = self.evaluate_line(line)
        applied = evaluation.entitlement.applied_slab
        if applied is None:
            return self.apply_to_order_line(line)

        if not line.scheme_applied:
            line.manual_qty = line.order_qty

        if line.order_qty < applied.min_qty:
            line.order_qty = applied.min_qty
        line.scheme_applied = True
        return self.apply_to_order_line(line)

    def revert_suggestion(self, line: OrderLine) -> SchemeEvaluation:
        """Restore the manually typed quantity and clear the applied flag."""
        if line.scheme_applied and line.manual_qty is not None:
            line.order_qty = line.manual_qty
        line.scheme_applied = False
        line.manual_qty = None
        return self.apply_to_order_line(line)

    def rescale_line(self, line: OrderLine, new_order_qty: int) -> RescaleResult:
        """Apply a manual edit using the line's cached base ratio.

        A typed quantity replaces any applied suggestion, so a later
        revert_suggestion keeps it.
        """
        line.scheme_applied = False
        line.manual_qty = None
        return rescale_order_line(
            line,
            new_order_qty,
            percent_decimals=self.rules['percent_decimals']
        )

    def finalize_order_lines(self, lines: Iterable[OrderLine]) -> List[OrderLine]:
        """Recompute every line before it is persisted.

        Free quantities coming from a preview are discarded and
        recalculated from current master data.

        Raises:
            ValidationError: If any line is invalid
        """
        lines = list(lines)

        errors = {}
        for index, line in enumerate(lines):
            line_errors = validate_order_line(line)
            if line_errors:
                errors[index] = line_errors
        if errors:
            raise ValidationError("Invalid order lines", code='INVALID_ORDER_LINES', details=errors)

        for line in lines:
            previewed = line.free_qty
            self.apply_to_order_line(line)
            if previewed != line.free_qty:
                logger.warning(
                    f"Preview free quantity for {line.product_code} was {previewed}, "
                    f"recomputed {line.free_qty}"
                )

        summary = self.summarize(lines)
        logger.info(
            f"Finalized {len(lines)} order lines: {summary['count']} with schemes, "
            f"{summary['total_free_qty']} free units"
        )
        return lines

    @staticmethod
    def summarize(lines: Iterable[OrderLine]) -> Dict[str, int]:
        """Count scheme lines and total free quantity."""
        scheme_lines = [line for line in lines if line.free_qty and line.free_qty > 0]
        return {
            'count': len(scheme_lines),
            'total_free_qty': sum(line.free_qty for line in scheme_lines)
        }
