"""
Command line interface for scheme calculations.

This module provides command line tools for previewing scheme ladders,
evaluating order quantities and rescaling edited order lines.
"""
import argparse
import sys
from typing import List

from tabulate import tabulate

from scheme_engine.config import config
from scheme_engine.core.rescaler import rescale_free_quantity
from scheme_engine.core.tiers import OrderLine, SchemeTier
from scheme_engine.db import db
from scheme_engine.exceptions import NotFoundError, SchemeEngineError
from scheme_engine.logging_setup import get_logger, log_exception
from scheme_engine.services.reporting import format_qty_plus_free
from scheme_engine.services.scheme_repository import InMemorySchemeRepository, SqlSchemeRepository
from scheme_engine.services.scheme_service import SchemeService, SchemeEvaluation, STATUS_NO_SCHEME

def parse_tier(value: str) -> SchemeTier:
    """Parse a MIN:FREE[:PERCENT] tier argument."""
    parts = value.split(':')
    if len(parts) not in (2, 3):
        raise argparse.ArgumentTypeError(f"Invalid tier '{value}', expected MIN:FREE[:PERCENT]")

    try:
        min_qty = int(parts[0])
        free_qty = int(parts[1])
        percent = float(parts[2]) if len(parts) == 3 else 0.0
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid tier '{value}', expected MIN:FREE[:PERCENT]")

    return SchemeTier(min_qty=min_qty, free_qty=free_qty, percent=percent)

def _ladder_table(evaluation: SchemeEvaluation) -> List[list]:
    applied = evaluation.entitlement.applied_slab
    next_tier = evaluation.upsell.next_tier

    table_data = []
    for tier in evaluation.ladder:
        marker = ''
        if tier is applied:
            marker = 'APPLIED'
        elif tier is next_tier:
            marker = 'NEXT'
        table_data.append([
            tier.min_qty,
            tier.free_qty,
            tier.percent,
            'virtual' if tier.is_virtual else 'explicit',
            tier.scheme_name or '',
            marker
        ])
    return table_data

def _print_evaluation(evaluation: SchemeEvaluation):
    if evaluation.status == STATUS_NO_SCHEME:
        print("No scheme available")
        return

    applied = evaluation.entitlement.applied_slab
    if applied is None:
        print(f"Order {evaluation.order_qty}: below scheme minimum")
    else:
        print(
            f"Order {format_qty_plus_free(evaluation.order_qty, evaluation.free_qty)}: "
            f"{evaluation.free_qty} free at tier {applied.min_qty}"
        )

    next_tier = evaluation.upsell.next_tier
    if next_tier is not None:
        print(f"Add {evaluation.upsell_gap} -> {next_tier.free_qty} Free (tier {next_tier.min_qty})")

def show_ladder(args) -> int:
    """Print the expanded ladder for explicit tiers."""
    service = SchemeService(InMemorySchemeRepository())
    evaluation = service.evaluate(args.tier, args.qty)

    if not evaluation.ladder:
        print("No scheme available")
        return 0

    print(f"\nLadder for order quantity {args.qty}:")
    print(tabulate(
        _ladder_table(evaluation),
        headers=['Min Qty', 'Free Qty', 'Scheme %', 'Type', 'Name', '']
    ))
    return 0

def evaluate_order(args) -> int:
    """Evaluate an order quantity against explicit tiers."""
    service = SchemeService(InMemorySchemeRepository())
    _print_evaluation(service.evaluate(args.tier, args.qty))
    return 0

def rescale(args) -> int:
    """Rescale free quantity from a cached base ratio."""
    result = rescale_free_quantity(
        args.qty,
        args.base_qty,
        args.base_free,
        percent_decimals=config.scheme_rules['percent_decimals']
    )

    if not result.applied:
        print("Base ratio not set; values left unchanged")
        return 0

    print(tabulate(
        [[args.qty, result.multiplier, result.free_qty, result.percent]],
        headers=['Order Qty', 'Multiplier', 'Free Qty', 'Scheme %']
    ))
    return 0

def lookup(args) -> int:
    """Evaluate an order quantity against master data in the database."""
    if args.db:
        db.initialize(args.db)

    with db.session_scope() as session:
        service = SchemeService(SqlSchemeRepository(session))
        line = OrderLine(
            product_code=args.product,
            customer_code=args.customer,
            division=args.division,
            order_qty=args.qty
        )
        evaluation = service.apply_to_order_line(line)
        if evaluation.status == STATUS_NO_SCHEME:
            raise NotFoundError(
                f"No active scheme for product {args.product}",
                code='NO_SCHEME',
                details={'customer': args.customer, 'division': args.division}
            )

        print(f"\nProduct {args.product} (customer={args.customer}, division={args.division}):")
        _print_evaluation(evaluation)
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Scheme calculation tools')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')
    subparsers.required = True

    ladder_parser = subparsers.add_parser('ladder', help='Show the expanded tier ladder')
    ladder_parser.add_argument('--tier', type=parse_tier, action='append', default=[],
                               help='Explicit tier MIN:FREE[:PERCENT], repeatable')
    ladder_parser.add_argument('--qty', type=int, required=True, help='Order quantity')
    ladder_parser.set_defaults(func=show_ladder)

    evaluate_parser = subparsers.add_parser('evaluate', help='Evaluate an order quantity')
    evaluate_parser.add_argument('--tier', type=parse_tier, action='append', default=[],
                                 help='Explicit tier MIN:FREE[:PERCENT], repeatable')
    evaluate_parser.add_argument('--qty', type=int, required=True, help='Order quantity')
    evaluate_parser.set_defaults(func=evaluate_order)

    rescale_parser = subparsers.add_parser('rescale', help='Rescale free quantity from a base ratio')
    rescale_parser.add_argument('--qty', type=int, required=True, help='New order quantity')
    rescale_parser.add_argument('--base-qty', type=int, required=True, help='Base tier minimum quantity')
    rescale_parser.add_argument('--base-free', type=int, required=True, help='Base tier free quantity')
    rescale_parser.set_defaults(func=rescale)

    lookup_parser = subparsers.add_parser('lookup', help='Evaluate against scheme master data')
    lookup_parser.add_argument('--product', required=True, help='Product code')
    lookup_parser.add_argument('--customer', help='Customer code')
    lookup_parser.add_argument('--division', help='Division')
    lookup_parser.add_argument('--qty', type=int, required=True, help='Order quantity')
    lookup_parser.add_argument('--db', help='Database URL, defaults to configuration')
    lookup_parser.set_defaults(func=lookup)

    return parser

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger('scheme_cli')
    logger.debug(f"Running scheme command {args.command}")

    try:
        return args.func(args)
    except SchemeEngineError as e:
        log_exception('scheme_cli', e, f"Scheme command {args.command} failed")
        return 1

if __name__ == '__main__':
    sys.exit(main())
