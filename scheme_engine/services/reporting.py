# scheme_engine/services/reporting.py
from typing import Iterable, Optional

import pandas as pd

from scheme_engine.core.tiers import OrderLine

REPORT_COLUMNS = [
    'product_code',
    'product_name',
    'customer_code',
    'division',
    'order_qty',
    'free_qty',
    'scheme_percent',
    'qty_plus_free',
    'highlight'
]

def format_qty_plus_free(order_qty: Optional[int], free_qty: Optional[int]) -> str:
    """Format the "Qty+Free" cell, e.g. "250+40".

    Lines without free goods show the order quantity alone.
    """
    order_qty = order_qty or 0
    if free_qty and free_qty > 0:
        return f"{order_qty}+{free_qty}"
    return f"{order_qty}"

def is_scheme_line(line: OrderLine) -> bool:
    """Whether the line earned free goods and should be highlighted."""
    return bool(line.free_qty and line.free_qty > 0)

def build_scheme_report(lines: Iterable[OrderLine]) -> pd.DataFrame:
    """Build a report frame of evaluated order lines.

    Args:
        lines: Order lines already processed by SchemeService

    Returns:
        DataFrame with one row per line and REPORT_COLUMNS columns
    """
    rows = []
    for line in lines:
        rows.append({
            'product_code': line.product_code,
            'product_name': line.product_name,
            'customer_code': line.customer_code,
            'division': line.division,
            'order_qty': line.order_qty,
            'free_qty': line.free_qty or 0,
            'scheme_percent': line.scheme_percent or 0.0,
            'qty_plus_free': format_qty_plus_free(line.order_qty, line.free_qty),
            'highlight': is_scheme_line(line)
        })

    return pd.DataFrame(rows, columns=REPORT_COLUMNS)
