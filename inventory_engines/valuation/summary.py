"""
inventory_engines.valuation.summary -- Dashboard totals and narrative context.

Responsibility:
    Aggregate a valuation report into the figures the dashboard shows
    (total value, total units, low-stock products, top products by value)
    and into the structured context handed to the narrative collaborator.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The narrative context is
    data only; generating prose from it happens outside this package.
    The engine never reads the clock: ``as_of`` is passed in.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from inventory_engines.valuation.report import DEFAULT_CURRENCY, ValuationResult
from inventory_kernel.domain.catalog import Product, Transaction
from inventory_kernel.domain.values import Money
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.summary")


@dataclass(frozen=True)
class InventorySummary:
    """Dashboard figures derived from one valuation report."""

    total_value: Money
    total_quantity: int
    low_stock: tuple[ValuationResult, ...]
    top_by_value: tuple[ValuationResult, ...]
    over_consumed: tuple[ValuationResult, ...]

    @property
    def has_low_stock(self) -> bool:
        return bool(self.low_stock)


def summarize(
    report: Sequence[ValuationResult],
    products: Iterable[Product],
    *,
    top_n: int = 10,
    currency: str = DEFAULT_CURRENCY,
) -> InventorySummary:
    """
    Aggregate a report.

    A product is low on stock when its quantity on hand is at or below its
    ``min_stock``.  Rows without a matching catalog product are never
    flagged.  ``top_by_value`` is ordered by total value, highest first;
    ties keep report order.  ``currency`` is only used for an empty report.
    """
    min_stock = {product.id: product.min_stock for product in products}
    if report:
        currency = report[0].total_value.currency.code

    low_stock = tuple(
        row for row in report
        if row.product_id in min_stock and row.quantity_on_hand <= min_stock[row.product_id]
    )
    ranked = sorted(report, key=lambda row: row.total_value.amount, reverse=True)

    summary = InventorySummary(
        total_value=Money.total((row.total_value for row in report), currency),
        total_quantity=sum(row.quantity_on_hand for row in report),
        low_stock=low_stock,
        top_by_value=tuple(ranked[:max(0, top_n)]),
        over_consumed=tuple(row for row in report if row.is_over_consumed),
    )
    if summary.has_low_stock:
        logger.info("inventory_low_stock_detected", extra={
            "product_ids": [row.product_id for row in low_stock],
        })
    return summary


def narrative_context(
    products: Iterable[Product],
    transactions: Sequence[Transaction],
    report: Sequence[ValuationResult],
    *,
    as_of: datetime,
) -> dict[str, Any]:
    """Structured context for the downstream narrative collaborator."""
    return {
        "products": [
            {"name": product.name, "minStock": product.min_stock}
            for product in products
        ],
        "valuationSummary": [
            {
                "product": row.product_name,
                "qty": row.quantity_on_hand,
                "totalValue": str(row.total_value.amount),
                "method": row.method.value,
            }
            for row in report
        ],
        "recentTransactionsCount": len(transactions),
        "date": as_of.isoformat(),
    }
