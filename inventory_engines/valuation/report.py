"""
inventory_engines.valuation.report -- Per-product valuation report builder.

Responsibility:
    Apply one costing strategy to every product of a catalog and assemble
    one ValuationResult row per product, in catalog order.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel and sibling engine modules.

Invariants enforced:
    - One row per product, in the order the catalog was given.
    - quantity_on_hand >= 0, total_value >= 0.
    - unit_value = total_value / quantity_on_hand, or zero when nothing is
      on hand (never a division fault).
    - Purity: inputs are read-only; every call builds fresh working state,
      so repeated or concurrent calls with equal inputs return equal rows.

Failure modes:
    - UnknownValuationMethodError for an unsupported method label.
    - OverConsumptionError when strict=True and a product's ledger sells
      more than was produced.
    - InvalidCurrencyError for an unknown currency code.

Usage:
    from inventory_engines.valuation import ValuationMethod, build_report

    rows = build_report(products, ledger, ValuationMethod.FIFO, currency="IDR")
    for row in rows:
        print(row.product_name, row.quantity_on_hand, row.total_value)
"""

from __future__ import annotations

import contextvars
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.ledger import normalize
from inventory_engines.valuation.strategies import ValuationMethod, get_strategy
from inventory_kernel.domain.catalog import Product, Transaction
from inventory_kernel.domain.values import Currency, Money
from inventory_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.valuation.report")

DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True, slots=True)
class ValuationResult:
    """
    One report row: a product's stock position under one costing method.

    over_consumed_quantity counts stock-out units that found no stock; a
    non-zero value points at a ledger inconsistency (more sold than was
    ever produced).
    """

    product_id: str
    product_name: str
    quantity_on_hand: int
    total_value: Money
    unit_value: Money
    method: ValuationMethod
    over_consumed_quantity: int = 0

    @property
    def is_over_consumed(self) -> bool:
        return self.over_consumed_quantity > 0

    def to_dict(self) -> dict[str, Any]:
        """Row as consumed by the dashboard and narrative collaborators."""
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "quantityOnHand": self.quantity_on_hand,
            "totalValue": str(self.total_value.amount),
            "unitValue": str(self.unit_value.amount),
            "currency": self.total_value.currency.code,
            "method": self.method.value,
            "overConsumedQuantity": self.over_consumed_quantity,
        }


def value_product(
    product: Product,
    transactions: Iterable[Transaction],
    method: ValuationMethod | str,
    *,
    currency: str | Currency = DEFAULT_CURRENCY,
    strict: bool = False,
) -> ValuationResult:
    """Value a single product: normalize, dispatch, derive unit value."""
    method = ValuationMethod.parse(method)
    strategy = get_strategy(method)

    with LogContext.bind(product_id=product.id):
        ordered = normalize(transactions, product.id)
        outcome = strategy(ordered, strict=strict)

    total_value = Money.of(outcome.value, currency)
    if outcome.quantity > 0:
        unit_value = total_value / outcome.quantity
    else:
        unit_value = Money.zero(total_value.currency)

    return ValuationResult(
        product_id=product.id,
        product_name=product.name,
        quantity_on_hand=outcome.quantity,
        total_value=total_value,
        unit_value=unit_value,
        method=method,
        over_consumed_quantity=outcome.over_consumed,
    )


@traced_engine("valuation_report", "1.0", fingerprint_fields=("method", "currency", "strict"))
def build_report(
    products: Sequence[Product],
    transactions: Iterable[Transaction],
    method: ValuationMethod | str,
    *,
    currency: str | Currency = DEFAULT_CURRENCY,
    strict: bool = False,
    max_workers: int = 1,
) -> tuple[ValuationResult, ...]:
    """
    Value every product of the catalog under ``method``.

    Preconditions:
        products and transactions are validated snapshots (see
        inventory_kernel.domain.catalog); transactions may be in any order.

    Postconditions:
        Returns one ValuationResult per product, in catalog order.  With
        ``max_workers > 1`` the per-product passes run on a thread pool;
        the rows are identical to the serial result.

    Raises:
        UnknownValuationMethodError: If ``method`` is not FIFO, LIFO or AVERAGE.
        OverConsumptionError: If ``strict`` and a ledger is over-consumed.
    """
    method = ValuationMethod.parse(method)
    currency = currency if isinstance(currency, Currency) else Currency(currency)
    catalog = tuple(products)
    ledger = tuple(transactions)

    t0 = time.monotonic()
    logger.info("valuation_report_started", extra={
        "method": method.value,
        "currency": currency.code,
        "product_count": len(catalog),
        "transaction_count": len(ledger),
        "strict": strict,
        "max_workers": max_workers,
    })

    def run(product: Product) -> ValuationResult:
        return value_product(product, ledger, method, currency=currency, strict=strict)

    if max_workers > 1 and len(catalog) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # each task runs in its own copy of the caller's log context
            futures = [
                executor.submit(contextvars.copy_context().run, run, product)
                for product in catalog
            ]
            rows = tuple(future.result() for future in futures)
    else:
        rows = tuple(run(product) for product in catalog)

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.info("valuation_report_completed", extra={
        "method": method.value,
        "row_count": len(rows),
        "over_consumed_products": sum(1 for row in rows if row.is_over_consumed),
        "duration_ms": duration_ms,
    })
    return rows


def compare_methods(
    products: Sequence[Product],
    transactions: Iterable[Transaction],
    *,
    currency: str | Currency = DEFAULT_CURRENCY,
    strict: bool = False,
    max_workers: int = 1,
) -> dict[ValuationMethod, tuple[ValuationResult, ...]]:
    """Build the report under every method, keyed by method."""
    ledger = tuple(transactions)
    return {
        method: build_report(
            products,
            ledger,
            method,
            currency=currency,
            strict=strict,
            max_workers=max_workers,
        )
        for method in ValuationMethod
    }
