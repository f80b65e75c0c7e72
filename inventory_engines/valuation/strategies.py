"""
inventory_engines.valuation.strategies -- FIFO, LIFO and weighted average costing.

Responsibility:
    Walk one product's date-ordered transactions and produce the quantity
    on hand and its value under a costing convention.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Every call builds its own
    working state (layers or running scalars); nothing survives the call.

Invariants enforced:
    - quantity >= 0 and value >= 0 in every outcome: a stock-out never
      removes more than is on hand.
    - Decimal-only arithmetic; floats never enter a computation.
    - Stock-out prices are never read.

Failure modes:
    - Over-consumption (a stock-out larger than the stock on hand) is
      absorbed: the unmet units are dropped, counted in
      ``CostingOutcome.over_consumed`` and logged as
      ``valuation_over_consumption``.
    - With ``strict=True`` over-consumption raises OverConsumptionError
      instead.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple

from inventory_engines.valuation.cost_layer import ConsumptionOrder, CostLayerQueue
from inventory_kernel.domain.catalog import Transaction, TransactionType
from inventory_kernel.exceptions import OverConsumptionError, UnknownValuationMethodError
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.strategies")

_ZERO = Decimal("0")


class ValuationMethod(str, Enum):
    """Inventory costing conventions."""

    FIFO = "FIFO"        # First-in, first-out
    LIFO = "LIFO"        # Last-in, first-out
    AVERAGE = "AVERAGE"  # Weighted average cost

    @classmethod
    def parse(cls, value: Any) -> ValuationMethod:
        """Resolve a method from an enum member or a case-insensitive label."""
        if isinstance(value, ValuationMethod):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnknownValuationMethodError(value) from None


class CostingOutcome(NamedTuple):
    """Final stock position of one product under one strategy."""

    quantity: int
    value: Decimal
    over_consumed: int = 0


def _absorb_over_consumption(tx: Transaction, available: int, strict: bool) -> int:
    unmet = tx.quantity - available
    if strict:
        logger.error("valuation_over_consumption_rejected", extra={
            "transaction_id": tx.id,
            "product_id": tx.product_id,
            "requested_quantity": tx.quantity,
            "available_quantity": available,
        })
        raise OverConsumptionError(
            product_id=tx.product_id,
            transaction_id=tx.id,
            requested_quantity=tx.quantity,
            available_quantity=available,
        )
    logger.warning("valuation_over_consumption", extra={
        "transaction_id": tx.id,
        "product_id": tx.product_id,
        "requested_quantity": tx.quantity,
        "available_quantity": available,
        "unmet_quantity": unmet,
    })
    return unmet


def average(ordered_tx: Sequence[Transaction], *, strict: bool = False) -> CostingOutcome:
    """Weighted average cost.

    Two running scalars are kept.  A stock-in adds its extended cost and
    quantity, implicitly re-basing the average; a stock-out removes units
    at ``total_value / total_qty`` as of that moment.  A stock-out with no
    stock on hand has no effect.
    """
    total_qty = 0
    total_value = _ZERO
    over_consumed = 0

    for tx in ordered_tx:
        if tx.type is TransactionType.IN:
            total_value += tx.price_per_unit * tx.quantity
            total_qty += tx.quantity
            continue

        removed = min(tx.quantity, total_qty)
        if removed < tx.quantity:
            over_consumed += _absorb_over_consumption(tx, total_qty, strict)
        if removed == 0:
            continue

        avg_cost = total_value / total_qty
        total_value -= avg_cost * removed
        total_qty -= removed
        if total_qty == 0:
            # No stock, no value; drops division residue
            total_value = _ZERO

    total_qty = max(0, total_qty)
    total_value = max(_ZERO, total_value) if total_qty else _ZERO
    return CostingOutcome(total_qty, total_value, over_consumed)


def _layered(
    ordered_tx: Sequence[Transaction],
    order: ConsumptionOrder,
    strict: bool,
) -> CostingOutcome:
    layers = CostLayerQueue()
    on_hand = 0
    over_consumed = 0

    for tx in ordered_tx:
        if tx.type is TransactionType.IN:
            layers.add(tx.quantity, tx.price_per_unit, tx.date)
            on_hand += tx.quantity
            continue

        if tx.quantity > on_hand:
            over_consumed += _absorb_over_consumption(tx, on_hand, strict)
        layers.consume(tx.quantity, order)
        on_hand = max(0, on_hand - tx.quantity)

    return CostingOutcome(layers.total_quantity, layers.total_value, over_consumed)


def fifo(ordered_tx: Sequence[Transaction], *, strict: bool = False) -> CostingOutcome:
    """First-in, first-out: stock-outs consume the oldest layer first."""
    return _layered(ordered_tx, ConsumptionOrder.OLDEST_FIRST, strict)


def lifo(ordered_tx: Sequence[Transaction], *, strict: bool = False) -> CostingOutcome:
    """Last-in, first-out: stock-outs consume the newest layer first."""
    return _layered(ordered_tx, ConsumptionOrder.NEWEST_FIRST, strict)


Strategy = Callable[..., CostingOutcome]

STRATEGIES: Mapping[ValuationMethod, Strategy] = {
    ValuationMethod.FIFO: fifo,
    ValuationMethod.LIFO: lifo,
    ValuationMethod.AVERAGE: average,
}


def get_strategy(method: ValuationMethod | str) -> Strategy:
    """Look up the costing strategy for ``method``.

    Raises:
        UnknownValuationMethodError: If ``method`` is not a known method.
    """
    return STRATEGIES[ValuationMethod.parse(method)]
