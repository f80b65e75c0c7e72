"""
inventory_engines.valuation.cost_layer -- Cost layers (batches) for FIFO/LIFO.

Responsibility:
    Model the slices of stock acquired at a specific unit cost and their
    consumption from either end of the layer sequence.  A layer is created
    for every stock-in event and shrunk or removed by stock-out events.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Layers are working state of a single strategy call; they are never
    shared between calls and never persisted.

Invariants enforced:
    - A layer in a CostLayerQueue always has quantity > 0: a layer that is
      fully consumed is removed, never left at zero.
    - Each layer is appended once and removed at most once, so consumption
      over a whole ledger is amortized O(n).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class ConsumptionOrder(str, Enum):
    """Which end of the layer sequence a stock-out draws from."""

    OLDEST_FIRST = "oldest_first"  # FIFO: head
    NEWEST_FIRST = "newest_first"  # LIFO: tail


@dataclass(slots=True)
class CostLayer:
    """A quantity of stock tagged with the unit cost it was acquired at."""

    quantity: int
    unit_cost: Decimal
    date: date

    @property
    def value(self) -> Decimal:
        return self.unit_cost * self.quantity


class CostLayerQueue:
    """
    Ordered cost layers backed by a deque.

    Layers are appended at the tail in ledger order; ``consume`` takes
    from the head (oldest) or the tail (newest).
    """

    __slots__ = ("_layers",)

    def __init__(self) -> None:
        self._layers: deque[CostLayer] = deque()

    def add(self, quantity: int, unit_cost: Decimal, layer_date: date) -> CostLayer:
        layer = CostLayer(quantity=quantity, unit_cost=unit_cost, date=layer_date)
        self._layers.append(layer)
        return layer

    def consume(self, quantity: int, order: ConsumptionOrder) -> int:
        """
        Remove ``quantity`` units, layer by layer, from one end.

        A layer holding more than the remaining amount is decremented and
        consumption stops; otherwise the whole layer is removed and
        consumption continues with the next one.

        Returns:
            The unmet quantity (0 unless the layers ran out).
        """
        newest_first = order is ConsumptionOrder.NEWEST_FIRST
        remaining = quantity
        while remaining > 0 and self._layers:
            layer = self._layers[-1] if newest_first else self._layers[0]
            if layer.quantity > remaining:
                layer.quantity -= remaining
                remaining = 0
            else:
                remaining -= layer.quantity
                if newest_first:
                    self._layers.pop()
                else:
                    self._layers.popleft()
        return remaining

    @property
    def total_quantity(self) -> int:
        return sum(layer.quantity for layer in self._layers)

    @property
    def total_value(self) -> Decimal:
        return sum((layer.value for layer in self._layers), Decimal("0"))

    def __iter__(self) -> Iterator[CostLayer]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)
