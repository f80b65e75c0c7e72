"""
Tests for the FIFO, LIFO and weighted average costing strategies.

Each strategy receives one product's transactions already in date order
and returns the final (quantity, value, over_consumed) position.
"""

from datetime import date
from decimal import Decimal

import pytest

from inventory_engines.valuation import (
    STRATEGIES,
    ConsumptionOrder,
    CostingOutcome,
    CostLayerQueue,
    ValuationMethod,
    average,
    fifo,
    get_strategy,
    lifo,
    normalize,
)
from inventory_kernel.exceptions import OverConsumptionError, UnknownValuationMethodError
from tests.conftest import stock_in, stock_out


def _two_batches_one_sale():
    return (
        stock_in(10, "100", on=date(2024, 1, 1)),
        stock_in(10, "200", on=date(2024, 1, 2)),
        stock_out(10, on=date(2024, 1, 3)),
    )


class TestValuationMethod:

    @pytest.mark.parametrize("label", ["FIFO", "fifo", " Fifo "])
    def test_parse_case_insensitive(self, label):
        assert ValuationMethod.parse(label) is ValuationMethod.FIFO

    def test_parse_member_passthrough(self):
        assert ValuationMethod.parse(ValuationMethod.LIFO) is ValuationMethod.LIFO

    @pytest.mark.parametrize("label", ["HIFO", "", None, 3])
    def test_unknown_method_rejected(self, label):
        with pytest.raises(UnknownValuationMethodError) as exc_info:
            ValuationMethod.parse(label)
        assert exc_info.value.code == "UNKNOWN_VALUATION_METHOD"

    def test_registry_covers_every_method(self):
        assert set(STRATEGIES) == set(ValuationMethod)
        assert get_strategy("average") is average
        assert get_strategy(ValuationMethod.FIFO) is fifo
        assert get_strategy("LIFO") is lifo


class TestCostLayerQueue:

    def _queue(self):
        queue = CostLayerQueue()
        queue.add(5, Decimal("10"), date(2024, 1, 1))
        queue.add(5, Decimal("20"), date(2024, 1, 2))
        return queue

    def test_consume_oldest_first(self):
        queue = self._queue()
        assert queue.consume(7, ConsumptionOrder.OLDEST_FIRST) == 0
        assert [(layer.quantity, layer.unit_cost) for layer in queue] == [(3, Decimal("20"))]

    def test_consume_newest_first(self):
        queue = self._queue()
        queue.consume(7, ConsumptionOrder.NEWEST_FIRST)
        assert [(layer.quantity, layer.unit_cost) for layer in queue] == [(3, Decimal("10"))]

    def test_exact_layer_is_removed(self):
        queue = self._queue()
        queue.consume(5, ConsumptionOrder.OLDEST_FIRST)
        assert len(queue) == 1
        assert all(layer.quantity > 0 for layer in queue)

    def test_unmet_quantity_returned(self):
        queue = self._queue()
        assert queue.consume(12, ConsumptionOrder.OLDEST_FIRST) == 2
        assert len(queue) == 0
        assert queue.total_quantity == 0
        assert queue.total_value == Decimal("0")

    def test_totals(self):
        queue = self._queue()
        assert queue.total_quantity == 10
        assert queue.total_value == Decimal("150")


class TestWorkedExamples:
    """IN 10 @ 100, IN 10 @ 200, OUT 10."""

    def test_fifo_keeps_newer_batch(self):
        assert fifo(_two_batches_one_sale()) == CostingOutcome(10, Decimal("2000"), 0)

    def test_lifo_keeps_older_batch(self):
        assert lifo(_two_batches_one_sale()) == CostingOutcome(10, Decimal("1000"), 0)

    def test_average_keeps_blended_cost(self):
        outcome = average(_two_batches_one_sale())
        assert outcome.quantity == 10
        assert outcome.value == Decimal("1500")

    def test_partial_layer_consumption(self):
        txs = (
            stock_in(10, "100", on=date(2024, 1, 1)),
            stock_in(10, "200", on=date(2024, 1, 2)),
            stock_out(15, on=date(2024, 1, 3)),
        )
        assert fifo(txs).value == Decimal("1000")   # 5 @ 200
        assert lifo(txs).value == Decimal("500")    # 5 @ 100
        assert average(txs).value == Decimal("750")

    def test_average_rebases_after_sale(self):
        txs = (
            stock_in(10, "100", on=date(2024, 1, 1)),
            stock_out(5, on=date(2024, 1, 2)),
            stock_in(5, "400", on=date(2024, 1, 3)),
            stock_out(5, on=date(2024, 1, 4)),
        )
        # 5 @ 100 + 5 @ 400 -> average 250; 5 remain
        outcome = average(txs)
        assert outcome.quantity == 5
        assert outcome.value == Decimal("1250")

    def test_out_price_is_never_read(self):
        cheap = (stock_in(4, "50"), stock_out(1, price="1"))
        dear = (stock_in(4, "50"), stock_out(1, price="999999"))
        for strategy in (fifo, lifo, average):
            assert strategy(cheap) == strategy(dear)


class TestEdgeCases:

    def test_same_day_receipts_follow_recorded_order(self):
        cheap = stock_in(10, "100", on=date(2024, 1, 1))
        dear = stock_in(10, "200", on=date(2024, 1, 1))
        sale = stock_out(10, on=date(2024, 1, 2))
        assert fifo(normalize([cheap, dear, sale], "p1")).value == Decimal("2000")
        assert fifo(normalize([dear, cheap, sale], "p1")).value == Decimal("1000")

    @pytest.mark.parametrize("strategy", [fifo, lifo, average])
    def test_empty_ledger(self, strategy):
        assert strategy(()) == CostingOutcome(0, Decimal("0"), 0)

    @pytest.mark.parametrize("strategy", [fifo, lifo, average])
    def test_only_outs(self, strategy):
        outcome = strategy((stock_out(3), stock_out(2)))
        assert outcome.quantity == 0
        assert outcome.value == Decimal("0")
        assert outcome.over_consumed == 5

    @pytest.mark.parametrize("strategy", [fifo, lifo, average])
    def test_over_consumption_clamps_to_zero(self, strategy):
        txs = (stock_in(5, "10", on=date(2024, 1, 1)), stock_out(8, on=date(2024, 1, 2)))
        outcome = strategy(txs)
        assert outcome.quantity == 0
        assert outcome.value == Decimal("0")
        assert outcome.over_consumed == 3

    @pytest.mark.parametrize("strategy", [fifo, lifo, average])
    def test_over_consumption_does_not_borrow_from_later_stock(self, strategy):
        txs = (
            stock_in(5, "10", on=date(2024, 1, 1)),
            stock_out(8, on=date(2024, 1, 2)),
            stock_in(4, "30", on=date(2024, 1, 3)),
        )
        outcome = strategy(txs)
        assert outcome.quantity == 4
        assert outcome.value == Decimal("120")

    @pytest.mark.parametrize("strategy", [fifo, lifo, average])
    def test_full_depletion_is_exactly_zero(self, strategy):
        txs = (
            stock_in(3, "10", on=date(2024, 1, 1)),
            stock_in(7, "3.33", on=date(2024, 1, 2)),
            stock_out(4, on=date(2024, 1, 3)),
            stock_out(6, on=date(2024, 1, 4)),
        )
        outcome = strategy(txs)
        assert outcome.quantity == 0
        assert outcome.value == Decimal("0")
        assert outcome.over_consumed == 0

    @pytest.mark.parametrize("strategy", [fifo, lifo])
    def test_layers_conserve_cost(self, strategy):
        """Remaining layer value equals total cost in minus cost of units taken."""
        txs = (
            stock_in(3, "10.50", on=date(2024, 1, 1)),
            stock_in(4, "11.25", on=date(2024, 1, 2)),
            stock_in(2, "9.75", on=date(2024, 1, 3)),
        )
        outcome = strategy(txs)
        assert outcome.quantity == 9
        assert outcome.value == Decimal("31.50") + Decimal("45.00") + Decimal("19.50")

    def test_zero_cost_stock(self):
        outcome = average((stock_in(5, "0"), stock_out(2)))
        assert outcome == CostingOutcome(3, Decimal("0"), 0)

    def test_same_day_out_before_in_is_over_consumption(self):
        """Ledger order decides on a shared date: OUT first finds no stock."""
        day = date(2024, 6, 1)
        txs = (stock_out(2, on=day), stock_in(5, "10", on=day))
        for strategy in (fifo, lifo, average):
            outcome = strategy(txs)
            assert outcome.quantity == 5
            assert outcome.over_consumed == 2


class TestStrictMode:

    @pytest.mark.parametrize("strategy", [fifo, lifo, average])
    def test_strict_raises(self, strategy):
        txs = (stock_in(5, "10"), stock_out(8, tx_id="sale-1"))
        with pytest.raises(OverConsumptionError) as exc_info:
            strategy(txs, strict=True)
        err = exc_info.value
        assert err.transaction_id == "sale-1"
        assert err.requested_quantity == 8
        assert err.available_quantity == 5

    @pytest.mark.parametrize("strategy", [fifo, lifo, average])
    def test_strict_passes_consistent_ledger(self, strategy):
        txs = (stock_in(5, "10"), stock_out(5))
        assert strategy(txs, strict=True).quantity == 0

    def test_over_consumption_logged(self, structured_logs):
        fifo((stock_in(5, "10"), stock_out(8, tx_id="sale-2")))
        [record] = structured_logs.find("valuation_over_consumption")
        assert record["level"] == "WARNING"
        assert record["transaction_id"] == "sale-2"
        assert record["unmet_quantity"] == 3
