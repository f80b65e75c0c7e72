"""
Pytest fixtures for the inventory valuation test suite.

Provides:
- A small product catalog and ledger builders
- Structured log capture for the inventory_kernel logger hierarchy
- Logging state reset between tests
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from itertools import count

import pytest

from inventory_kernel.domain.catalog import Product, Transaction, TransactionType
from inventory_kernel.logging_config import LogContext, StructuredFormatter, reset_logging

_tx_ids = count(1)


def make_tx(
    tx_type: TransactionType | str,
    quantity: int,
    price: str | int | Decimal = "0",
    on: date = date(2024, 1, 1),
    product_id: str = "p1",
    tx_id: str | None = None,
    reference: str = "",
) -> Transaction:
    """Build a validated transaction with an auto-generated id."""
    return Transaction.create(
        id=tx_id or f"t{next(_tx_ids)}",
        product_id=product_id,
        date=on,
        type=tx_type,
        quantity=quantity,
        price_per_unit=price,
        reference=reference,
    )


def stock_in(quantity: int, price, on: date = date(2024, 1, 1), product_id: str = "p1", **kw) -> Transaction:
    return make_tx(TransactionType.IN, quantity, price, on, product_id, **kw)


def stock_out(quantity: int, on: date = date(2024, 1, 2), product_id: str = "p1", price="0", **kw) -> Transaction:
    return make_tx(TransactionType.OUT, quantity, price, on, product_id, **kw)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    yield
    logging.disable(logging.NOTSET)
    LogContext.clear()
    reset_logging()


@pytest.fixture
def catalog() -> tuple[Product, ...]:
    return (
        Product.create(id="p1", sku="FG-001", name="Office Desk", min_stock=5, category="Furniture"),
        Product.create(id="p2", sku="FG-002", name="Ergonomic Chair", min_stock=10, category="Furniture"),
        Product.create(id="p3", sku="EL-101", name="LED Desk Lamp", min_stock=20, category="Electronics"),
    )


@pytest.fixture
def sample_ledger() -> tuple[Transaction, ...]:
    """Two desk batches at different costs, one chair batch, one desk sale."""
    return (
        stock_in(10, "1500000", date(2023, 10, 1), "p1", tx_id="t1", reference="BATCH-001"),
        stock_in(5, "1600000", date(2023, 10, 15), "p1", tx_id="t2", reference="BATCH-002"),
        stock_in(20, "750000", date(2023, 10, 5), "p2", tx_id="t3", reference="BATCH-001"),
        stock_out(3, date(2023, 10, 20), "p1", price="2500000", tx_id="t4", reference="INV-1001"),
    )


class LogCapture:
    """Collects JSON log lines emitted under inventory_kernel.*"""

    def __init__(self, stream: StringIO):
        self._stream = stream

    def records(self) -> list[dict]:
        lines = self._stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    def messages(self) -> list[str]:
        return [record["message"] for record in self.records()]

    def find(self, message: str) -> list[dict]:
        return [record for record in self.records() if record["message"] == message]


@pytest.fixture
def structured_logs():
    """Attach a StructuredFormatter handler at DEBUG to inventory_kernel."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("inventory_kernel")
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield LogCapture(stream)
    logger.removeHandler(handler)
    logger.setLevel(previous_level)
