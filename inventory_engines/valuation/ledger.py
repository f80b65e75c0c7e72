"""
inventory_engines.valuation.ledger -- Per-product chronological ledger view.

Filters the full transaction set down to one product and orders it by date.
Python's sort is stable, so transactions sharing a date keep their ledger
insertion order; every costing strategy therefore sees the same sequence
for the same input.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from inventory_kernel.domain.catalog import Transaction
from inventory_kernel.exceptions import MalformedTransactionError
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.ledger")


def _sort_key(tx: Transaction) -> date:
    if not isinstance(tx.date, date):
        logger.error("ledger_transaction_without_date", extra={
            "transaction_id": tx.id,
            "product_id": tx.product_id,
            "date": repr(tx.date),
        })
        raise MalformedTransactionError(tx.id, "date", f"must be a date, got {tx.date!r}")
    if isinstance(tx.date, datetime):
        return tx.date.date()
    return tx.date


def normalize(transactions: Iterable[Transaction], product_id: str) -> tuple[Transaction, ...]:
    """Return ``product_id``'s transactions sorted by date (stable on ties).

    The input is not modified; a new tuple is returned.

    Raises:
        MalformedTransactionError: If a selected transaction has no valid date.
    """
    selected = [tx for tx in transactions if tx.product_id == product_id]
    return tuple(sorted(selected, key=_sort_key))
