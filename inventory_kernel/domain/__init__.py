"""
Pure domain layer.

Immutable catalog, ledger and value types with NO dependencies on:
- Database or persistence
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from inventory_kernel.domain.catalog import (
    Ledger,
    Product,
    Transaction,
    TransactionType,
    parse_product,
    parse_transaction,
)
from inventory_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from inventory_kernel.domain.values import Currency, Money

__all__ = [
    "Currency",
    "CurrencyInfo",
    "CurrencyRegistry",
    "Ledger",
    "Money",
    "Product",
    "Transaction",
    "TransactionType",
    "parse_product",
    "parse_transaction",
]
