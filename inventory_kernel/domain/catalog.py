"""
inventory_kernel.domain.catalog -- Product catalog and stock ledger types.

Responsibility:
    Define the immutable reference and event types the valuation engine
    reads: Product (catalog entry), Transaction (one stock-in or stock-out
    event) and Ledger (append-only snapshot of transactions).  Raw entry
    payloads are validated here, at the boundary, so the engine may assume
    every Transaction it receives is well formed.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Transaction quantity is a positive int.
    - Transaction price_per_unit is a non-negative Decimal (never float).
    - Transaction date is a calendar date.
    - Ledger is append-only: no update, no delete, unique transaction ids.

Failure modes:
    - InvalidProductError for an empty product id or negative min stock.
    - MalformedTransactionError for a missing field or unparseable date.
    - InvalidQuantityError / InvalidPriceError / UnknownTransactionTypeError
      for bad economic values.
    - DuplicateTransactionError when appending an id already recorded.
    - UnknownProductError from parse_transaction when a catalog is given
      and the product is not in it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import uuid4

from inventory_kernel.exceptions import (
    DuplicateTransactionError,
    InvalidPriceError,
    InvalidProductError,
    InvalidQuantityError,
    MalformedTransactionError,
    UnknownProductError,
    UnknownTransactionTypeError,
)
from inventory_kernel.logging_config import get_logger

logger = get_logger("domain.catalog")


class TransactionType(str, Enum):
    """Direction of a stock movement."""

    IN = "IN"    # Production result / receipt
    OUT = "OUT"  # Sale / shipment

    @classmethod
    def parse(cls, label: Any, transaction_id: str | None = None) -> TransactionType:
        """Resolve a type label, including the legacy MASUK / KELUAR labels."""
        if isinstance(label, TransactionType):
            return label
        normalized = str(label).strip().upper() if label is not None else ""
        resolved = _TYPE_ALIASES.get(normalized)
        if resolved is None:
            raise UnknownTransactionTypeError(transaction_id, label)
        return resolved


_TYPE_ALIASES: dict[str, TransactionType] = {
    "IN": TransactionType.IN,
    "MASUK": TransactionType.IN,
    "OUT": TransactionType.OUT,
    "KELUAR": TransactionType.OUT,
}


@dataclass(frozen=True, slots=True)
class Product:
    """Catalog entry. Owned by the catalog; the engine only reads it."""

    id: str
    sku: str
    name: str
    min_stock: int = 0
    category: str = ""

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        sku: str = "",
        min_stock: int = 0,
        category: str = "",
    ) -> Product:
        """Validated constructor.

        Raises:
            InvalidProductError: If id is empty or min_stock is negative.
        """
        if not isinstance(id, str) or not id.strip():
            raise InvalidProductError(str(id), "id must be a non-empty string")
        if isinstance(min_stock, bool) or not isinstance(min_stock, int) or min_stock < 0:
            raise InvalidProductError(id, f"min_stock must be a non-negative integer, got {min_stock!r}")
        return cls(id=id.strip(), sku=sku, name=name, min_stock=min_stock, category=category)


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    One immutable stock ledger event.

    price_per_unit is the cost basis for IN events.  For OUT events it is
    nominally the selling price and is never used in valuation.
    """

    id: str
    product_id: str
    date: date
    type: TransactionType
    quantity: int
    price_per_unit: Decimal
    reference: str = ""

    @property
    def is_stock_in(self) -> bool:
        return self.type is TransactionType.IN

    @property
    def extended_amount(self) -> Decimal:
        """quantity * price_per_unit."""
        return self.price_per_unit * self.quantity

    @classmethod
    def create(
        cls,
        id: str,
        product_id: str,
        date: date,
        type: TransactionType | str,
        quantity: int,
        price_per_unit: Decimal | int | str,
        reference: str = "",
    ) -> Transaction:
        """Validated constructor.

        Preconditions:
            quantity is a positive int, price_per_unit is a non-negative
            Decimal / int / numeric string, date is a ``datetime.date``.

        Raises:
            MalformedTransactionError: If id or product_id is empty or date
                is not a date.
            InvalidQuantityError: If quantity is not a positive int.
            InvalidPriceError: If price_per_unit is negative or not numeric.
            UnknownTransactionTypeError: If type is not IN or OUT.
        """
        if not id:
            raise MalformedTransactionError(None, "id", "is required")
        if not product_id:
            raise MalformedTransactionError(id, "product_id", "is required")
        if isinstance(date, datetime):
            date = date.date()
        if not isinstance(date, _date_type):
            raise MalformedTransactionError(id, "date", f"must be a date, got {date!r}")
        tx_type = TransactionType.parse(type, id)

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            logger.warning("transaction_invalid_quantity", extra={
                "transaction_id": id,
                "quantity": repr(quantity),
            })
            raise InvalidQuantityError(id, quantity)

        price = _to_decimal(price_per_unit)
        if price is None or not price.is_finite() or price < 0:
            logger.warning("transaction_invalid_price", extra={
                "transaction_id": id,
                "price_per_unit": repr(price_per_unit),
            })
            raise InvalidPriceError(id, price_per_unit)

        return cls(
            id=id,
            product_id=product_id,
            date=date,
            type=tx_type,
            quantity=quantity,
            price_per_unit=price,
            reference=reference or "",
        )


_date_type = date


def _to_decimal(value: Any) -> Decimal | None:
    """Convert a numeric value to Decimal; floats go through str()."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            return None
    return None


@dataclass(frozen=True)
class Ledger:
    """
    Append-only snapshot of stock transactions in insertion order.

    append() returns a new Ledger; an existing Ledger never changes, so a
    snapshot handed to the engine stays valid while entry continues.
    """

    transactions: tuple[Transaction, ...] = ()
    _ids: frozenset[str] = field(default=frozenset(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ids: set[str] = set()
        for tx in self.transactions:
            if tx.id in ids:
                raise DuplicateTransactionError(tx.id)
            ids.add(tx.id)
        object.__setattr__(self, "_ids", frozenset(ids))

    @classmethod
    def of(cls, transactions: Iterable[Transaction]) -> Ledger:
        return cls(transactions=tuple(transactions))

    def append(self, transaction: Transaction) -> Ledger:
        """Return a new Ledger with ``transaction`` appended.

        Raises:
            DuplicateTransactionError: If the id is already recorded.
        """
        if transaction.id in self._ids:
            logger.warning("ledger_duplicate_transaction", extra={
                "transaction_id": transaction.id,
            })
            raise DuplicateTransactionError(transaction.id)
        logger.info("ledger_transaction_appended", extra={
            "transaction_id": transaction.id,
            "product_id": transaction.product_id,
            "type": transaction.type.value,
            "quantity": transaction.quantity,
            "date": transaction.date.isoformat(),
        })
        return Ledger(transactions=self.transactions + (transaction,))

    def for_product(self, product_id: str) -> tuple[Transaction, ...]:
        """Transactions of one product, insertion order (not date order)."""
        return tuple(tx for tx in self.transactions if tx.product_id == product_id)

    def recent(self, limit: int = 5) -> tuple[Transaction, ...]:
        """Most recently recorded transactions first."""
        if limit <= 0:
            return ()
        return tuple(reversed(self.transactions[-limit:]))

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._ids

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self.transactions)


# ---------------------------------------------------------------------------
# Boundary parsing of untyped payloads (entry forms, YAML/JSON files)
# ---------------------------------------------------------------------------


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _parse_date(value: Any, transaction_id: str | None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            if len(text) > 10 and text[10] in "T ":
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            return date.fromisoformat(text)
        except ValueError:
            pass
    raise MalformedTransactionError(transaction_id, "date", f"is not an ISO date: {value!r}")


def _parse_quantity(value: Any, transaction_id: str | None) -> int:
    if isinstance(value, bool):
        raise InvalidQuantityError(transaction_id, value)
    if isinstance(value, int):
        return value
    number = _to_decimal(value)
    if number is None or not number.is_finite() or number != number.to_integral_value():
        raise InvalidQuantityError(transaction_id, value)
    return int(number)


def parse_transaction(
    payload: Mapping[str, Any],
    *,
    catalog: Iterable[Product] | None = None,
) -> Transaction:
    """
    Build a validated Transaction from an untyped entry payload.

    Accepts camelCase (``productId``, ``pricePerUnit``) or snake_case keys;
    ``price`` is accepted as an alias for the unit price, as submitted by
    the entry form.  A missing id is generated.

    Raises:
        MalformedTransactionError, InvalidQuantityError, InvalidPriceError,
        UnknownTransactionTypeError: see Transaction.create.
        UnknownProductError: If ``catalog`` is given and does not contain
            the referenced product.
    """
    tx_id = _first(payload, "id")
    tx_id = str(tx_id) if tx_id is not None else uuid4().hex

    product_id = _first(payload, "productId", "product_id")
    if product_id is None or not str(product_id).strip():
        raise MalformedTransactionError(tx_id, "product_id", "is required")
    product_id = str(product_id).strip()

    if catalog is not None and product_id not in {p.id for p in catalog}:
        logger.warning("transaction_unknown_product", extra={
            "transaction_id": tx_id,
            "product_id": product_id,
        })
        raise UnknownProductError(product_id)

    for required in ("type", "quantity"):
        if _first(payload, required) is None:
            raise MalformedTransactionError(tx_id, required, "is required")
    price = _first(payload, "pricePerUnit", "price_per_unit", "price")
    if price is None:
        raise MalformedTransactionError(tx_id, "price_per_unit", "is required")

    return Transaction.create(
        id=tx_id,
        product_id=product_id,
        date=_parse_date(_first(payload, "date"), tx_id),
        type=TransactionType.parse(payload["type"], tx_id),
        quantity=_parse_quantity(payload["quantity"], tx_id),
        price_per_unit=price,
        reference=str(_first(payload, "reference") or ""),
    )


def parse_product(payload: Mapping[str, Any]) -> Product:
    """Build a validated Product from an untyped catalog payload."""
    min_stock = _first(payload, "minStock", "min_stock")
    return Product.create(
        id=str(_first(payload, "id") or ""),
        name=str(_first(payload, "name") or ""),
        sku=str(_first(payload, "sku") or ""),
        min_stock=0 if min_stock is None else min_stock,
        category=str(_first(payload, "category") or ""),
    )
