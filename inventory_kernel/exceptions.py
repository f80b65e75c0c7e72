"""
Typed Exception Hierarchy for the Inventory Kernel.

Every error has a typed exception class (catch by type, not message), a
``code`` class attribute (machine-readable, API-safe) and carries its
context as structured attributes rather than only a message string.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- CatalogError
    |   +-- InvalidProductError
    |   +-- UnknownProductError
    |
    +-- LedgerError
    |   +-- MalformedTransactionError
    |   +-- InvalidQuantityError
    |   +-- InvalidPriceError
    |   +-- UnknownTransactionTypeError
    |   +-- DuplicateTransactionError
    |
    +-- ValuationError
    |   +-- UnknownValuationMethodError
    |   +-- OverConsumptionError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                      | When Raised
------------|---------------------------|------------------------------------------
Catalog     | INVALID_PRODUCT           | Empty product id, negative min stock
            | UNKNOWN_PRODUCT           | Transaction references no catalog product
------------|---------------------------|------------------------------------------
Ledger      | MALFORMED_TRANSACTION     | Missing field, unparseable date
            | INVALID_QUANTITY          | Quantity not a positive integer
            | INVALID_PRICE             | Price negative or not a number
            | UNKNOWN_TRANSACTION_TYPE  | Type label is neither IN nor OUT
            | DUPLICATE_TRANSACTION     | Transaction id already in the ledger
------------|---------------------------|------------------------------------------
Valuation   | UNKNOWN_VALUATION_METHOD  | Method is not FIFO, LIFO or AVERAGE
            | OVER_CONSUMPTION          | Strict mode: OUT exceeds stock on hand
------------|---------------------------|------------------------------------------
Currency    | INVALID_CURRENCY          | Not a valid ISO 4217 code
------------|---------------------------|------------------------------------------
Config      | CONFIGURATION_ERROR       | Bad settings file or value

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        tx = parse_transaction(form_payload)
    except InvalidQuantityError as e:
        return {"error": e.code, "quantity": e.quantity}
    except LedgerError as e:
        return {"error": e.code, "message": str(e)}

Ledger errors are raised at the entry boundary, before a transaction ever
reaches the valuation engine. The engine itself only raises
``OverConsumptionError`` (strict mode) and ``UnknownValuationMethodError``.
"""

from typing import Any


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Catalog exceptions


class CatalogError(InventoryKernelError):
    """Base exception for product catalog errors."""

    code: str = "CATALOG_ERROR"


class InvalidProductError(CatalogError):
    """Product reference data failed validation."""

    code: str = "INVALID_PRODUCT"

    def __init__(self, product_id: str, reason: str):
        self.product_id = product_id
        self.reason = reason
        super().__init__(f"Invalid product {product_id!r}: {reason}")


class UnknownProductError(CatalogError):
    """Transaction references a product that is not in the catalog."""

    code: str = "UNKNOWN_PRODUCT"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Unknown product: {product_id}")


# Ledger exceptions


class LedgerError(InventoryKernelError):
    """Base exception for transaction ledger errors."""

    code: str = "LEDGER_ERROR"


class MalformedTransactionError(LedgerError):
    """Transaction payload is structurally invalid (missing field, bad date)."""

    code: str = "MALFORMED_TRANSACTION"

    def __init__(self, transaction_id: str | None, field: str, reason: str):
        self.transaction_id = transaction_id
        self.field = field
        self.reason = reason
        super().__init__(
            f"Malformed transaction {transaction_id or '<new>'}: "
            f"field '{field}' {reason}"
        )


class InvalidQuantityError(LedgerError):
    """Transaction quantity is not a positive integer."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, transaction_id: str | None, quantity: Any):
        self.transaction_id = transaction_id
        self.quantity = quantity
        super().__init__(
            f"Transaction {transaction_id or '<new>'} quantity must be a "
            f"positive integer, got {quantity!r}"
        )


class InvalidPriceError(LedgerError):
    """Transaction price per unit is negative or not numeric."""

    code: str = "INVALID_PRICE"

    def __init__(self, transaction_id: str | None, price: Any):
        self.transaction_id = transaction_id
        self.price = price
        super().__init__(
            f"Transaction {transaction_id or '<new>'} price per unit must be "
            f"a non-negative amount, got {price!r}"
        )


class UnknownTransactionTypeError(LedgerError):
    """Transaction type label is neither stock-in nor stock-out."""

    code: str = "UNKNOWN_TRANSACTION_TYPE"

    def __init__(self, transaction_id: str | None, type_label: Any):
        self.transaction_id = transaction_id
        self.type_label = type_label
        super().__init__(
            f"Transaction {transaction_id or '<new>'} has unknown type "
            f"{type_label!r} (expected IN or OUT)"
        )


class DuplicateTransactionError(LedgerError):
    """Transaction id already exists in the ledger (append-only)."""

    code: str = "DUPLICATE_TRANSACTION"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction already recorded: {transaction_id}")


# Valuation exceptions


class ValuationError(InventoryKernelError):
    """Base exception for valuation engine errors."""

    code: str = "VALUATION_ERROR"


class UnknownValuationMethodError(ValuationError):
    """Requested costing method is not supported."""

    code: str = "UNKNOWN_VALUATION_METHOD"

    def __init__(self, method: Any):
        self.method = method
        super().__init__(
            f"Unknown valuation method {method!r} (expected FIFO, LIFO or AVERAGE)"
        )


class OverConsumptionError(ValuationError):
    """Stock-out exceeds the quantity on hand (strict mode only)."""

    code: str = "OVER_CONSUMPTION"

    def __init__(
        self,
        product_id: str | None,
        transaction_id: str,
        requested_quantity: int,
        available_quantity: int,
    ):
        self.product_id = product_id
        self.transaction_id = transaction_id
        self.requested_quantity = requested_quantity
        self.available_quantity = available_quantity
        super().__init__(
            f"Transaction {transaction_id} removes {requested_quantity} units "
            f"of {product_id or 'product'} but only {available_quantity} on hand"
        )


# Currency exceptions


class CurrencyError(InventoryKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: Any):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: '{currency}'")


# Configuration exceptions


class ConfigurationError(InventoryKernelError):
    """Valuation settings could not be loaded or are invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid setting '{key}': {reason}")
