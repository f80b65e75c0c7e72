"""
Inventory Kernel - shared domain layer for inventory valuation.

Provides:
- Product catalog and append-only transaction ledger types
- Money / Currency value objects (Decimal-only arithmetic)
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
