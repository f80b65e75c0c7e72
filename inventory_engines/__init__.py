"""
Module: inventory_engines
Responsibility:
    Package entrypoint for the pure calculation engines.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel (and sibling engine modules).
    MUST NOT import inventory_config or inventory_services.

Invariants enforced:
    - Purity: engines never call ``datetime.now()`` or ``date.today()``.
    - Decimal-only arithmetic for every monetary amount.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from inventory_engines.valuation import ValuationMethod, build_report
"""

from inventory_engines.valuation import (
    CostingOutcome,
    InventorySummary,
    ValuationMethod,
    ValuationResult,
    build_report,
    compare_methods,
    normalize,
    summarize,
)

__all__ = [
    "CostingOutcome",
    "InventorySummary",
    "ValuationMethod",
    "ValuationResult",
    "build_report",
    "compare_methods",
    "normalize",
    "summarize",
]
