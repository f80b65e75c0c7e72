"""
Valuation - FIFO / LIFO / weighted average inventory costing.

Ledger normalizer, costing strategies, report builder and dashboard
summary.  Pure calculation only; configuration-aware orchestration lives
in inventory_services.valuation_service.
"""

from inventory_engines.valuation.cost_layer import (
    ConsumptionOrder,
    CostLayer,
    CostLayerQueue,
)
from inventory_engines.valuation.ledger import normalize
from inventory_engines.valuation.report import (
    DEFAULT_CURRENCY,
    ValuationResult,
    build_report,
    compare_methods,
    value_product,
)
from inventory_engines.valuation.strategies import (
    STRATEGIES,
    CostingOutcome,
    ValuationMethod,
    average,
    fifo,
    get_strategy,
    lifo,
)
from inventory_engines.valuation.summary import (
    InventorySummary,
    narrative_context,
    summarize,
)

__all__ = [
    "ConsumptionOrder",
    "CostLayer",
    "CostLayerQueue",
    "CostingOutcome",
    "DEFAULT_CURRENCY",
    "InventorySummary",
    "STRATEGIES",
    "ValuationMethod",
    "ValuationResult",
    "average",
    "build_report",
    "compare_methods",
    "fifo",
    "get_strategy",
    "lifo",
    "narrative_context",
    "normalize",
    "summarize",
    "value_product",
]
