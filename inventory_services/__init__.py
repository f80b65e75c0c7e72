"""
inventory_services -- Package init and public API.

Responsibility:
    Orchestration over the pure valuation engines: applies the active
    settings, records entry payloads onto the append-only ledger, and is
    the only layer that may read the wall clock.

Architecture position:
    Services -- orchestration over engines + kernel + config.

    Dependency direction:
        inventory_services/ -> inventory_engines/  (allowed)
        inventory_services/ -> inventory_config/   (allowed)
        inventory_services/ -> inventory_kernel/   (allowed)
        inventory_engines/  -> inventory_services/ (FORBIDDEN)
        inventory_kernel/   -> inventory_services/ (FORBIDDEN)
"""

from inventory_services.valuation_service import DashboardView, ValuationService

__all__ = [
    "DashboardView",
    "ValuationService",
]
