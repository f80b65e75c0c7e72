"""
inventory_services.valuation_service -- Settings-aware valuation orchestration.

Responsibility:
    Bind the active ValuationSettings to the pure report builder, record
    untyped entry payloads onto the append-only ledger, and assemble the
    dashboard view and narrative context.

Architecture position:
    Services -- orchestration over engines + kernel.
    Pure calculation lives in inventory_engines.valuation; this class holds
    no ledger state of its own.  Catalog and ledger are passed in on every
    call, so one service instance can serve concurrent callers.

Failure modes:
    - LedgerError subclasses from ``record`` when an entry payload is
      rejected at the boundary.
    - OverConsumptionError from the report methods when strict mode is on.
    - UnknownValuationMethodError for an unsupported method label.

Usage:
    service = ValuationService()            # packaged defaults
    ledger = service.record(ledger, form_payload, catalog)
    rows = service.report(catalog, ledger, "FIFO")
    view = service.dashboard(catalog, ledger)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from inventory_config import ValuationSettings, get_active_settings
from inventory_engines.valuation import (
    InventorySummary,
    ValuationMethod,
    ValuationResult,
    build_report,
    compare_methods,
    narrative_context,
    summarize,
)
from inventory_kernel.domain.catalog import Ledger, Product, Transaction, parse_transaction
from inventory_kernel.exceptions import LedgerError
from inventory_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.valuation")


@dataclass(frozen=True)
class DashboardView:
    """Report rows plus the aggregate figures shown beside them."""

    method: ValuationMethod
    rows: tuple[ValuationResult, ...]
    summary: InventorySummary


class ValuationService:
    """
    Valuation entry point for callers that work with settings.

    Contract:
        Receives ValuationSettings via constructor injection; when omitted,
        ``get_active_settings()`` resolves them.
    Guarantees:
        - A method or strict flag passed to a call overrides the settings.
        - Every report call is independent: no state is kept between calls.
    Non-goals:
        - Does not persist the ledger.
        - Does not generate narrative text.
    """

    def __init__(self, settings: ValuationSettings | None = None):
        self.settings = settings if settings is not None else get_active_settings()

    # =========================================================================
    # Ledger entry
    # =========================================================================

    def record(
        self,
        ledger: Ledger,
        payload: Mapping[str, Any],
        catalog: Iterable[Product] | None = None,
    ) -> Ledger:
        """Validate an entry payload and append it to ``ledger``.

        Returns:
            The new Ledger; ``ledger`` itself is unchanged.

        Raises:
            LedgerError: If the payload is rejected (see parse_transaction).
            UnknownProductError: If ``catalog`` is given and lacks the product.
        """
        try:
            tx = parse_transaction(payload, catalog=catalog)
        except LedgerError as exc:
            logger.warning("ledger_entry_rejected", extra={
                "error_code": exc.code,
                "reason": str(exc),
            })
            raise
        return ledger.append(tx)

    # =========================================================================
    # Reports
    # =========================================================================

    def resolve_method(self, method: ValuationMethod | str | None) -> ValuationMethod:
        return ValuationMethod.parse(method if method is not None else self.settings.default_method)

    def report(
        self,
        products: Sequence[Product],
        transactions: Iterable[Transaction],
        method: ValuationMethod | str | None = None,
        *,
        strict: bool | None = None,
    ) -> tuple[ValuationResult, ...]:
        """Valuation report under ``method`` (settings default when None)."""
        resolved = self.resolve_method(method)
        with LogContext.bind(report_id=uuid4().hex, method=resolved.value):
            return build_report(
                products,
                transactions,
                resolved,
                currency=self.settings.currency,
                strict=self.settings.strict if strict is None else strict,
                max_workers=self.settings.max_workers,
            )

    def compare(
        self,
        products: Sequence[Product],
        transactions: Iterable[Transaction],
        *,
        strict: bool | None = None,
    ) -> dict[ValuationMethod, tuple[ValuationResult, ...]]:
        """Reports under all three methods, keyed by method."""
        with LogContext.bind(report_id=uuid4().hex):
            return compare_methods(
                products,
                transactions,
                currency=self.settings.currency,
                strict=self.settings.strict if strict is None else strict,
                max_workers=self.settings.max_workers,
            )

    def dashboard(
        self,
        products: Sequence[Product],
        transactions: Iterable[Transaction],
        method: ValuationMethod | str | None = None,
        *,
        strict: bool | None = None,
    ) -> DashboardView:
        """Report rows and dashboard totals under one method."""
        resolved = self.resolve_method(method)
        rows = self.report(products, transactions, resolved, strict=strict)
        summary = summarize(
            rows,
            products,
            top_n=self.settings.top_by_value_n,
            currency=self.settings.currency,
        )
        return DashboardView(method=resolved, rows=rows, summary=summary)

    def narrative_context(
        self,
        products: Sequence[Product],
        transactions: Sequence[Transaction],
        method: ValuationMethod | str | None = None,
        *,
        as_of: datetime | None = None,
    ) -> dict[str, Any]:
        """Context payload for the narrative collaborator.

        ``as_of`` defaults to the current UTC time; the engines never read
        the clock themselves.
        """
        transactions = tuple(transactions)
        rows = self.report(products, transactions, method)
        return narrative_context(
            products,
            transactions,
            rows,
            as_of=as_of or datetime.now(timezone.utc),
        )
