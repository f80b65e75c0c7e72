#!/usr/bin/env python3
"""
Print an inventory valuation report for a YAML catalog + ledger file.

The file holds a ``products:`` list and a ``transactions:`` list (see
scripts/sample_ledger.yaml).  Every entry is validated the same way the
entry form's payloads are; the first rejected entry aborts the run.

Usage:
    python3 scripts/valuation_report.py
    python3 scripts/valuation_report.py --ledger my_ledger.yaml --method fifo
    python3 scripts/valuation_report.py --all-methods --config scripts/sample_settings.yaml
    python3 scripts/valuation_report.py --json --strict
"""

import argparse
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

import yaml  # noqa: E402

from inventory_config import get_active_settings  # noqa: E402
from inventory_engines.valuation import ValuationMethod  # noqa: E402
from inventory_kernel.domain.catalog import Ledger, parse_product, parse_transaction  # noqa: E402
from inventory_kernel.exceptions import InventoryKernelError  # noqa: E402
from inventory_kernel.logging_config import configure_logging  # noqa: E402
from inventory_services import ValuationService  # noqa: E402

SAMPLE_LEDGER = Path(__file__).resolve().parent / "sample_ledger.yaml"

W = 78
AMT_W = 18


def load_ledger_file(path: Path):
    """Read products and transactions from a YAML file.

    Returns:
        (tuple of Product, Ledger)
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    products = tuple(parse_product(p) for p in data.get("products") or ())
    ledger = Ledger()
    for payload in data.get("transactions") or ():
        ledger = ledger.append(parse_transaction(payload, catalog=products))
    return products, ledger


def _fmt(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def print_report(rows, summary, method: ValuationMethod, currency: str) -> None:
    name_w = W - 8 - 2 * AMT_W
    print("=" * W)
    print(f"  INVENTORY VALUATION  -  {method.value}  ({currency})")
    print("=" * W)
    print(f"  {'Product':<{name_w}}{'Qty':>6}{'Unit value':>{AMT_W}}{'Total value':>{AMT_W}}")
    print(f"  {'-' * (W - 2)}")
    for row in rows:
        flag = " *" if row.is_over_consumed else ""
        print(
            f"  {row.product_name[:name_w]:<{name_w}}{row.quantity_on_hand:>6}"
            f"{_fmt(row.unit_value.amount):>{AMT_W}}{_fmt(row.total_value.amount) + flag:>{AMT_W}}"
        )
    print(f"  {'-' * (W - 2)}")
    print(
        f"  {'TOTALS':<{name_w}}{summary.total_quantity:>6}"
        f"{'':>{AMT_W}}{_fmt(summary.total_value.amount):>{AMT_W}}"
    )
    if summary.low_stock:
        print()
        print("  Low stock: " + ", ".join(row.product_name for row in summary.low_stock))
    if summary.over_consumed:
        print("  * more units sold than produced; excess ignored")
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inventory valuation report (FIFO / LIFO / AVERAGE)")
    parser.add_argument("--ledger", type=Path, default=SAMPLE_LEDGER, help="YAML file with products and transactions")
    parser.add_argument("--method", help="FIFO, LIFO or AVERAGE (default: from settings)")
    parser.add_argument("--all-methods", action="store_true", help="Report under every method")
    parser.add_argument("--strict", action="store_true", help="Fail when a product sells more than it produced")
    parser.add_argument("--json", action="store_true", help="Print JSON rows instead of a table")
    parser.add_argument("--config", type=Path, help="Valuation settings YAML")
    parser.add_argument("--verbose", action="store_true", help="Structured logs on stderr")
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(level=logging.INFO)
    else:
        logging.disable(logging.CRITICAL)

    try:
        service = ValuationService(get_active_settings(args.config))
        products, ledger = load_ledger_file(args.ledger)
        strict = True if args.strict else None
        if args.all_methods:
            methods = list(ValuationMethod)
        else:
            methods = [service.resolve_method(args.method)]

        output = {}
        for method in methods:
            view = service.dashboard(products, ledger, method, strict=strict)
            if args.json:
                output[method.value] = {
                    "rows": [row.to_dict() for row in view.rows],
                    "totalValue": str(view.summary.total_value.amount),
                    "totalQuantity": view.summary.total_quantity,
                }
            else:
                print_report(view.rows, view.summary, method, service.settings.currency)
    except (InventoryKernelError, OSError, yaml.YAMLError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
