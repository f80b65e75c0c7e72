"""
ValuationSettings schema.

The reviewable source artifact for engine configuration.  YAML files are
parsed into this type by the loader; nothing else reads settings files.
"""

from __future__ import annotations

from dataclasses import dataclass

VALUATION_METHODS: frozenset[str] = frozenset({"FIFO", "LIFO", "AVERAGE"})


@dataclass(frozen=True)
class ValuationSettings:
    """Defaults applied to valuation reports when the caller gives none."""

    currency: str = "USD"
    default_method: str = "AVERAGE"  # FIFO, LIFO or AVERAGE
    strict: bool = False  # raise on over-consumption instead of clamping
    max_workers: int = 1  # >1 fans per-product passes out over threads
    top_by_value_n: int = 10  # rows in the dashboard's top-by-value list
    checksum: str = ""
