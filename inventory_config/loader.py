"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into a frozen
``ValuationSettings``.  The single public entry point for runtime settings
is ``inventory_config.get_active_settings()``.

Invariants enforced
-------------------
* Unknown keys and invalid values raise ``ConfigurationError``; a typo
  never silently falls back to a default.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid settings  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import VALUATION_METHODS, ValuationSettings
from inventory_kernel.domain.currency import CurrencyRegistry
from inventory_kernel.exceptions import ConfigurationError

_SECTION = "valuation"
_KNOWN_KEYS = frozenset({"currency", "default_method", "strict", "max_workers", "top_by_value_n"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "settings file must contain a mapping")
    return data


def _positive_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(key, f"must be a positive integer, got {value!r}")
    return value


def parse_settings(data: dict[str, Any]) -> ValuationSettings:
    """
    Parse ``ValuationSettings`` from a loaded YAML document.

    The settings may sit under a top-level ``valuation:`` key or at the
    top level.  Missing keys take the schema defaults.

    Raises:
        ConfigurationError: on unknown keys or invalid values.
    """
    section = data.get(_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigurationError(_SECTION, "must be a mapping")

    unknown = sorted(set(section) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(unknown[0], "unknown setting")

    defaults = ValuationSettings()

    currency = section.get("currency", defaults.currency)
    if not CurrencyRegistry.is_valid(currency):
        raise ConfigurationError("currency", f"not a supported ISO 4217 code: {currency!r}")

    method = str(section.get("default_method", defaults.default_method)).strip().upper()
    if method not in VALUATION_METHODS:
        raise ConfigurationError(
            "default_method", f"must be one of {sorted(VALUATION_METHODS)}, got {method!r}"
        )

    strict = section.get("strict", defaults.strict)
    if not isinstance(strict, bool):
        raise ConfigurationError("strict", f"must be true or false, got {strict!r}")

    normalized = {
        "currency": currency.strip().upper(),
        "default_method": method,
        "strict": strict,
        "max_workers": _positive_int(section, "max_workers", defaults.max_workers),
        "top_by_value_n": _positive_int(section, "top_by_value_n", defaults.top_by_value_n),
    }
    return ValuationSettings(**normalized, checksum=compute_checksum(normalized))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 checksum of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
