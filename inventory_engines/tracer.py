"""
inventory_engines.tracer -- INVENTORY_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps a pure engine entry point and, after each
    call, logs which engine ran (name and version), how long it took, and
    a fingerprint of the inputs that select its behaviour.  Two calls with
    the same fingerprint ran the same engine configuration.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Emits a log record only; adds no I/O to the engine itself.

Invariants enforced:
    - The fingerprint is the first 16 hex digits of a SHA-256 over a
      canonical text rendering of the chosen arguments.  Enum members
      render as their value, mappings with sorted keys, so equal inputs
      always hash alike.
    - Arguments are bound against the engine's signature with defaults
      applied: positional, keyword and omitted-default calls fingerprint
      alike.
    - Inputs and results pass through untouched.

Usage:
    @traced_engine("valuation_report", "1.0", fingerprint_fields=("method",))
    def build_report(products, transactions, method):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from datetime import date
from enum import Enum
from typing import Any

_logger = logging.getLogger("inventory_kernel.engines.tracer")


def _canonical_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return _canonical_text(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        entries = sorted((str(k), _canonical_text(v)) for k, v in value.items())
        return "{" + ",".join(f"{k}:{v}" for k, v in entries) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(map(_canonical_text, value)) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """16-hex-digit SHA-256 fingerprint of ``arguments[field]`` per field.

    A field absent from ``arguments`` counts as None ("null").
    """
    canonical = "|".join(
        f"{field}={_canonical_text(arguments.get(field))}" for field in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator emitting INVENTORY_ENGINE_TRACE after each engine call.

    Args:
        engine_name: Engine identifier, e.g. "valuation_report".
        engine_version: Engine version, e.g. "1.0".
        fingerprint_fields: Parameter names of the engine whose values go
            into the input fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        def fingerprint(args: tuple, kwargs: dict) -> str:
            if not fingerprint_fields:
                return ""
            bound = signature.bind_partial(*args, **kwargs)
            bound.apply_defaults()
            return compute_input_fingerprint(fingerprint_fields, bound.arguments)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            input_fingerprint = fingerprint(args, kwargs)
            started = time.monotonic()
            result = func(*args, **kwargs)
            _logger.info("INVENTORY_ENGINE_TRACE", extra={
                "trace_type": "INVENTORY_ENGINE_TRACE",
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": input_fingerprint,
                "duration_ms": round((time.monotonic() - started) * 1000, 2),
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
