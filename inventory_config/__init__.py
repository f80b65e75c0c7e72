"""
inventory_config -- single public entrypoint for valuation settings.

Responsibility:
    Provides the ONLY way to obtain engine settings at runtime through
    ``get_active_settings()``.  No other component reads settings files or
    environment variables directly.

Architecture position:
    Configuration -- sits above ``inventory_kernel`` and below
    ``inventory_services``.  The kernel and the engines MUST NEVER import
    from ``inventory_config``.

Resolution order:
    1. the ``path`` argument;
    2. the file named by the ``INVENTORY_VALUATION_CONFIG`` environment
       variable;
    3. the packaged ``defaults.yaml``.

Failure modes:
    - ``FileNotFoundError`` -- the selected file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ConfigurationError`` -- unknown keys or invalid values.

Audit relevance:
    Every successful call emits an ``INVENTORY_CONFIG_TRACE`` log entry
    with the source path and settings checksum.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from inventory_config.loader import load_yaml_file, parse_settings
from inventory_config.schema import ValuationSettings

_logger = logging.getLogger("inventory_kernel.config")

CONFIG_ENV_VAR = "INVENTORY_VALUATION_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_settings(path: Path | str | None = None) -> ValuationSettings:
    """The ONLY public settings entrypoint.

    Args:
        path: Explicit settings file; overrides the environment variable.

    Returns:
        Frozen ValuationSettings.
    """
    if path is not None:
        source = Path(path)
    elif os.environ.get(CONFIG_ENV_VAR):
        source = Path(os.environ[CONFIG_ENV_VAR])
    else:
        source = DEFAULT_CONFIG_PATH

    settings = parse_settings(load_yaml_file(source))

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "source": str(source),
            "checksum": settings.checksum,
            "currency": settings.currency,
            "default_method": settings.default_method,
            "strict": settings.strict,
        },
    )
    return settings


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "ValuationSettings",
    "get_active_settings",
]
