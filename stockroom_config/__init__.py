"""
stockroom_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the way to obtain a ledger configuration at runtime through
    ``get_ledger_config()``.  Returns a frozen ``LedgerConfiguration``;
    ``stockroom_config.bridges`` turns it into strategy and filter objects.

Architecture position:
    Configuration -- YAML-driven, validated at load time.
    This package sits above ``stockroom_kernel`` / ``stockroom_engines``
    and below ``stockroom_services``.  The kernel and engines MUST NEVER
    import from ``stockroom_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested YAML file does not exist.
    - ``ConfigurationError`` -- structural or value validation failures.

Audit relevance:
    Every successful ``get_ledger_config()`` call emits a
    ``STOCKROOM_CONFIG_TRACE`` log entry containing the config_id,
    checksum, grid extent, strategy and filter count.
"""

from __future__ import annotations

from pathlib import Path

from stockroom_config.loader import ConfigurationError, load_configuration
from stockroom_config.schema import (
    CategoryDef,
    FilterDef,
    LedgerConfiguration,
    StrategyDef,
)
from stockroom_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_CONFIG_PATH = _DEFAULT_CONFIG_DIR / "default.yaml"


def get_ledger_config(path: Path | str | None = None) -> LedgerConfiguration:
    """Load, validate and trace a ledger configuration.

    Args:
        path: YAML file to load. Defaults to the packaged ``default.yaml``
            (grid extent 3, round-robin, no filters).

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ConfigurationError: if the file fails validation.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config = load_configuration(config_path)

    _logger.info(
        "STOCKROOM_CONFIG_TRACE",
        extra={
            "trace_type": "STOCKROOM_CONFIG_TRACE",
            "config_id": config.config_id,
            "checksum": config.checksum,
            "grid_extent": config.grid_extent,
            "strategy": config.strategy.kind,
            "filter_count": len(config.filters),
        },
    )
    return config


__all__ = [
    "CategoryDef",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "FilterDef",
    "LedgerConfiguration",
    "StrategyDef",
    "get_ledger_config",
]
