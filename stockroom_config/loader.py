"""
Configuration Loader (``stockroom_config.loader``).

Responsibility
--------------
Loads ledger configuration YAML files and parses them into typed
``stockroom_config.schema`` dataclass instances, validating every value on
the way in.  The public runtime entry point is
``stockroom_config.get_ledger_config()``.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on the kernel (for the
error base class) and on the engine registries (to validate strategy and
filter kinds).  Never imported by the kernel or the engines.

Invariants enforced
-------------------
* Every parse error raises ``ConfigurationError`` naming the source and the
  offending key; there are no silent defaults for required fields.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Structurally invalid configuration  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from stockroom_config.schema import (
    CategoryDef,
    FilterDef,
    LedgerConfiguration,
    StrategyDef,
)
from stockroom_engines.admission import ADMISSION_FILTERS
from stockroom_engines.allocation import ALLOCATION_STRATEGIES
from stockroom_kernel.domain.items import CategoryKind
from stockroom_kernel.exceptions import StockroomError


class ConfigurationError(StockroomError):
    """Raised when a ledger configuration is structurally invalid."""

    code: str = "CONFIGURATION_INVALID"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of the raw configuration mapping."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _require_mapping(value: Any, where: str, source: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigurationError(source, f"'{where}' must be a mapping")
    return value


def _require_int(
    data: dict[str, Any], key: str, where: str, source: str, minimum: int = 0
) -> int:
    if key not in data:
        raise ConfigurationError(source, f"'{where}.{key}' is required")
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(source, f"'{where}.{key}' must be an integer")
    if value < minimum:
        raise ConfigurationError(
            source, f"'{where}.{key}' must be >= {minimum}, got {value}"
        )
    return value


def parse_datetime(value: Any, where: str, source: str) -> datetime:
    """Parse a timezone-aware datetime from YAML (string or datetime)."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            raise ConfigurationError(
                source, f"'{where}' is not an ISO-8601 datetime: {value!r}"
            ) from None
    if not isinstance(value, datetime):
        raise ConfigurationError(source, f"'{where}' must be a datetime")
    if value.tzinfo is None:
        raise ConfigurationError(source, f"'{where}' must carry a UTC offset")
    return value


def parse_category(data: Any, where: str, source: str) -> CategoryDef:
    """Parse a CategoryDef from a dict."""
    data = _require_mapping(data, where, source)
    kind = data.get("kind")
    if kind == CategoryKind.NORMAL.value:
        return CategoryDef(kind=kind)
    if kind == CategoryKind.OVERSIZED.value:
        return CategoryDef(
            kind=kind, span=_require_int(data, "span", where, source, minimum=1)
        )
    if kind == CategoryKind.FRAGILE.value:
        if "expires_at" not in data:
            raise ConfigurationError(source, f"'{where}.expires_at' is required")
        return CategoryDef(
            kind=kind,
            expires_at=parse_datetime(data["expires_at"], f"{where}.expires_at", source),
            max_row=_require_int(data, "max_row", where, source),
        )
    raise ConfigurationError(
        source,
        f"'{where}.kind' must be one of {[k.value for k in CategoryKind]}, got {kind!r}",
    )


def parse_filter(data: Any, where: str, source: str) -> FilterDef:
    """Parse a FilterDef from a dict."""
    data = _require_mapping(data, where, source)
    kind = data.get("kind")
    if kind not in ADMISSION_FILTERS:
        raise ConfigurationError(
            source,
            f"'{where}.kind' must be one of {sorted(ADMISSION_FILTERS)}, got {kind!r}",
        )

    if kind == "limit_oversized":
        return FilterDef(
            kind=kind, max_allowed=_require_int(data, "max_allowed", where, source)
        )
    if kind == "limit_item_quantity":
        return FilterDef(
            kind=kind,
            item_id=_require_int(data, "item_id", where, source),
            max_allowed=_require_int(data, "max_allowed", where, source),
        )
    if "category" not in data:
        raise ConfigurationError(source, f"'{where}.category' is required")
    return FilterDef(
        kind=kind, category=parse_category(data["category"], f"{where}.category", source)
    )


def parse_strategy(data: Any, source: str) -> StrategyDef:
    """Parse a StrategyDef from a dict."""
    data = _require_mapping(data, "ledger.strategy", source)
    kind = data.get("kind")
    if kind not in ALLOCATION_STRATEGIES:
        raise ConfigurationError(
            source,
            f"'ledger.strategy.kind' must be one of {sorted(ALLOCATION_STRATEGIES)}, "
            f"got {kind!r}",
        )
    return StrategyDef(kind=kind)


def _validate_spans(config: LedgerConfiguration, source: str) -> None:
    for position, filter_def in enumerate(config.filters):
        category = filter_def.category
        if category is not None and category.span is not None:
            if category.span > config.grid_extent:
                raise ConfigurationError(
                    source,
                    f"'ledger.filters[{position}]' bans span {category.span}, "
                    f"larger than grid_extent {config.grid_extent}",
                )


def parse_configuration(
    data: dict[str, Any], source: str = "<memory>"
) -> LedgerConfiguration:
    """
    Parse a ``LedgerConfiguration`` from a dict.

    Raises:
        ConfigurationError: on any missing or invalid value.
    """
    data = _require_mapping(data, "<root>", source)
    ledger = _require_mapping(data.get("ledger"), "ledger", source)

    raw_filters = ledger.get("filters") or []
    if not isinstance(raw_filters, list):
        raise ConfigurationError(source, "'ledger.filters' must be a list")

    if "strategy" not in ledger:
        raise ConfigurationError(source, "'ledger.strategy' is required")

    config = LedgerConfiguration(
        config_id=str(data.get("config_id", Path(source).stem)),
        grid_extent=_require_int(ledger, "grid_extent", "ledger", source, minimum=1),
        strategy=parse_strategy(ledger["strategy"], source),
        filters=tuple(
            parse_filter(raw, f"ledger.filters[{position}]", source)
            for position, raw in enumerate(raw_filters)
        ),
        checksum=compute_checksum(data),
    )
    _validate_spans(config, source)
    return config


def load_configuration(path: Path) -> LedgerConfiguration:
    """Load and parse a ledger configuration YAML file."""
    return parse_configuration(load_yaml_file(path), source=str(path))
