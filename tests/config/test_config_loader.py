"""
Tests for ledger configuration loading, validation and bridges.

Verifies:
- The packaged default and preset configuration sets
- Every validation failure raises ConfigurationError naming the key
- Checksums are deterministic and change with content
- Bridges build the runtime strategy and filter objects
- STOCKROOM_CONFIG_TRACE is emitted by get_ledger_config
"""

import json
import logging
from datetime import UTC, datetime
from io import StringIO

import pytest
import yaml

from stockroom_config import (
    DEFAULT_CONFIG_PATH,
    CategoryDef,
    ConfigurationError,
    FilterDef,
    StrategyDef,
    get_ledger_config,
)
from stockroom_config.bridges import (
    build_allocator,
    build_category,
    build_filter,
    build_filters,
)
from stockroom_config.loader import (
    compute_checksum,
    load_configuration,
    parse_configuration,
    parse_datetime,
)
from stockroom_engines.admission import BanCategory, LimitItemQuantity, LimitOverSized
from stockroom_engines.allocation import GreedyAllocator, RoundRobinAllocator
from stockroom_kernel.domain.items import Fragile, Normal, OverSized
from stockroom_kernel.logging_config import StructuredFormatter, configure_logging

PRESETS_PATH = DEFAULT_CONFIG_PATH.parent / "presets.yaml"


def _config(**ledger_overrides) -> dict:
    ledger = {"grid_extent": 3, "strategy": {"kind": "greedy"}, "filters": []}
    ledger.update(ledger_overrides)
    return {"config_id": "test", "ledger": ledger}


class TestPackagedSets:
    def test_default_set(self):
        config = get_ledger_config()
        assert config.config_id == "default"
        assert config.grid_extent == 3
        assert config.strategy == StrategyDef(kind="round_robin")
        assert config.filters == ()
        assert len(config.checksum) == 64

    def test_presets_set(self):
        config = load_configuration(PRESETS_PATH)
        assert [f.kind for f in config.filters] == [
            "limit_oversized",
            "limit_oversized",
            "limit_item_quantity",
            "ban_category",
        ]
        assert config.filters[3].category == CategoryDef(kind="oversized", span=3)

    def test_get_ledger_config_accepts_path(self, tmp_path):
        path = tmp_path / "greedy_ledger.yaml"
        path.write_text(yaml.safe_dump(_config()))
        config = get_ledger_config(path)
        assert config.strategy.kind == "greedy"
        assert config.config_id == "test"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_ledger_config(tmp_path / "absent.yaml")

    def test_config_trace_logged(self):
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        configure_logging(handler=handler)

        config = get_ledger_config()

        record = json.loads(stream.getvalue().splitlines()[0])
        assert record["message"] == "STOCKROOM_CONFIG_TRACE"
        assert record["config_id"] == "default"
        assert record["checksum"] == config.checksum
        assert record["strategy"] == "round_robin"
        assert record["filter_count"] == 0


class TestParseConfiguration:
    def test_full_configuration(self):
        data = _config(
            filters=[
                {"kind": "limit_oversized", "max_allowed": 1},
                {"kind": "limit_item_quantity", "item_id": 0, "max_allowed": 50},
                {
                    "kind": "ban_category",
                    "category": {
                        "kind": "fragile",
                        "expires_at": "2020-01-01T14:30:00+00:00",
                        "max_row": 1,
                    },
                },
            ]
        )
        config = parse_configuration(data)

        assert config.filters[0] == FilterDef(kind="limit_oversized", max_allowed=1)
        assert config.filters[1] == FilterDef(
            kind="limit_item_quantity", item_id=0, max_allowed=50
        )
        assert config.filters[2].category.expires_at == datetime(
            2020, 1, 1, 14, 30, tzinfo=UTC
        )

    def test_config_id_defaults_to_file_stem(self):
        data = _config()
        del data["config_id"]
        assert parse_configuration(data, source="sets/warehouse.yaml").config_id == "warehouse"

    def test_filters_may_be_omitted(self):
        data = _config()
        del data["ledger"]["filters"]
        assert parse_configuration(data).filters == ()

    def test_checksum_deterministic(self):
        assert compute_checksum(_config()) == compute_checksum(_config())
        assert compute_checksum(_config()) != compute_checksum(_config(grid_extent=4))

    @pytest.mark.parametrize(
        "data, fragment",
        [
            ({"config_id": "x"}, "'ledger' must be a mapping"),
            (_config(grid_extent=0), "ledger.grid_extent"),
            (_config(grid_extent="3"), "ledger.grid_extent"),
            (_config(grid_extent=True), "ledger.grid_extent"),
            (_config(strategy={"kind": "first_fit"}), "ledger.strategy.kind"),
            (_config(strategy="greedy"), "ledger.strategy"),
            (_config(filters={"kind": "limit_oversized"}), "must be a list"),
            (_config(filters=[{"kind": "limit_weight"}]), "ledger.filters[0].kind"),
            (_config(filters=[{"kind": "limit_oversized"}]), "max_allowed"),
            (
                _config(filters=[{"kind": "limit_oversized", "max_allowed": -1}]),
                "max_allowed",
            ),
            (
                _config(filters=[{"kind": "limit_item_quantity", "max_allowed": 5}]),
                "item_id",
            ),
            (_config(filters=[{"kind": "ban_category"}]), "category"),
            (
                _config(
                    filters=[{"kind": "ban_category", "category": {"kind": "huge"}}]
                ),
                "category.kind",
            ),
            (
                _config(
                    filters=[
                        {"kind": "ban_category", "category": {"kind": "oversized"}}
                    ]
                ),
                "span",
            ),
            (
                _config(
                    filters=[
                        {
                            "kind": "ban_category",
                            "category": {"kind": "oversized", "span": 4},
                        }
                    ]
                ),
                "larger than grid_extent",
            ),
            (
                _config(
                    filters=[
                        {
                            "kind": "ban_category",
                            "category": {
                                "kind": "fragile",
                                "expires_at": "2020-01-01T14:30:00",
                                "max_row": 1,
                            },
                        }
                    ]
                ),
                "UTC offset",
            ),
        ],
    )
    def test_invalid_configuration(self, data, fragment):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_configuration(data, source="bad.yaml")
        assert exc_info.value.code == "CONFIGURATION_INVALID"
        assert exc_info.value.source == "bad.yaml"
        assert fragment in exc_info.value.reason

    def test_missing_strategy(self):
        data = _config()
        del data["ledger"]["strategy"]
        with pytest.raises(ConfigurationError, match="ledger.strategy"):
            parse_configuration(data)

    def test_yaml_timestamps_accepted(self, tmp_path):
        path = tmp_path / "fragile.yaml"
        path.write_text(
            "ledger:\n"
            "  grid_extent: 3\n"
            "  strategy: {kind: round_robin}\n"
            "  filters:\n"
            "    - kind: ban_category\n"
            "      category:\n"
            "        kind: fragile\n"
            "        expires_at: 2020-01-01 14:30:00+00:00\n"
            "        max_row: 1\n"
        )
        config = load_configuration(path)
        assert config.config_id == "fragile"
        assert config.filters[0].category.expires_at == datetime(
            2020, 1, 1, 14, 30, tzinfo=UTC
        )

    def test_parse_datetime_rejects_garbage(self):
        with pytest.raises(ConfigurationError, match="ISO-8601"):
            parse_datetime("yesterday", "when", "inline")


class TestBridges:
    def test_build_category(self):
        expiry = datetime(2020, 1, 1, tzinfo=UTC)
        assert build_category(CategoryDef(kind="normal")) == Normal()
        assert build_category(CategoryDef(kind="oversized", span=2)) == OverSized(2)
        assert build_category(
            CategoryDef(kind="fragile", expires_at=expiry, max_row=1)
        ) == Fragile(expiry, 1)

    def test_build_filter_kinds(self):
        assert isinstance(
            build_filter(FilterDef(kind="limit_oversized", max_allowed=1)),
            LimitOverSized,
        )
        assert isinstance(
            build_filter(
                FilterDef(kind="limit_item_quantity", item_id=0, max_allowed=50)
            ),
            LimitItemQuantity,
        )
        banned = build_filter(
            FilterDef(kind="ban_category", category=CategoryDef(kind="oversized", span=3))
        )
        assert isinstance(banned, BanCategory)
        assert banned.category == OverSized(3)

    def test_build_filters_keeps_order(self):
        config = load_configuration(PRESETS_PATH)
        assert [f.describe() for f in build_filters(config.filters)] == [
            "LimitOverSized(1)",
            "LimitOverSized(2)",
            "LimitItemQuantity(0, 50)",
            "BanCategory(OverSized(3))",
        ]

    def test_build_allocator(self):
        assert isinstance(build_allocator(StrategyDef(kind="greedy")), GreedyAllocator)
        assert isinstance(
            build_allocator(StrategyDef(kind="round_robin")), RoundRobinAllocator
        )
