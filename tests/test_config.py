"""Tests for tablekit.config -- defaults, validation and serialization."""

from __future__ import annotations

import pytest

from tablekit.config import (
    CellConfig,
    TableConfig,
    config_from_dict,
    config_to_dict,
    deep_merge,
    drop_columns,
    validate_config,
)
from tablekit.errors import ConfigError
from tablekit.types import Padding


class TestDefaults:
    def test_section_defaults(self) -> None:
        cfg = TableConfig()
        assert cfg.header.formatting.align == "center"
        assert cfg.header.formatting.auto_format is True
        assert cfg.row.formatting.align == "left"
        assert cfg.footer.formatting.align == "right"
        for position in ("header", "row", "footer"):
            assert cfg.section(position).formatting.wrap == "normal"  # type: ignore[arg-type]
            assert cfg.section(position).formatting.merge == "none"  # type: ignore[arg-type]

    def test_table_defaults(self) -> None:
        cfg = TableConfig(tab_width=8, east_asian=False)
        assert cfg.max_width == 0
        assert cfg.column_widths == {}
        assert cfg.trim_space is True
        assert cfg.strict is False

    def test_tab_width_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("TABWIDTH", "4")
        assert TableConfig().tab_width == 4

    def test_per_column_overrides(self) -> None:
        cell = CellConfig(column_padding={1: Padding("", "")}, column_aligns={2: "right"})
        assert cell.padding_for(0) == Padding()
        assert cell.padding_for(1) == Padding("", "")
        assert cell.align_for(2) == "right"
        assert cell.align_for(0) == "left"


class TestValidate:
    def test_default_config_is_valid(self) -> None:
        validate_config(TableConfig())

    def test_unknown_wrap_mode(self) -> None:
        cfg = TableConfig()
        cfg.row.formatting.wrap = "sideways"  # type: ignore[assignment]
        with pytest.raises(ConfigError, match="wrap mode"):
            validate_config(cfg)

    def test_unknown_merge_mode(self) -> None:
        cfg = TableConfig()
        cfg.header.formatting.merge = "diagonal"  # type: ignore[assignment]
        with pytest.raises(ConfigError, match="merge mode"):
            validate_config(cfg)

    def test_unknown_column_alignment(self) -> None:
        cfg = TableConfig()
        cfg.row.column_aligns[0] = "justify"  # type: ignore[assignment]
        with pytest.raises(ConfigError):
            validate_config(cfg)

    def test_column_width_below_one(self) -> None:
        with pytest.raises(ConfigError):
            validate_config(TableConfig(column_widths={0: 0}))

    def test_negative_column_index(self) -> None:
        with pytest.raises(ConfigError):
            validate_config(TableConfig(column_widths={-1: 3}))

    def test_negative_max_width(self) -> None:
        with pytest.raises(ConfigError):
            validate_config(TableConfig(max_width=-5))

    def test_tab_width_below_one(self) -> None:
        with pytest.raises(ConfigError):
            validate_config(TableConfig(tab_width=0))

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_config(TableConfig(max_width=-1))


class TestDeepMerge:
    def test_nested_dicts_merge(self) -> None:
        base = {"row": {"align": "left", "wrap": "normal"}, "maxWidth": 0}
        merged = deep_merge(base, {"row": {"align": "right"}})
        assert merged == {"row": {"align": "right", "wrap": "normal"}, "maxWidth": 0}

    def test_none_overrides_are_skipped(self) -> None:
        assert deep_merge({"a": 1}, {"a": None}) == {"a": 1}

    def test_scalars_replace(self) -> None:
        assert deep_merge({"a": {"b": 1}}, {"a": 5}) == {"a": 5}

    def test_base_not_mutated(self) -> None:
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestSerialization:
    def test_camel_case_keys(self) -> None:
        data = config_to_dict(TableConfig(column_widths={1: 5}, max_width=40))
        assert data["maxWidth"] == 40
        assert data["columnWidths"] == {"1": 5}
        assert data["header"]["autoFormat"] is True
        assert "trimSpace" in data and "tabWidth" in data and "eastAsian" in data

    def test_round_trip(self) -> None:
        cfg = TableConfig(column_widths={0: 3}, max_width=50, tab_width=4, east_asian=True, strict=True)
        cfg.row.formatting.merge = "vertical"
        cfg.row.column_padding[1] = Padding("[", "]", top="-")
        cfg.footer.column_aligns[0] = "left"
        assert config_from_dict(config_to_dict(cfg)) == cfg

    def test_partial_dict_merges_over_defaults(self) -> None:
        cfg = config_from_dict({"maxWidth": 40, "row": {"align": "right"}})
        assert cfg.max_width == 40
        assert cfg.row.formatting.align == "right"
        assert cfg.row.formatting.wrap == "normal"
        assert cfg.header.formatting.align == "center"

    def test_invalid_dict_raises(self) -> None:
        with pytest.raises(ConfigError):
            config_from_dict({"row": {"wrap": "bogus"}})


class TestSectionExtras:
    def test_max_width_for(self) -> None:
        cell = CellConfig(max_width=10, column_max_widths={1: 4})
        assert cell.max_width_for(0) == 10
        assert cell.max_width_for(1) == 4
        assert CellConfig().max_width_for(0) == 0

    def test_apply_filters(self) -> None:
        cell = CellConfig(
            filter=lambda cells: cells + ["added"],
            column_filters={0: str.upper, 5: str.lower},
        )
        assert cell.apply_filters(["a", "b"]) == ["A", "b", "added"]
        assert CellConfig().apply_filters(["a"]) == ["a"]

    def test_invalid_section_caps(self) -> None:
        cfg = TableConfig()
        cfg.row.max_width = -1
        with pytest.raises(ConfigError):
            validate_config(cfg)
        cfg = TableConfig()
        cfg.footer.column_max_widths = {0: 0}
        with pytest.raises(ConfigError):
            validate_config(cfg)

    def test_drop_columns_shifts_settings(self) -> None:
        cfg = TableConfig(column_widths={0: 3, 2: 7})
        cfg.row.column_aligns = {1: "right", 2: "center"}
        cfg.header.column_max_widths = {2: 4}
        cfg.row.column_filters = {2: str.upper}
        result = drop_columns(cfg, {1}, 3)
        assert result.column_widths == {0: 3, 1: 7}
        assert result.row.column_aligns == {1: "center"}
        assert result.header.column_max_widths == {1: 4}
        assert result.row.column_filters == {1: str.upper}
        assert cfg.row.column_aligns == {1: "right", 2: "center"}

    def test_caps_and_auto_hide_round_trip(self) -> None:
        cfg = TableConfig(auto_hide=True, tab_width=8, east_asian=False)
        cfg.header.max_width = 12
        cfg.row.column_max_widths = {2: 5}
        data = config_to_dict(cfg)
        assert data["autoHide"] is True
        assert data["header"]["maxWidth"] == 12
        assert data["row"]["columnMaxWidths"] == {"2": 5}
        assert config_from_dict(data) == cfg
