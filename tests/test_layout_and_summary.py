"""Tests for ldmap.layout and ldmap.summary."""
from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from ldmap.layout import (
    DEFAULT_LAYOUT,
    LayoutConfigError,
    MapLayout,
    layout_from_dict,
    load_layout,
)
from ldmap.map_types import MapDocument, Section, SubSection
from ldmap.summary import parse_size, summarize_contributors, summary_to_dict


class TestMapLayout:
    def test_default_constants(self) -> None:
        assert DEFAULT_LAYOUT.name_column == 16
        assert DEFAULT_LAYOUT.size_probe_width == len("*fill*         0x000002a6        0x2 ")
        assert DEFAULT_LAYOUT.size_probe_width == 37
        assert DEFAULT_LAYOUT.load_address_prefix == " " * 33 + "0x"
        assert DEFAULT_LAYOUT.discarded_wrap_prefix == " " * 16

    def test_probe_must_lie_past_name_column(self) -> None:
        with pytest.raises(LayoutConfigError, match="size_probe_width"):
            MapLayout(size_probe_width=10)

    def test_overrides(self) -> None:
        layout = layout_from_dict({"size_probe_width": 45, "memory_map_marker": "Memory map"})
        assert layout.size_probe_width == 45
        assert layout.memory_map_marker == "Memory map"
        assert layout.name_column == 16

    def test_unknown_key(self) -> None:
        with pytest.raises(LayoutConfigError, match="Unknown layout key"):
            layout_from_dict({"anchor": 41})

    def test_wrong_type(self) -> None:
        with pytest.raises(LayoutConfigError, match="must be an integer"):
            layout_from_dict({"name_column": "16"})
        with pytest.raises(LayoutConfigError, match="must be an integer"):
            layout_from_dict({"name_column": True})
        with pytest.raises(LayoutConfigError, match="must be a string"):
            layout_from_dict({"memory_map_marker": 3})

    def test_load_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.json"
        path.write_bytes(orjson.dumps({"load_address_indent": 41}))
        assert load_layout(path).load_address_indent == 41

    def test_load_layout_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.json"
        path.write_bytes(b"[1, 2]")
        with pytest.raises(LayoutConfigError, match="Expected JSON object"):
            load_layout(path)


class TestSummary:
    def test_parse_size(self) -> None:
        assert parse_size("0x1be") == 446
        assert parse_size("0X10") == 16
        assert parse_size("12") == 12
        assert parse_size("") == 0
        assert parse_size("[!provide]") == 0

    def test_contributors_are_rolled_up(self) -> None:
        document = MapDocument(
            sections=(
                Section(
                    name=".text",
                    address="0x0",
                    size="0x80",
                    sub_sections=(
                        SubSection((".text",), "0x0", "0x20", "a.o"),
                        SubSection((".text.x",), "0x20", "0x40", "b.o"),
                        SubSection((".text.y",), "0x60", "0x20", "a.o"),
                        SubSection(("*fill*",), "0x80", "0x2"),
                    ),
                ),
            ),
        )
        (row,) = summary_to_dict(summarize_contributors(document))
        assert row["contributed_size"] == 0x82
        assert row["contributors"] == [
            {"contributor": "a.o", "size": 0x40, "sub_section_count": 2},
            {"contributor": "b.o", "size": 0x40, "sub_section_count": 1},
            {"contributor": "", "size": 2, "sub_section_count": 1},
        ]

    def test_section_without_sub_sections(self) -> None:
        (row,) = summarize_contributors(MapDocument(sections=(Section(name=".comment"),)))
        assert row.contributed_size == 0
        assert row.contributors == ()
