"""Tests for ldmap.memory_map.classifier."""
from __future__ import annotations

from ldmap.layout import MapLayout
from ldmap.memory_map.classifier import (
    classify_line,
    has_address_column,
    has_size_column,
    has_text_tail,
)
from ldmap.memory_map.types import LineFields


def _row(name: str, address: str, size: str = "", text: str = "") -> str:
    """Render a line the way GNU ld pads a 32-bit map row."""
    line = f"{name:<16}{address}"
    if size:
        line += f"{size:>11}"
        if text:
            line += f" {text}"
    elif text:
        line += " " * 16 + text
    return line


class TestShortLines:
    def test_short_section_name(self) -> None:
        assert classify_line(".data") == LineFields(name=".data", is_section=True)

    def test_short_sub_section_name(self) -> None:
        assert classify_line(" .bss") == LineFields(name=".bss", is_section=False)

    def test_blank_line_carries_nothing(self) -> None:
        assert classify_line("") == LineFields()
        assert classify_line("   ") == LineFields()


class TestLongNameOnly:
    def test_long_section_name(self) -> None:
        fields = classify_line(".bss_section_with_a_long_name")
        assert fields.name == ".bss_section_with_a_long_name"
        assert fields.is_section is True
        assert fields.address == ""

    def test_long_sub_section_name(self) -> None:
        fields = classify_line(" .text.startup_routine_with_long_name")
        assert fields.name == ".text.startup_routine_with_long_name"
        assert fields.is_section is False
        assert not fields.has_extent

    def test_exactly_name_column_wide(self) -> None:
        fields = classify_line(".exactly16chars_")
        assert fields == LineFields(name=".exactly16chars_", is_section=True)


class TestAddressLines:
    def test_section_header_with_extent(self) -> None:
        line = ".text           0x00000000      0x100"
        assert line == _row(".text", "0x00000000", "0x100")
        fields = classify_line(line)
        assert fields == LineFields(
            name=".text",
            is_section=True,
            address="0x00000000",
            size="0x100",
        )

    def test_sub_section_full_row(self) -> None:
        fields = classify_line(_row(" .text", "0x08000188", "0x50", "obj/main.o"))
        assert fields.name == ".text"
        assert fields.is_section is False
        assert fields.address == "0x08000188"
        assert fields.size == "0x50"
        assert fields.text == "obj/main.o"

    def test_continuation_extent_and_contributor(self) -> None:
        fields = classify_line(_row("", "0x08000208", "0x40", "obj/startup.o"))
        assert fields.name == ""
        assert fields.is_data_line
        assert (fields.address, fields.size, fields.text) == ("0x08000208", "0x40", "obj/startup.o")

    def test_symbol_line_has_no_size(self) -> None:
        fields = classify_line(_row("", "0x08000188", text="main"))
        assert fields.address == "0x08000188"
        assert fields.size == ""
        assert fields.text == "main"

    def test_hex_looking_text_is_not_a_size(self) -> None:
        fields = classify_line(_row("", "0x08000188", text="0x1234 odd_symbol"))
        assert fields.size == ""
        assert fields.text == "0x1234 odd_symbol"

    def test_contributor_with_spaces_is_joined(self) -> None:
        fields = classify_line(_row(" .text", "0x0800026a", "0x1be", "lib dir/libc.a(memcpy.o)"))
        assert fields.text == "lib dir/libc.a(memcpy.o)"

    def test_fill_row_with_trailing_space(self) -> None:
        line = " *fill*         0x08000268        0x2 "
        fields = classify_line(line)
        assert fields.name == "*fill*"
        assert fields.is_section is False
        assert fields.size == "0x2"
        assert fields.text == ""

    def test_provide_marker_counts_as_address(self) -> None:
        line = " " * 16 + "[!provide]" + " " * 24 + "PROVIDE (end = .)"
        fields = classify_line(line)
        assert fields.name == ""
        assert fields.address == "[!provide]"
        assert fields.size == ""
        assert fields.text == "PROVIDE (end = .)"

    def test_section_row_with_load_address_text(self) -> None:
        fields = classify_line(_row(".data", "0x20000000", "0x8", "load address 0x08000428"))
        assert fields.is_section is True
        assert fields.size == "0x8"
        assert fields.text == "load address 0x08000428"


class TestProbes:
    def test_address_probe(self) -> None:
        assert has_address_column(_row("", "0x0"))
        assert not has_address_column(" .text")
        assert not has_address_column(" " * 20 + "PROVIDE")

    def test_size_probe_reads_single_column(self) -> None:
        assert has_size_column(_row("", "0x00000000", "0x2"))
        assert not has_size_column(_row("", "0x00000000", text="sym"))

    def test_line_ending_before_probe_reads_size_token(self) -> None:
        assert has_size_column(_row("", "0x00000000"))
        # No token after the address still yields an empty size.
        assert classify_line(_row("", "0x00000000")).size == ""

    def test_short_section_header_keeps_extent(self) -> None:
        fields = classify_line(".data           0x20 0x8")
        assert fields == LineFields(name=".data", is_section=True, address="0x20", size="0x8")

    def test_wider_probe_on_short_header(self) -> None:
        fields = classify_line(".text           0x00000000      0x100", MapLayout(size_probe_width=41))
        assert (fields.address, fields.size) == ("0x00000000", "0x100")

    def test_text_tail(self) -> None:
        assert has_text_tail(_row("", "0x00000000", "0x2", "a.o"))
        assert not has_text_tail(_row("", "0x00000000", "0x2") + "   ")

    def test_custom_layout_for_wide_addresses(self) -> None:
        wide = MapLayout(size_probe_width=45)
        line = " .text          0x0000000000001000       0x50 foo.o"
        fields = classify_line(line, wide)
        assert fields.address == "0x0000000000001000"
        assert fields.size == "0x50"
        assert fields.text == "foo.o"
