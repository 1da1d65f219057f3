"""Line classifier for the memory-map block.

The report is column aligned only while fields are short. A name longer
than the name column pushes the address onto the next line, and object
paths or symbol text may start with anything. Field presence is therefore
decided by probing fixed character offsets (``MapLayout.name_column`` and
``MapLayout.size_probe_width``) and the values are then read as tokens.

Line shapes (32-bit GNU ld)::

    .text           0x00000000      0x100           section with extent
    .text.very_long_output_name                     section name only
     .text          0x00000000       0x50 foo.o     sub-section, full row
     .text.startup                                  sub-section name only
                    0x00000050       0x20 bar.o     extent + contributor
                    0x00000050                main  symbol / demangled text
"""
from __future__ import annotations

from ldmap.layout import DEFAULT_LAYOUT, MapLayout
from ldmap.memory_map.types import LineFields


_ADDRESS_MARKERS = ("0x", "[!")


def _name_only(line: str) -> LineFields:
    tokens = line.split(maxsplit=1)
    if not tokens:
        return LineFields()
    return LineFields(name=tokens[0], is_section=not line.startswith(" "))


def has_address_column(line: str, layout: MapLayout = DEFAULT_LAYOUT) -> bool:
    """True when an address (or ``[!provide]`` marker) starts at the name column."""
    if len(line) < layout.name_column:
        return False
    return line[layout.name_column:].startswith(_ADDRESS_MARKERS)


def has_size_column(line: str, layout: MapLayout = DEFAULT_LAYOUT) -> bool:
    """True when the size column is occupied; its last digit sits just before the probe width.

    A line that ends before the probe offset is not column aligned, so
    whatever token follows the address is read as the size.
    """
    probe = layout.size_probe_width - 1
    return len(line) <= probe or line[probe] != " "


def has_text_tail(line: str, layout: MapLayout = DEFAULT_LAYOUT) -> bool:
    width = layout.size_probe_width
    return len(line) > width and bool(line[width:].strip())


def classify_line(line: str, layout: MapLayout = DEFAULT_LAYOUT) -> LineFields:
    """Split a memory-map line into name / address / size / text fields."""

    if not has_address_column(line, layout):
        # Short or long name with nothing else on the line.
        return _name_only(line)

    tokens = iter(line.split())
    name = ""
    is_section = False
    if not line.startswith("  "):
        name = next(tokens, "")
        is_section = not line.startswith(" ")
    address = next(tokens, "")
    size = next(tokens, "") if has_size_column(line, layout) else ""
    text = " ".join(tokens) if has_text_tail(line, layout) else ""
    return LineFields(
        name=name,
        is_section=is_section,
        address=address,
        size=size,
        text=text,
    )
