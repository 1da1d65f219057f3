"""Column constants of the GNU ld map report.

The linker pads names, addresses and sizes to fixed widths as long as they
fit and overflows onto continuation lines when they do not. The offsets
below are properties of the report generator; a different report variant
only needs a different ``MapLayout``.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from ldmap.io_utils import load_json


# A fill line at the canonical widths; only its length is used.
_SIZE_PROBE_TEMPLATE = "*fill*         0x000002a6        0x2 "

ARCHIVE_MEMBERS_MARKER = "Archive member included to satisfy reference by file"
DISCARDED_SECTIONS_MARKER = "Discarded input sections"
MEMORY_CONFIGURATION_MARKER = "Memory Configuration"
MEMORY_MAP_MARKER = "Linker script and memory map"

MEMORY_REGION_HEADER = "Name             Origin             Length             Attributes"
DEFAULT_REGION_PREFIX = "*default*"


class LayoutConfigError(ValueError):
    """Raised when a layout override file is malformed."""


@dataclass(frozen=True, slots=True)
class MapLayout:
    """Format constants for one map-report variant."""

    name_column: int = 16
    size_probe_width: int = len(_SIZE_PROBE_TEMPLATE)
    load_address_indent: int = 33
    discarded_wrap_indent: int = 16
    archive_members_marker: str = ARCHIVE_MEMBERS_MARKER
    discarded_sections_marker: str = DISCARDED_SECTIONS_MARKER
    memory_configuration_marker: str = MEMORY_CONFIGURATION_MARKER
    memory_map_marker: str = MEMORY_MAP_MARKER
    memory_region_header: str = MEMORY_REGION_HEADER
    default_region_prefix: str = DEFAULT_REGION_PREFIX

    def __post_init__(self) -> None:
        if self.name_column <= 0:
            raise LayoutConfigError(f"name_column must be > 0, got {self.name_column}")
        if self.size_probe_width <= self.name_column:
            raise LayoutConfigError(
                "size_probe_width must be > name_column, "
                f"got {self.size_probe_width} <= {self.name_column}",
            )
        if self.load_address_indent <= 0 or self.discarded_wrap_indent <= 0:
            raise LayoutConfigError("indent widths must be > 0")
        for name in (
            "archive_members_marker",
            "discarded_sections_marker",
            "memory_configuration_marker",
            "memory_map_marker",
        ):
            if not getattr(self, name):
                raise LayoutConfigError(f"{name} cannot be empty")

    @property
    def name_indent(self) -> str:
        return " " * self.name_column

    @property
    def load_address_prefix(self) -> str:
        return " " * self.load_address_indent + "0x"

    @property
    def discarded_wrap_prefix(self) -> str:
        return " " * self.discarded_wrap_indent


DEFAULT_LAYOUT = MapLayout()


def layout_from_dict(payload: dict[str, Any], *, base: MapLayout = DEFAULT_LAYOUT) -> MapLayout:
    """Apply a dict of overrides on top of ``base``."""

    known = {f.name: f for f in fields(MapLayout)}
    overrides: dict[str, Any] = {}
    for key, value in payload.items():
        if key not in known:
            raise LayoutConfigError(f"Unknown layout key: {key!r}")
        expected = int if isinstance(getattr(base, key), int) else str
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise LayoutConfigError(f"Layout key {key!r} must be an integer, got {value!r}")
        if expected is str and not isinstance(value, str):
            raise LayoutConfigError(f"Layout key {key!r} must be a string, got {value!r}")
        overrides[key] = value
    return replace(base, **overrides)


def load_layout(path: Path) -> MapLayout:
    """Load layout overrides from a JSON object file."""

    payload = load_json(path)
    if not isinstance(payload, dict):
        raise LayoutConfigError(f"Expected JSON object in {path}")
    return layout_from_dict(payload)
