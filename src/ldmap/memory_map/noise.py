"""Noise filter for the ``Linker script and memory map`` block."""
from __future__ import annotations

from ldmap.layout import DEFAULT_LAYOUT, MapLayout


_NOISE_PREFIXES = ("LOAD", "START GROUP", "END GROUP", "OUTPUT(")


def noise_reason(line: str, layout: MapLayout = DEFAULT_LAYOUT) -> str | None:
    """Return why ``line`` carries no placement data, or None if it does."""

    if not line.strip():
        return "blank"
    for prefix in _NOISE_PREFIXES:
        if line.startswith(prefix):
            return f"directive:{prefix.rstrip('(')}"
    if line.startswith(layout.load_address_prefix):
        return "load_address"
    # Echoed input-section patterns, e.g. " *(.text)" or " *(.text.*)"
    if (line.startswith(" *(") and line.endswith(")")) or line.endswith("*)"):
        return "script_fragment"
    return None


def is_noise_line(line: str, layout: MapLayout = DEFAULT_LAYOUT) -> bool:
    return noise_reason(line, layout) is not None
