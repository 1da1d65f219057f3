"""Accumulators for the three table-like blocks of the map report."""
from __future__ import annotations

from ldmap.layout import DEFAULT_LAYOUT, MapLayout
from ldmap.map_types import MemoryRegion


def normalize_whitespace(line: str) -> str:
    """Collapse whitespace runs to single tabs and trim the ends."""
    return "\t".join(line.split())


class ArchiveMemberAccumulator:
    """``Archive member included to satisfy reference by file (symbol)``.

    Each non-blank line is kept as one tab-separated entry.
    """

    def __init__(self) -> None:
        self.entries: list[str] = []

    def add(self, line: str) -> None:
        if line.strip():
            self.entries.append(normalize_whitespace(line))


class DiscardedSectionAccumulator:
    """``Discarded input sections``.

    A name too long for its column wraps onto a line indented by
    ``discarded_wrap_indent`` spaces; that line is joined onto the previous
    entry before normalization.
    """

    def __init__(self, layout: MapLayout = DEFAULT_LAYOUT) -> None:
        self._wrap_prefix = layout.discarded_wrap_prefix
        self._raw: list[str] = []

    def add(self, line: str) -> None:
        if not line.strip():
            return
        if line.startswith(self._wrap_prefix) and self._raw:
            self._raw[-1] = self._raw[-1] + line
        else:
            self._raw.append(line)

    @property
    def entries(self) -> list[str]:
        return [normalize_whitespace(raw) for raw in self._raw]


class MemoryRegionAccumulator:
    """``Memory Configuration`` table rows: name, origin, length, attributes."""

    def __init__(self, layout: MapLayout = DEFAULT_LAYOUT) -> None:
        self._header = layout.memory_region_header
        self._default_prefix = layout.default_region_prefix
        self.regions: list[MemoryRegion] = []

    def add(self, line: str) -> None:
        if (
            not line.strip()
            or line.startswith(self._default_prefix)
            or line.startswith(self._header)
        ):
            return
        tokens = line.split()
        padded = tokens + [""] * (3 - len(tokens))
        self.regions.append(
            MemoryRegion(
                name=padded[0],
                origin=padded[1],
                length=padded[2],
                attributes=" ".join(tokens[3:]),
            ),
        )
