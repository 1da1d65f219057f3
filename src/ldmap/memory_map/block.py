"""Line handler for the memory-map block: noise filter -> classifier -> builder."""

from __future__ import annotations

from collections import Counter

from ldmap.layout import DEFAULT_LAYOUT, MapLayout
from ldmap.map_types import Section
from ldmap.memory_map.classifier import classify_line
from ldmap.memory_map.noise import noise_reason
from ldmap.memory_map.tree_builder import MemoryMapBuilder
from ldmap.memory_map.types import Transition


class MemoryMapBlock:
    """Consumes raw memory-map lines and accumulates the section tree."""

    def __init__(self, layout: MapLayout = DEFAULT_LAYOUT) -> None:
        self.layout = layout
        self.builder = MemoryMapBuilder()
        self.noise_counts: Counter[str] = Counter()

    def handle(self, line: str, *, line_no: int = 0) -> Transition | None:
        """Feed one line; returns None when the line was filtered as noise."""
        reason = noise_reason(line, self.layout)
        if reason is not None:
            self.noise_counts[reason] += 1
            return None
        return self.builder.feed(classify_line(line, self.layout), line_no=line_no)

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(self.builder.warnings)

    def sections(self) -> tuple[Section, ...]:
        return self.builder.build()


def parse_memory_map_lines(
    lines: list[str],
    layout: MapLayout = DEFAULT_LAYOUT,
) -> tuple[tuple[Section, ...], tuple[str, ...]]:
    """Parse the body of a memory-map block (marker line excluded).

    Returns:
    1. sections in input order
    2. builder warnings
    """

    block = MemoryMapBlock(layout)
    for line_no, line in enumerate(lines, start=1):
        block.handle(line, line_no=line_no)
    return block.sections(), block.warnings
