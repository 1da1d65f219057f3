"""Block router: splits the map report into its four blocks by marker line."""
from __future__ import annotations

import logging

from ldmap.layout import DEFAULT_LAYOUT, MapLayout
from ldmap.map_types import BlockKind

log = logging.getLogger(__name__)


def marker_table(layout: MapLayout) -> tuple[tuple[str, BlockKind], ...]:
    """Marker prefixes in priority order."""
    return (
        (layout.archive_members_marker, "archive_members"),
        (layout.discarded_sections_marker, "discarded_sections"),
        (layout.memory_configuration_marker, "memory_configuration"),
        (layout.memory_map_marker, "memory_map"),
    )


def match_marker(line: str, layout: MapLayout = DEFAULT_LAYOUT) -> BlockKind | None:
    """Return the block a marker line opens, or None for ordinary lines."""
    for prefix, block in marker_table(layout):
        if line.startswith(prefix):
            return block
    return None


class BlockRouter:
    """Tracks the active block and decides where each line goes.

    ``route`` returns the block that should consume the line, or None when
    the line is a marker (consumed here) or arrives before any marker.
    """

    def __init__(self, layout: MapLayout = DEFAULT_LAYOUT) -> None:
        self._markers = marker_table(layout)
        self.active_block: BlockKind | None = None

    def route(self, line: str) -> BlockKind | None:
        for prefix, block in self._markers:
            if line.startswith(prefix):
                log.info("Found %s: %s", block.replace("_", " "), line.rstrip())
                self.active_block = block
                return None
        return self.active_block
