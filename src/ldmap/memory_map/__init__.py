"""Memory-map block parsing: noise filter, line classifier and tree builder."""

from ldmap.memory_map.block import MemoryMapBlock, parse_memory_map_lines
from ldmap.memory_map.classifier import (
    classify_line,
    has_address_column,
    has_size_column,
    has_text_tail,
)
from ldmap.memory_map.noise import is_noise_line, noise_reason
from ldmap.memory_map.tree_builder import MemoryMapBuilder
from ldmap.memory_map.types import (
    BuilderAction,
    FillCursor,
    LineFields,
    NodeHandle,
    NodeKind,
    Transition,
)

__all__ = [
    "BuilderAction",
    "FillCursor",
    "LineFields",
    "MemoryMapBlock",
    "MemoryMapBuilder",
    "NodeHandle",
    "NodeKind",
    "Transition",
    "classify_line",
    "has_address_column",
    "has_size_column",
    "has_text_tail",
    "is_noise_line",
    "noise_reason",
    "parse_memory_map_lines",
]
