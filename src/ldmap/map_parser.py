"""Map-file parser: routes report lines to the per-block handlers.

Single pass, one line at a time::

    read_map_lines -> BlockRouter -> accumulator / MemoryMapBlock -> MapDocument

``parse_map_document`` is a pure function of its input lines; every call
builds fresh handlers.
"""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ldmap.accumulators import (
    ArchiveMemberAccumulator,
    DiscardedSectionAccumulator,
    MemoryRegionAccumulator,
)
from ldmap.layout import DEFAULT_LAYOUT, MapLayout
from ldmap.map_types import MapDocument, MapParseResult
from ldmap.memory_map.block import MemoryMapBlock
from ldmap.router import BlockRouter

log = logging.getLogger(__name__)


class MapInputError(RuntimeError):
    """Raised when the map file is missing or cannot be read."""


@dataclass(slots=True)
class LineReadStats:
    """Counters filled in by ``read_map_lines``."""

    read: int = 0
    skipped: int = 0


def _split_chunks(blocks: Iterable[bytes]) -> Iterator[bytes]:
    # Binary file iteration only breaks on b"\n"; a bare b"\r" still ends a line.
    for block in blocks:
        yield from block.splitlines()


def decode_lines(
    raw: bytes | Iterable[bytes],
    *,
    encoding: str = "utf-8",
    stats: LineReadStats | None = None,
) -> Iterator[str]:
    """Split raw bytes on any line ending and decode each line on its own.

    ``raw`` is either the whole report or a stream of byte blocks such as
    an open binary file. Lines that fail to decode are logged and skipped.
    """

    stats = stats if stats is not None else LineReadStats()
    chunks = raw.splitlines() if isinstance(raw, bytes) else _split_chunks(raw)
    for line_no, chunk in enumerate(chunks, start=1):
        try:
            line = chunk.decode(encoding)
        except UnicodeDecodeError as exc:
            stats.skipped += 1
            log.warning("Error reading line %d: %s", line_no, exc)
            continue
        stats.read += 1
        yield line


def _stream_file(path: Path, encoding: str, stats: LineReadStats | None) -> Iterator[str]:
    try:
        f = path.open("rb")
    except OSError as exc:
        raise MapInputError(f"Error opening file {path}: {exc}") from exc
    with f:
        yield from decode_lines(f, encoding=encoding, stats=stats)


def read_map_lines(
    path: Path,
    *,
    encoding: str = "utf-8",
    stats: LineReadStats | None = None,
) -> Iterator[str]:
    """Stream the lines of a map file without line endings.

    A missing file is reported immediately; the file is opened on first use.
    """

    if not path.is_file():
        raise MapInputError(f"File at path '{path}' does not exist.")
    return _stream_file(path, encoding, stats)


def parse_map_lines(
    lines: Iterable[str],
    *,
    layout: MapLayout = DEFAULT_LAYOUT,
) -> MapParseResult:
    """Parse a map report and keep the parse diagnostics."""

    router = BlockRouter(layout)
    archive = ArchiveMemberAccumulator()
    discarded = DiscardedSectionAccumulator(layout)
    regions = MemoryRegionAccumulator(layout)
    memory_map = MemoryMapBlock(layout)
    block_counts: Counter[str] = Counter()

    for line_no, line in enumerate(lines, start=1):
        block = router.route(line)
        if block is None:
            continue
        block_counts[block] += 1
        if block == "archive_members":
            archive.add(line)
        elif block == "discarded_sections":
            discarded.add(line)
        elif block == "memory_configuration":
            regions.add(line)
        else:
            memory_map.handle(line, line_no=line_no)

    document = MapDocument(
        archive_members=tuple(archive.entries),
        discarded_sections=tuple(discarded.entries),
        memory_regions=tuple(regions.regions),
        sections=memory_map.sections(),
    )
    return MapParseResult(
        document=document,
        warnings=memory_map.warnings,
        block_line_counts=dict(sorted(block_counts.items())),
    )


def parse_map_document(
    lines: Iterable[str],
    *,
    layout: MapLayout = DEFAULT_LAYOUT,
) -> MapDocument:
    """Parse map report lines into a ``MapDocument``."""
    return parse_map_lines(lines, layout=layout).document


def parse_map_file(
    path: Path,
    *,
    layout: MapLayout = DEFAULT_LAYOUT,
    encoding: str = "utf-8",
) -> MapParseResult:
    """Read and parse a map file. Raises ``MapInputError`` if it cannot be read."""

    stats = LineReadStats()
    result = parse_map_lines(
        read_map_lines(path, encoding=encoding, stats=stats),
        layout=layout,
    )
    return MapParseResult(
        document=result.document,
        warnings=result.warnings,
        skipped_lines=stats.skipped,
        block_line_counts=result.block_line_counts,
    )
