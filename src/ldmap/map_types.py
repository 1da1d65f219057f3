"""Record types for a parsed linker map file.

All address/size/length fields are kept as the verbatim text printed by the
linker. Absent fields are empty strings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


type BlockKind = Literal[
    "archive_members",
    "discarded_sections",
    "memory_configuration",
    "memory_map",
]


@dataclass(frozen=True, slots=True)
class MemoryRegion:
    """One row of the ``Memory Configuration`` table."""

    name: str
    origin: str
    length: str
    attributes: str = ""


@dataclass(frozen=True, slots=True)
class SubSection:
    """An input fragment placed into an output section."""

    names: tuple[str, ...]      # ordered, duplicate-free aliases
    address: str = ""
    size: str = ""
    contributor: str = ""       # object file / symbol text
    demangled: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(set(self.names)) != len(self.names):
            raise ValueError(f"sub-section names must be unique, got {self.names!r}")

    @property
    def is_sized(self) -> bool:
        return bool(self.address and self.size)


@dataclass(frozen=True, slots=True)
class Section:
    """A top-level output section (e.g. ``.text``)."""

    name: str
    address: str = ""
    size: str = ""
    sub_sections: tuple[SubSection, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("section name cannot be empty")

    @property
    def is_sized(self) -> bool:
        return bool(self.address and self.size)


@dataclass(frozen=True, slots=True)
class MapDocument:
    """Root result: four independent collections, one per report block."""

    archive_members: tuple[str, ...] = ()
    discarded_sections: tuple[str, ...] = ()
    memory_regions: tuple[MemoryRegion, ...] = ()
    sections: tuple[Section, ...] = ()


@dataclass(frozen=True, slots=True)
class MapParseResult:
    """Parsed document plus parse diagnostics."""

    document: MapDocument
    warnings: tuple[str, ...] = ()
    skipped_lines: int = 0
    block_line_counts: dict[str, int] = field(default_factory=dict)


def memory_region_to_dict(region: MemoryRegion) -> dict[str, str]:
    return {
        "name": region.name,
        "origin": region.origin,
        "length": region.length,
        "attributes": region.attributes,
    }


def sub_section_to_dict(sub: SubSection) -> dict[str, object]:
    return {
        "names": list(sub.names),
        "address": sub.address,
        "size": sub.size,
        "contributor": sub.contributor,
        "demangled": list(sub.demangled),
    }


def section_to_dict(section: Section) -> dict[str, object]:
    return {
        "name": section.name,
        "address": section.address,
        "size": section.size,
        "sub_sections": [sub_section_to_dict(sub) for sub in section.sub_sections],
    }


def document_to_dict(document: MapDocument) -> dict[str, object]:
    """Serialize a document for JSON output and deterministic snapshots."""

    return {
        "archive_members": list(document.archive_members),
        "discarded_sections": list(document.discarded_sections),
        "memory_regions": [memory_region_to_dict(r) for r in document.memory_regions],
        "sections": [section_to_dict(s) for s in document.sections],
    }
