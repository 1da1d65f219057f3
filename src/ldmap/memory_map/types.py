"""Core types for memory-map line classification and tree building."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


# Fill progress of whatever node is currently being completed.
type FillCursor = Literal["no_extent", "has_extent", "has_contributor"]
type NodeKind = Literal["section", "sub_section"]
type BuilderAction = Literal[
    "open_section",
    "open_sub_section",
    "open_anonymous_sub_section",
    "add_alias",
    "merge_overlap",
    "assign_extent",
    "assign_contributor",
    "append_demangled",
    "ignored",
]


@dataclass(frozen=True, slots=True)
class LineFields:
    """Optional fields carried by one memory-map line."""

    name: str = ""
    is_section: bool = False
    address: str = ""
    size: str = ""
    text: str = ""

    def __post_init__(self) -> None:
        if self.is_section and not self.name:
            raise ValueError("a section line must carry a name")

    @property
    def has_extent(self) -> bool:
        return bool(self.address and self.size)

    @property
    def is_data_line(self) -> bool:
        return not self.name


@dataclass(frozen=True, slots=True)
class NodeHandle:
    """Index of a node in the builder's arena."""

    kind: NodeKind
    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"index must be >= 0, got {self.index}")


@dataclass(frozen=True, slots=True)
class Transition:
    """What one classified line did to the builder."""

    line_no: int
    cursor_before: FillCursor
    cursor_after: FillCursor
    focus: NodeHandle | None
    actions: tuple[BuilderAction, ...]

    @property
    def ignored(self) -> bool:
        return self.actions == ("ignored",)
