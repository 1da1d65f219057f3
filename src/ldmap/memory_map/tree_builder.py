"""Stateful tree builder for the memory-map block.

Nodes live in an arena (one list of section drafts, one list of sub-section
drafts) and are addressed by ``NodeHandle``. The builder keeps explicit
handles to the open section and its open sub-section; a node stops being
mutable once a later node takes its place as the focus.

Cursor transitions per classified line:

- section name: open a new section. ``has_extent`` when address and size
  are on the line, else ``no_extent``. Any open sub-section is closed.
- sub-section name:
    1. same name and same address as the open sub-section: overlap merge,
       the line's text is appended to its contributor. Cursor unchanged.
    2. an unsized open sub-section and cursor not ``has_contributor``: the
       name becomes an alias of that sub-section.
    3. otherwise a new sub-section opens with cursor ``no_extent``.
   Address + size on the line assign the extent (``has_extent``), and text
   on the same line becomes the contributor (``has_contributor``).
- data line (no name), applied to the focus node:
    ``no_extent``        address + size assign the extent; text on a
                         sub-section focus becomes the contributor.
    ``has_extent``       address + size + text fill the contributor.
                         Address + text without size on a section focus
                         open an anonymous sub-section.
    ``has_contributor``  address + text without size is a demangled
                         continuation.

Everything else is ignored and, where it points at malformed input,
recorded in ``warnings``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ldmap.map_types import Section, SubSection
from ldmap.memory_map.types import (
    BuilderAction,
    FillCursor,
    LineFields,
    NodeHandle,
    Transition,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _SubSectionDraft:
    names: list[str]
    address: str = ""
    size: str = ""
    contributor: str = ""
    demangled: list[str] = field(default_factory=list)

    @property
    def is_sized(self) -> bool:
        return bool(self.address and self.size)

    def freeze(self) -> SubSection:
        return SubSection(
            names=tuple(self.names),
            address=self.address,
            size=self.size,
            contributor=self.contributor,
            demangled=tuple(self.demangled),
        )


@dataclass(slots=True)
class _SectionDraft:
    name: str
    address: str = ""
    size: str = ""
    sub_indices: list[int] = field(default_factory=list)

    @property
    def is_sized(self) -> bool:
        return bool(self.address and self.size)


class MemoryMapBuilder:
    """Builds Section/SubSection records from classified lines, one at a time."""

    def __init__(self) -> None:
        self._sections: list[_SectionDraft] = []
        self._subs: list[_SubSectionDraft] = []
        self._open_section: int | None = None
        self._open_sub: int | None = None
        self.cursor: FillCursor = "no_extent"
        self.warnings: list[str] = []

    # ------------------------------------------------------------------
    # Arena access
    # ------------------------------------------------------------------

    @property
    def focus(self) -> NodeHandle | None:
        """Node the next data line applies to."""
        if self._open_sub is not None:
            return NodeHandle("sub_section", self._open_sub)
        if self._open_section is not None:
            return NodeHandle("section", self._open_section)
        return None

    @property
    def section_count(self) -> int:
        return len(self._sections)

    def section_at(self, index: int) -> Section:
        draft = self._sections[index]
        return Section(
            name=draft.name,
            address=draft.address,
            size=draft.size,
            sub_sections=tuple(self._subs[i].freeze() for i in draft.sub_indices),
        )

    def sub_section_at(self, index: int) -> SubSection:
        return self._subs[index].freeze()

    def build(self) -> tuple[Section, ...]:
        """Freeze the arena into immutable records, in input order."""
        return tuple(self.section_at(i) for i in range(len(self._sections)))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def feed(self, fields: LineFields, *, line_no: int = 0) -> Transition:
        """Apply one classified line and report what changed."""

        before = self.cursor
        actions: list[BuilderAction] = []
        if fields.name and fields.is_section:
            self._section_line(fields, actions)
        elif fields.name:
            self._sub_section_line(fields, actions, line_no)
        else:
            self._data_line(fields, actions, line_no)
        if not actions:
            actions.append("ignored")
        return Transition(
            line_no=line_no,
            cursor_before=before,
            cursor_after=self.cursor,
            focus=self.focus,
            actions=tuple(actions),
        )

    def _warn(self, code: str, line_no: int) -> None:
        log.debug("Memory map line %d dropped: %s", line_no, code)
        self.warnings.append(f"{code}:{line_no}")

    def _section_line(self, fields: LineFields, actions: list[BuilderAction]) -> None:
        draft = _SectionDraft(name=fields.name)
        self._sections.append(draft)
        self._open_section = len(self._sections) - 1
        self._open_sub = None
        actions.append("open_section")
        if fields.has_extent:
            draft.address = fields.address
            draft.size = fields.size
            actions.append("assign_extent")
            self.cursor = "has_extent"
        else:
            self.cursor = "no_extent"

    def _new_sub(self, names: list[str]) -> _SubSectionDraft:
        assert self._open_section is not None
        draft = _SubSectionDraft(names=names)
        self._subs.append(draft)
        self._open_sub = len(self._subs) - 1
        self._sections[self._open_section].sub_indices.append(self._open_sub)
        return draft

    def _sub_section_line(
        self,
        fields: LineFields,
        actions: list[BuilderAction],
        line_no: int,
    ) -> None:
        if self._open_section is None:
            self._warn("sub_section_without_section", line_no)
            return

        last = self._subs[self._open_sub] if self._open_sub is not None else None
        if (
            last is not None
            and fields.name in last.names
            and fields.address
            and fields.address == last.address
        ):
            if fields.text:
                # No leading separator when the first placement had no contributor.
                last.contributor = (
                    f"{last.contributor} {fields.text}" if last.contributor else fields.text
                )
                self.cursor = "has_contributor"
            actions.append("merge_overlap")
            return

        if last is not None and self.cursor != "has_contributor" and not last.is_sized:
            if fields.name not in last.names:
                last.names.append(fields.name)
            target = last
            actions.append("add_alias")
        else:
            target = self._new_sub([fields.name])
            self.cursor = "no_extent"
            actions.append("open_sub_section")

        if fields.has_extent:
            target.address = fields.address
            target.size = fields.size
            actions.append("assign_extent")
            self.cursor = "has_extent"
            if fields.text:
                target.contributor = fields.text
                actions.append("assign_contributor")
                self.cursor = "has_contributor"

    def _data_line(
        self,
        fields: LineFields,
        actions: list[BuilderAction],
        line_no: int,
    ) -> None:
        if self._open_section is None:
            self._warn("data_line_without_section", line_no)
            return
        if not fields.address:
            return

        section = self._sections[self._open_section]
        sub = self._subs[self._open_sub] if self._open_sub is not None else None

        if self.cursor == "no_extent":
            if not fields.has_extent:
                return
            node = sub if sub is not None else section
            if not node.is_sized:
                node.address = fields.address
                node.size = fields.size
                actions.append("assign_extent")
            self.cursor = "has_extent"
            if sub is not None and fields.text:
                sub.contributor = fields.text
                actions.append("assign_contributor")
                self.cursor = "has_contributor"
            return

        if self.cursor == "has_extent":
            if fields.has_extent and fields.text:
                if sub is None:
                    self._warn("contributor_on_section", line_no)
                    return
                if not sub.is_sized:
                    sub.address = fields.address
                    sub.size = fields.size
                    actions.append("assign_extent")
                sub.contributor = fields.text
                actions.append("assign_contributor")
                self.cursor = "has_contributor"
            elif not fields.size and fields.text:
                if sub is not None:
                    self._warn("symbol_without_contributor", line_no)
                    return
                anonymous = self._new_sub([])
                anonymous.address = fields.address
                anonymous.contributor = fields.text
                actions.extend(("open_anonymous_sub_section", "assign_contributor"))
                self.cursor = "has_contributor"
            return

        # has_contributor
        if sub is not None and not fields.size and fields.text:
            sub.demangled.append(fields.text)
            actions.append("append_demangled")
