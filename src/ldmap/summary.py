"""Per-section size roll-up by contributor."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from ldmap.map_types import MapDocument


@dataclass(frozen=True, slots=True)
class ContributorTotal:
    contributor: str
    size: int
    sub_section_count: int


@dataclass(frozen=True, slots=True)
class SectionSummary:
    name: str
    address: str
    size: str
    contributed_size: int
    contributors: tuple[ContributorTotal, ...]


def parse_size(text: str) -> int:
    """Parse a linker size field (``0x1a`` or decimal). Unparseable -> 0."""
    value = text.strip()
    if not value:
        return 0
    try:
        return int(value, 16) if value.lower().startswith("0x") else int(value)
    except ValueError:
        return 0


def summarize_contributors(document: MapDocument) -> list[SectionSummary]:
    """Sum sub-section sizes by contributor for every section.

    Contributors are ordered by descending size, then by name.
    """

    summaries: list[SectionSummary] = []
    for section in document.sections:
        sizes: defaultdict[str, int] = defaultdict(int)
        counts: defaultdict[str, int] = defaultdict(int)
        for sub in section.sub_sections:
            sizes[sub.contributor] += parse_size(sub.size)
            counts[sub.contributor] += 1
        contributors = tuple(
            ContributorTotal(contributor=name, size=sizes[name], sub_section_count=counts[name])
            for name in sorted(sizes, key=lambda name: (-sizes[name], name))
        )
        summaries.append(
            SectionSummary(
                name=section.name,
                address=section.address,
                size=section.size,
                contributed_size=sum(sizes.values()),
                contributors=contributors,
            ),
        )
    return summaries


def summary_to_dict(summaries: list[SectionSummary]) -> list[dict[str, object]]:
    return [
        {
            "name": row.name,
            "address": row.address,
            "size": row.size,
            "contributed_size": row.contributed_size,
            "contributors": [
                {
                    "contributor": c.contributor,
                    "size": c.size,
                    "sub_section_count": c.sub_section_count,
                }
                for c in row.contributors
            ],
        }
        for row in summaries
    ]
