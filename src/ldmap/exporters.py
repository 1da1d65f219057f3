"""Artifact writers for a parsed map document.

Artifacts (written only when their collection is non-empty):
    archive_members.tsv
    discarded_sections.tsv
    memory_configuration.tsv | memory_configuration.json
    memory_map.tsv           | linker_script_memory_map.json
    <any>.duckdb             -- optional, whole document

Each artifact is written independently: a failure is logged and recorded
on the report, and the remaining artifacts are still attempted.
"""
from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ldmap.io_utils import save_json, save_tsv
from ldmap.map_types import (
    MapDocument,
    memory_region_to_dict,
    section_to_dict,
)

# DuckDB: dynamic import for pyright compatibility
_duckdb = importlib.import_module("duckdb")

log = logging.getLogger(__name__)

ARCHIVE_MEMBERS_TSV = "archive_members.tsv"
DISCARDED_SECTIONS_TSV = "discarded_sections.tsv"
MEMORY_CONFIGURATION_TSV = "memory_configuration.tsv"
MEMORY_CONFIGURATION_JSON = "memory_configuration.json"
MEMORY_MAP_TSV = "memory_map.tsv"
MEMORY_MAP_JSON = "linker_script_memory_map.json"

SCHEMA_VERSION = "1.0"


@dataclass(slots=True)
class ExportReport:
    """Which artifacts were written and which failed."""

    written: list[Path] = field(default_factory=list)
    failures: list[dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def memory_region_rows(document: MapDocument) -> list[tuple[str, str, str, str]]:
    return [
        (r.name, r.origin, r.length, r.attributes)
        for r in document.memory_regions
    ]


def memory_map_rows(document: MapDocument) -> list[tuple[str, str, str, str, str, str]]:
    """One row per sub-section; sections without sub-sections emit nothing."""
    return [
        (
            section.name,
            " ".join(sub.names),
            sub.address,
            sub.size,
            sub.contributor,
            " ".join(sub.demangled),
        )
        for section in document.sections
        for sub in section.sub_sections
    ]


def memory_map_payload(document: MapDocument) -> list[dict[str, object]]:
    return [section_to_dict(s) for s in document.sections]


def memory_configuration_payload(document: MapDocument) -> list[dict[str, str]]:
    return [memory_region_to_dict(r) for r in document.memory_regions]


# ---------------------------------------------------------------------------
# DuckDB
# ---------------------------------------------------------------------------

_SCHEMA_DDL = f"""\
CREATE TABLE _schema_version (
    table_name VARCHAR PRIMARY KEY,
    version VARCHAR NOT NULL,
    created_at TIMESTAMP DEFAULT current_timestamp
);

INSERT INTO _schema_version VALUES ('ldmap', '{SCHEMA_VERSION}', current_timestamp);

CREATE TABLE archive_members (
    ordinal INTEGER PRIMARY KEY,
    entry VARCHAR NOT NULL
);

CREATE TABLE discarded_sections (
    ordinal INTEGER PRIMARY KEY,
    entry VARCHAR NOT NULL
);

CREATE TABLE memory_regions (
    ordinal INTEGER PRIMARY KEY,
    name VARCHAR NOT NULL,
    origin VARCHAR,
    length VARCHAR,
    attributes VARCHAR
);

CREATE TABLE sections (
    section_index INTEGER PRIMARY KEY,
    name VARCHAR NOT NULL,
    address VARCHAR,
    size VARCHAR
);

CREATE TABLE sub_sections (
    section_index INTEGER NOT NULL,
    sub_index INTEGER NOT NULL,
    names VARCHAR[],
    address VARCHAR,
    size VARCHAR,
    contributor VARCHAR,
    PRIMARY KEY (section_index, sub_index)
);

CREATE TABLE demangled_symbols (
    section_index INTEGER NOT NULL,
    sub_index INTEGER NOT NULL,
    ordinal INTEGER NOT NULL,
    text VARCHAR NOT NULL,
    PRIMARY KEY (section_index, sub_index, ordinal)
)
"""


def _document_tables(document: MapDocument) -> dict[str, list[tuple[Any, ...]]]:
    sections: list[tuple[Any, ...]] = []
    subs: list[tuple[Any, ...]] = []
    demangled: list[tuple[Any, ...]] = []
    for s_idx, section in enumerate(document.sections):
        sections.append((s_idx, section.name, section.address, section.size))
        for sub_idx, sub in enumerate(section.sub_sections):
            subs.append(
                (s_idx, sub_idx, list(sub.names), sub.address, sub.size, sub.contributor),
            )
            demangled.extend(
                (s_idx, sub_idx, d_idx, text)
                for d_idx, text in enumerate(sub.demangled)
            )
    return {
        "archive_members": list(enumerate(document.archive_members)),
        "discarded_sections": list(enumerate(document.discarded_sections)),
        "memory_regions": [
            (i, r.name, r.origin, r.length, r.attributes)
            for i, r in enumerate(document.memory_regions)
        ],
        "sections": sections,
        "sub_sections": subs,
        "demangled_symbols": demangled,
    }


def write_duckdb(document: MapDocument, output_path: Path) -> dict[str, int]:
    """Write the whole document into a fresh DuckDB file.

    Returns row counts per table.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.exists():
        output_path.unlink()
    tables = _document_tables(document)
    conn: Any = _duckdb.connect(str(output_path))
    try:
        for stmt in _SCHEMA_DDL.split(";"):
            stmt = stmt.strip()
            if stmt:
                conn.execute(stmt)
        conn.execute("BEGIN TRANSACTION")
        for table, rows in tables.items():
            if not rows:
                continue
            placeholders = ", ".join("?" for _ in rows[0])
            conn.executemany(f"INSERT INTO {table} VALUES ({placeholders})", rows)
        conn.execute("COMMIT")
    finally:
        conn.close()
    return {table: len(rows) for table, rows in tables.items()}


# ---------------------------------------------------------------------------
# Artifact orchestration
# ---------------------------------------------------------------------------


def _attempt(
    report: ExportReport,
    label: str,
    path: Path,
    writer: Callable[[], object],
) -> None:
    try:
        writer()
    except (OSError, _duckdb.Error) as exc:
        log.error("Error writing %s to %s: %s", label, path, exc)
        report.failures.append({"artifact": label, "path": str(path), "error": str(exc)})
        return
    report.written.append(path)
    log.info("%s saved to %s", label, path)


def write_outputs(
    document: MapDocument,
    output_dir: Path,
    *,
    json_output: bool = False,
    duckdb_path: Path | None = None,
) -> ExportReport:
    """Write every non-empty collection of ``document`` under ``output_dir``."""

    report = ExportReport()

    if document.archive_members:
        path = output_dir / ARCHIVE_MEMBERS_TSV
        _attempt(report, "Archive members", path, lambda: save_tsv(document.archive_members, path))

    if document.discarded_sections:
        path = output_dir / DISCARDED_SECTIONS_TSV
        _attempt(
            report, "Discarded sections", path,
            lambda: save_tsv(document.discarded_sections, path),
        )

    if document.memory_regions:
        if json_output:
            path = output_dir / MEMORY_CONFIGURATION_JSON
            _attempt(
                report, "Memory configuration", path,
                lambda: save_json(memory_configuration_payload(document), path),
            )
        else:
            path = output_dir / MEMORY_CONFIGURATION_TSV
            _attempt(
                report, "Memory configuration", path,
                lambda: save_tsv(memory_region_rows(document), path),
            )

    if document.sections:
        if json_output:
            path = output_dir / MEMORY_MAP_JSON
            _attempt(
                report, "Linker script and memory map", path,
                lambda: save_json(memory_map_payload(document), path),
            )
        else:
            path = output_dir / MEMORY_MAP_TSV
            _attempt(
                report, "Linker script and memory map", path,
                lambda: save_tsv(memory_map_rows(document), path),
            )

    if duckdb_path is not None:
        db_path = duckdb_path
        _attempt(report, "DuckDB export", db_path, lambda: write_duckdb(document, db_path))

    return report
