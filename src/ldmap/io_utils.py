"""I/O utilities for JSON and TSV artifacts.

JSON goes through orjson; TSV rows are written as UTF-8 text with one
record per line.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file using orjson."""
    return orjson.loads(path.read_bytes())


def dump_json(obj: Any, *, pretty: bool = False) -> bytes:
    """Serialize ``obj`` to JSON bytes, preserving key order."""
    opts = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=opts)


def save_json(obj: Any, path: Path, *, pretty: bool = False) -> None:
    """Save an object as JSON, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dump_json(obj, pretty=pretty) + b"\n")


def tsv_line(fields: Sequence[str]) -> str:
    """Join fields with tabs. Embedded tabs/newlines are flattened to spaces."""
    return "\t".join(
        field.replace("\t", " ").replace("\r", " ").replace("\n", " ")
        for field in fields
    )


def save_tsv(rows: Iterable[Sequence[str] | str], path: Path) -> int:
    """Write rows to a TSV file. Pre-joined string rows are written as is.

    Returns the number of rows written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="\n") as f:
        for row in rows:
            f.write(row if isinstance(row, str) else tsv_line(row))
            f.write("\n")
            count += 1
    return count


def load_tsv(path: Path) -> list[list[str]]:
    """Read a TSV file back into rows of fields. Blank lines skipped."""
    rows: list[list[str]] = []
    for line in path.read_text(encoding="utf-8").split("\n"):
        if line:
            rows.append(line.split("\t"))
    return rows
