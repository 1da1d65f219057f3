"""Command-line entry point: parse a GNU ld map file into TSV/JSON artifacts.

Usage:
    ldmap-parse firmware.map
    ldmap-parse firmware.map --json --output-path out/
    ldmap-parse firmware.map --duckdb out/map.duckdb --summary
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ldmap.exporters import memory_map_rows, write_outputs
from ldmap.io_utils import dump_json
from ldmap.layout import DEFAULT_LAYOUT, LayoutConfigError, load_layout
from ldmap.map_parser import MapInputError, parse_map_file
from ldmap.summary import summarize_contributors, summary_to_dict

log = logging.getLogger("ldmap")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ldmap-parse",
        description="Analyze a linker map file",
    )
    parser.add_argument(
        "path",
        type=Path,
        metavar="MAP_FILE_PATH",
        help="Map file to parse",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Write memory configuration and memory map as JSON instead of TSV",
    )
    parser.add_argument(
        "-o", "--output-path",
        type=Path,
        default=Path(""),
        metavar="OUTPUT_PATH",
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "--layout-config",
        type=Path,
        default=None,
        help="Optional JSON object overriding map column constants",
    )
    parser.add_argument(
        "--duckdb",
        type=Path,
        default=None,
        help="Also write the whole document to this DuckDB file",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print per-section contributor size totals as JSON",
    )
    parser.add_argument("--encoding", default="utf-8", help="Input encoding (default: utf-8)")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    map_path: Path = args.path
    if not map_path.exists():
        log.error("Error: File at path '%s' does not exist.", map_path)
        return 1

    layout = DEFAULT_LAYOUT
    if args.layout_config is not None:
        try:
            layout = load_layout(args.layout_config)
        except (OSError, LayoutConfigError) as exc:
            log.error("Invalid layout config %s: %s", args.layout_config, exc)
            return 1

    log.info("Parsing file at path: %s", map_path)
    try:
        result = parse_map_file(map_path, layout=layout, encoding=args.encoding)
    except MapInputError as exc:
        log.error("%s", exc)
        return 1

    document = result.document
    log.info(
        "Parsed %d archive members, %d discarded sections, %d memory regions, "
        "%d sections (%d memory map rows)",
        len(document.archive_members),
        len(document.discarded_sections),
        len(document.memory_regions),
        len(document.sections),
        len(memory_map_rows(document)),
    )
    if result.skipped_lines:
        log.warning("Skipped %d undecodable lines", result.skipped_lines)
    if result.warnings:
        log.warning("%d memory map lines could not be placed", len(result.warnings))

    report = write_outputs(
        document,
        args.output_path,
        json_output=args.json,
        duckdb_path=args.duckdb,
    )

    if args.summary:
        sys.stdout.write(
            dump_json(summary_to_dict(summarize_contributors(document)), pretty=True).decode("utf-8")
            + "\n",
        )

    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
