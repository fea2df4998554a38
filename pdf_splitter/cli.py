from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path

from .config import load_config
from .errors import InvalidConfiguration, LoadFailure
from .executor import inspect_pdf, split_pdf
from .progress import ProgressReporter
from .types import PAGES_PER_CHUNK_PRESETS, RunResult, RunState, validate_pages_per_chunk
from .utils import utc_now_iso
from .validator import validate_report
from .writer import RunReportWriter


def _positive_int(text: str) -> int:
    try:
        return validate_pages_per_chunk(int(text))
    except (ValueError, InvalidConfiguration) as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pdf_splitter")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    split = sub.add_parser("split", help="Split a PDF into chunks, dropping blank pages")
    split.add_argument("--input", required=True, help="Input PDF")
    split.add_argument("--out", default=None, help="Output directory (default: <input dir>/<name>_split)")
    split.add_argument(
        "--pages-per-chunk",
        type=_positive_int,
        default=None,
        help=f"Pages per output file (presets: {', '.join(map(str, PAGES_PER_CHUNK_PRESETS))}; any positive value)",
    )
    split.add_argument("--keep-blank-pages", action="store_true", help="Do not remove blank pages")
    split.add_argument("--scale", type=float, default=None, help="Render scale for blank detection")
    split.add_argument("--threshold", type=float, default=None, help="Brightness above which a page is blank")
    split.add_argument("--config", default=None, help="Config path (JSON)")
    split.add_argument("--report", default=None, help="Write a JSON run report to this path")
    split.add_argument("--quiet", action="store_true", help="No progress output")

    inspect = sub.add_parser("inspect", help="Show page count and blank pages of a PDF")
    inspect.add_argument("--input", required=True, help="Input PDF")
    inspect.add_argument("--config", default=None, help="Config path (JSON)")

    validate = sub.add_parser("validate", help="Validate a run report against the written files")
    validate.add_argument("--report", required=True, help="Run report path")

    return p


def _print_progress(value: float, result: RunResult | None) -> None:
    end = "\n" if result is not None else ""
    print(f"\rprogress={value * 100:5.1f}%", end=end, file=sys.stderr, flush=True)


def cmd_split(args: argparse.Namespace) -> int:
    created_at = utc_now_iso()
    try:
        cfg = load_config(args.config)
        split_cfg = cfg.split
        if args.pages_per_chunk is not None:
            split_cfg = replace(split_cfg, pages_per_chunk=args.pages_per_chunk)
        if args.keep_blank_pages:
            split_cfg = replace(split_cfg, remove_blank_pages=False)
        detection = cfg.detection
        if args.scale is not None:
            detection = replace(detection, scale=args.scale)
        if args.threshold is not None:
            detection = replace(detection, brightness_threshold=args.threshold)
    except InvalidConfiguration as e:
        print(f"invalid_configuration: {e}")
        return 2

    progress = ProgressReporter()
    if not args.quiet:
        progress.subscribe(_print_progress)

    result = split_pdf(args.input, args.out, split_cfg, detection=detection, progress=progress)

    if args.report:
        RunReportWriter(report_path=Path(args.report)).write_final(
            result,
            source=str(args.input),
            created_at=created_at,
            config={"split": asdict(split_cfg), "detection": asdict(detection)},
        )

    print(result.message)
    for f in result.write_failures:
        print(f"write_failed: {f.file_name}: {f.reason}")

    if result.state != RunState.DONE or result.write_failures:
        return 1
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    try:
        cfg = load_config(args.config)
        summary = inspect_pdf(args.input, cfg.detection, remove_blank_pages=cfg.split.remove_blank_pages)
    except InvalidConfiguration as e:
        print(f"invalid_configuration: {e}")
        return 2
    except LoadFailure as e:
        print(str(e))
        return 1

    print(f"total_pages={summary.total_pages}")
    print(f"blank_pages={summary.blank_pages}")
    print(f"file_size_bytes={summary.file_size_bytes}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    stats = validate_report(args.report)

    print(f"chunks_checked={stats.chunks_checked}")
    print(f"missing_files={stats.missing_files}")
    print(f"unreadable_files={stats.unreadable_files}")
    print(f"page_count_mismatches={stats.page_count_mismatches}")
    print(f"invalid_entries={stats.invalid_entries}")

    if stats.errors:
        for m in stats.errors:
            print(m)
        return 1

    print("OK")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "split":
        return cmd_split(args)

    if args.command == "inspect":
        return cmd_inspect(args)

    if args.command == "validate":
        return cmd_validate(args)

    raise SystemExit(2)


if __name__ == "__main__":
    raise SystemExit(main())
