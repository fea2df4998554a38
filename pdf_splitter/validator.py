from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .document import page_count_of
from .errors import LoadFailure
from .utils import ensure_relative_path, load_json


@dataclass
class ValidationStats:
    chunks_checked: int = 0
    missing_files: int = 0
    unreadable_files: int = 0
    page_count_mismatches: int = 0
    invalid_entries: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_index_list(v: Any) -> bool:
    return isinstance(v, list) and all(type(i) is int and i >= 0 for i in v)


def validate_report(report_path: str | Path) -> ValidationStats:
    """Check a run report against the files it lists.

    Every chunk entry must name a file inside the output location that opens
    as a PDF and holds exactly the recorded number of pages. Pages across
    chunks must be strictly increasing.
    """
    stats = ValidationStats()
    try:
        report = load_json(report_path)
    except Exception as e:
        stats.errors.append(f"failed to read report: {e}")
        stats.invalid_entries += 1
        return stats

    run = report.get("run", {}) if isinstance(report, dict) else {}
    chunks = report.get("chunks", []) if isinstance(report, dict) else []
    out_dir = Path(str(run.get("output_location") or ""))
    if not isinstance(chunks, list):
        stats.errors.append("chunks must be a list")
        stats.invalid_entries += 1
        return stats

    last_page = -1
    for idx, c in enumerate(chunks):
        if not isinstance(c, dict) or not isinstance(c.get("file"), str) or not _is_index_list(c.get("pages")):
            stats.errors.append(f"invalid chunk[{idx}]: expected {{file: str, pages: [int, ...]}}")
            stats.invalid_entries += 1
            continue

        stats.chunks_checked += 1
        pages: list[int] = c["pages"]
        if (pages and pages[0] <= last_page) or any(b <= a for a, b in zip(pages, pages[1:])):
            stats.errors.append(f"invalid chunk[{idx}]: pages not strictly increasing across chunks")
            stats.invalid_entries += 1
        if pages:
            last_page = pages[-1]

        try:
            path = ensure_relative_path(out_dir, c["file"], field="file")
        except ValueError as e:
            stats.errors.append(f"unsafe chunk[{idx}] file: {e}")
            stats.invalid_entries += 1
            continue

        if not path.exists():
            stats.errors.append(f"missing: {path}")
            stats.missing_files += 1
            continue

        try:
            count = page_count_of(path)
        except LoadFailure as e:
            stats.errors.append(f"unreadable: {path}: {e}")
            stats.unreadable_files += 1
            continue

        if count != len(pages):
            stats.errors.append(f"page count mismatch: {path.name}: expected {len(pages)}, found {count}")
            stats.page_count_mismatches += 1

    files_written = run.get("files_written")
    if files_written is not None and files_written != len(chunks):
        stats.errors.append(f"files_written={files_written} but {len(chunks)} chunks listed")
        stats.invalid_entries += 1

    return stats
