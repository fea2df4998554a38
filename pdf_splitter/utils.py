from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def ensure_dir(path: str | Path) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def chunk_file_name(base_name: str, chunk_index: int, ext: str = "pdf") -> str:
    """`{base}_{index:03d}.{ext}`; chunk_index is 1-based."""
    return f"{base_name}_{chunk_index:03d}.{ext}"


def default_output_dir(source_path: str | Path) -> Path:
    src = Path(source_path)
    return src.parent / f"{src.stem}_split"


def write_json(path: str | Path, data: Any) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_json(path: str | Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def ensure_relative_path(base_dir: str | Path, rel_path: str | Path, *, field: str = "path") -> Path:
    """Validate that rel_path stays inside base_dir and return its absolute Path.

    Rejects absolute/drive paths, '..' segments and anything that resolves
    outside base_dir.
    """
    base = Path(base_dir).resolve()

    rel_str = str(rel_path or "").strip().replace("\\", "/")
    if not rel_str:
        raise ValueError(f"unsafe_{field}: empty")

    p = Path(rel_str)
    if p.is_absolute() or p.drive:
        raise ValueError(f"unsafe_{field}: absolute_or_drive_path: {rel_str}")
    if any(part == ".." for part in p.parts):
        raise ValueError(f"unsafe_{field}: parent_traversal: {rel_str}")

    abs_p = (base / p).resolve()
    if abs_p != base and base not in abs_p.parents:
        raise ValueError(f"unsafe_{field}: escapes_base_dir: {rel_str}")
    return abs_p
