from __future__ import annotations

from pathlib import Path
from typing import Callable

import fitz  # PyMuPDF
import pytest


def build_pdf(path: Path, kinds: list[str], *, width: float = 200, height: float = 200) -> Path:
    """Write a PDF whose pages follow `kinds`.

    text  -> "Page <i>" drawn as real text
    blank -> nothing at all
    annot -> a sticky-note annotation only
    ink   -> a filled black rectangle, no text
    faint -> a tiny grey dot, no text
    """
    doc = fitz.open()
    for i, kind in enumerate(kinds):
        page = doc.new_page(width=width, height=height)
        if kind == "text":
            page.insert_text((20, 50), f"Page {i}", fontsize=14)
        elif kind == "annot":
            page.add_text_annot((50, 50), "note")
        elif kind == "ink":
            page.draw_rect(fitz.Rect(10, 10, width - 10, height - 10), color=(0, 0, 0), fill=(0, 0, 0))
        elif kind == "faint":
            page.draw_rect(fitz.Rect(0, 0, 2, 2), color=(0.9, 0.9, 0.9), fill=(0.9, 0.9, 0.9))
        elif kind != "blank":
            raise ValueError(kind)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(path)
    doc.close()
    return path


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    def _make(kinds: list[str], name: str = "source.pdf", **kwargs) -> Path:
        return build_pdf(tmp_path / "in" / name, kinds, **kwargs)

    return _make
