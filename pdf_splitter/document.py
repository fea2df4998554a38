from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Sequence

from PIL import Image

from .errors import LoadFailure, PageWriteFailure


def _fitz() -> Any:
    try:
        import fitz  # PyMuPDF
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyMuPDF is required to read PDFs. Install pymupdf.") from e
    return fitz


@dataclass(frozen=True)
class PdfPage:
    index: int  # 0-based
    _page: Any

    @property
    def size(self) -> tuple[float, float]:
        # page.rect is the rotated crop box, the same area get_pixmap draws.
        box = self._page.rect
        return float(box.width), float(box.height)

    def text(self) -> str:
        return self._page.get_text("text") or ""

    def annotation_count(self) -> int:
        # Entries are (xref, type, ...). Links and widgets count; popups belong to a parent annotation.
        fitz = _fitz()
        return sum(1 for entry in self._page.annot_xrefs() if entry[1] != fitz.PDF_ANNOT_POPUP)

    def render(self, scale: float) -> Image.Image:
        fitz = _fitz()
        pix = self._page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)


class SourceDocument:
    """Read-only handle over a PDF opened with PyMuPDF.

    Pages are read on demand; `write_pages` copies a selection of pages into a
    fresh document and saves it, leaving the source untouched.
    """

    def __init__(self, doc: Any, name: str, path: Path | None = None):
        self._doc = doc
        self.name = name
        self.path = path

    @classmethod
    def open(cls, source: str | Path | bytes, *, name: str | None = None) -> "SourceDocument":
        fitz = _fitz()
        path: Path | None = None
        try:
            if isinstance(source, (bytes, bytearray)):
                doc = fitz.open(stream=bytes(source), filetype="pdf")
                display_name = name or "document.pdf"
            else:
                path = Path(source)
                if not path.is_file():
                    raise LoadFailure(f"Failed to load PDF: file not found: {path}")
                doc = fitz.open(path)
                display_name = name or path.name
        except LoadFailure:
            raise
        except Exception as e:
            raise LoadFailure(f"Failed to load PDF: {e}") from e

        if not doc.is_pdf:
            doc.close()
            raise LoadFailure(f"Failed to load PDF: not a PDF document: {display_name}")
        if doc.needs_pass:
            doc.close()
            raise LoadFailure(f"Failed to load PDF: document is encrypted: {display_name}")
        if doc.page_count == 0:
            doc.close()
            raise LoadFailure(f"Failed to load PDF: document has no pages: {display_name}")
        return cls(doc, display_name, path)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    @property
    def base_name(self) -> str:
        return Path(self.name).stem

    def page(self, index: int) -> PdfPage:
        if not 0 <= index < self.page_count:
            raise IndexError(f"page index out of range: {index}")
        return PdfPage(index=index, _page=self._doc.load_page(index))

    def iter_pages(self) -> Iterator[PdfPage]:
        for i in range(self.page_count):
            yield self.page(i)

    def write_pages(self, page_indices: Sequence[int], out_path: str | Path) -> None:
        """Insert the given source pages at positions 0..n-1 of a new PDF and save it."""
        fitz = _fitz()
        out_path = Path(out_path)
        out = fitz.open()
        try:
            for position, page_index in enumerate(page_indices):
                out.insert_pdf(self._doc, from_page=page_index, to_page=page_index, start_at=position)
            out.save(str(out_path), garbage=3, deflate=True)
        except Exception as e:
            raise PageWriteFailure(out_path.name, str(e)) from e
        finally:
            out.close()

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> "SourceDocument":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def page_count_of(path: str | Path) -> int:
    with SourceDocument.open(path) as doc:
        return doc.page_count
