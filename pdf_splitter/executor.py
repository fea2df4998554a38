from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from .classifier import BlankPageClassifier
from .document import SourceDocument
from .errors import DirectoryCreationFailure, InvalidConfiguration, LoadFailure, PageWriteFailure
from .planner import plan_chunks
from .progress import ProgressReporter
from .types import (
    ChunkFile,
    ChunkWriteFailure,
    DetectionConfig,
    Document,
    RunResult,
    RunState,
    SplitConfiguration,
)
from .utils import chunk_file_name, default_output_dir, ensure_dir

logger = logging.getLogger(__name__)

# Share of the progress budget spent on detection; writing gets the rest.
DETECTION_SHARE = 0.3


@dataclass(frozen=True)
class DocumentSummary:
    path: str
    total_pages: int
    blank_pages: int
    file_size_bytes: int


class SplitExecutor:
    """Runs one split over a single document.

    IDLE -> DETECTING -> PLANNING -> WRITING -> DONE, or FAILED / CANCELLED.
    The document and configuration are read-only for the whole run.
    """

    def __init__(
        self,
        document: Document,
        output_dir: str | Path,
        config: SplitConfiguration | None = None,
        *,
        classifier: BlankPageClassifier | None = None,
        progress: ProgressReporter | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.document = document
        self.output_dir = Path(output_dir)
        self.config = config or SplitConfiguration()
        self.classifier = classifier or BlankPageClassifier()
        self.progress = progress or ProgressReporter()
        self.cancel_event = cancel_event
        self.state = RunState.IDLE

    def run(self) -> RunResult:
        self.progress.reset()
        total_pages = self.document.page_count

        self.state = RunState.DETECTING
        try:
            retained = self.detect()
        except LoadFailure as e:
            return self._fail(str(e))

        self.state = RunState.PLANNING
        chunks = plan_chunks(retained, self.config.pages_per_chunk)
        logger.info(
            "%s: %d/%d pages retained, %d chunks planned",
            self.document.base_name,
            len(retained),
            total_pages,
            len(chunks),
        )

        self.state = RunState.WRITING
        try:
            self._create_output_dir()
        except DirectoryCreationFailure as e:
            return self._fail(str(e))

        written: list[ChunkFile] = []
        failures: list[ChunkWriteFailure] = []
        for chunk_index, chunk in enumerate(chunks, start=1):
            if self.cancel_event is not None and self.cancel_event.is_set():
                logger.info("cancelled before chunk %d/%d", chunk_index, len(chunks))
                result = self._result(
                    RunState.CANCELLED, total_pages, retained, chunks, written, failures, failure="cancelled"
                )
                self.state = RunState.CANCELLED
                self.progress.finish(result, complete=False)
                return result

            file_name = chunk_file_name(self.document.base_name, chunk_index)
            try:
                self.document.write_pages(chunk, self.output_dir / file_name)
                written.append(ChunkFile(chunk_index=chunk_index, file_name=file_name, pages=tuple(chunk)))
                logger.info("wrote %s (%d pages)", file_name, len(chunk))
            except (PageWriteFailure, OSError) as e:
                reason = e.reason if isinstance(e, PageWriteFailure) else str(e)
                failures.append(ChunkWriteFailure(chunk_index=chunk_index, file_name=file_name, reason=reason))
                logger.error("failed to write %s: %s", file_name, reason)

            self.progress.advance(DETECTION_SHARE + chunk_index / len(chunks) * (1.0 - DETECTION_SHARE))

        result = self._result(RunState.DONE, total_pages, retained, chunks, written, failures)
        self.state = RunState.DONE
        self.progress.finish(result)
        return result

    def detect(self) -> list[int]:
        """Return retained page indices in document order, advancing progress per page."""
        total_pages = self.document.page_count
        retained: list[int] = []
        for i in range(total_pages):
            if not self.config.remove_blank_pages or not _is_blank(self.document, self.classifier, i):
                retained.append(i)
            self.progress.advance((i + 1) / total_pages * DETECTION_SHARE)
        return retained

    def _create_output_dir(self) -> None:
        try:
            ensure_dir(self.output_dir)
        except OSError as e:
            raise DirectoryCreationFailure(f"Failed to create output directory: {e}") from e

    def _fail(self, reason: str) -> RunResult:
        logger.error(reason)
        result = RunResult.failed(reason, self.output_dir)
        self.state = RunState.FAILED
        self.progress.finish(result, complete=False)
        return result

    def _result(
        self,
        state: RunState,
        total_pages: int,
        retained: list[int],
        chunks: list[list[int]],
        written: list[ChunkFile],
        failures: list[ChunkWriteFailure],
        failure: str | None = None,
    ) -> RunResult:
        return RunResult(
            state=state,
            output_location=str(self.output_dir),
            files_written=len(written),
            pages_removed=total_pages - len(retained),
            total_pages=total_pages,
            retained_pages=tuple(retained),
            chunks=tuple(tuple(c) for c in chunks),
            written=tuple(written),
            write_failures=tuple(failures),
            failure=failure,
        )


def _is_blank(document: Document, classifier: BlankPageClassifier, index: int) -> bool:
    try:
        return classifier.is_blank(document.page(index))
    except Exception as e:
        raise LoadFailure(f"Failed to read page {index + 1}: {e}") from e


def count_blank_pages(document: Document, classifier: BlankPageClassifier) -> int:
    return sum(1 for i in range(document.page_count) if _is_blank(document, classifier, i))


def split_pdf(
    source: str | Path | bytes,
    output_dir: str | Path | None = None,
    config: SplitConfiguration | None = None,
    *,
    detection: DetectionConfig | None = None,
    progress: ProgressReporter | None = None,
    cancel_event: threading.Event | None = None,
    name: str | None = None,
) -> RunResult:
    """Open `source`, split it into `output_dir` and return the run result.

    Load failures produce a FAILED result instead of raising. When `output_dir`
    is omitted, `<source dir>/<stem>_split` is used.
    """
    config = config or SplitConfiguration()
    progress = progress or ProgressReporter()
    if output_dir is None:
        if isinstance(source, (bytes, bytearray)):
            raise InvalidConfiguration("output_dir is required for in-memory documents")
        output_dir = default_output_dir(source)

    progress.reset()
    try:
        document = SourceDocument.open(source, name=name)
    except LoadFailure as e:
        logger.error(str(e))
        result = RunResult.failed(str(e), output_dir)
        progress.finish(result, complete=False)
        return result

    with document:
        return SplitExecutor(
            document,
            output_dir,
            config,
            classifier=BlankPageClassifier.from_config(detection or DetectionConfig()),
            progress=progress,
            cancel_event=cancel_event,
        ).run()


def inspect_pdf(
    source: str | Path,
    detection: DetectionConfig | None = None,
    *,
    remove_blank_pages: bool = True,
) -> DocumentSummary:
    """Page count, blank-page count and file size of a PDF. Raises LoadFailure."""
    path = Path(source)
    with SourceDocument.open(path) as document:
        blank = 0
        if remove_blank_pages:
            blank = count_blank_pages(document, BlankPageClassifier.from_config(detection or DetectionConfig()))
        return DocumentSummary(
            path=str(path),
            total_pages=document.page_count,
            blank_pages=blank,
            file_size_bytes=path.stat().st_size,
        )
