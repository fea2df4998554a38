from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .types import RunResult, RunState
from .utils import utc_now_iso, write_json


@dataclass
class RunReportWriter:
    report_path: Path

    def write_final(
        self,
        result: RunResult,
        *,
        source: str,
        created_at: str,
        config: dict[str, Any],
    ) -> None:
        now = utc_now_iso()

        # Mark completion only when the run reached DONE.
        run = {
            "source": source,
            "state": result.state.value,
            "finished": result.state == RunState.DONE,
            "created_at": created_at,
            "completed_at": now,
            "output_location": result.output_location,
            "total_pages": result.total_pages,
            "pages_removed": result.pages_removed,
            "files_written": result.files_written,
            "failure": result.failure,
            "config": config,
        }
        chunks = [{"file": c.file_name, "chunk_index": c.chunk_index, "pages": list(c.pages)} for c in result.written]
        errors = [dict(asdict(f), stage="write") for f in result.write_failures]

        write_json(self.report_path, {"run": run, "chunks": chunks, "errors": errors})
