"""PDF splitting engine with blank-page removal.

This package intentionally focuses on:
- classifying pages as blank (text, annotations, rendered brightness)
- regrouping the retained pages into fixed-size chunks
- writing one PDF per chunk and reporting progress

UI concerns (file pickers, drag and drop, size formatting) are out of scope.
"""

from __future__ import annotations

from .errors import (
    DirectoryCreationFailure,
    InvalidConfiguration,
    LoadFailure,
    PageWriteFailure,
    SplitterError,
)
from .executor import SplitExecutor, inspect_pdf, split_pdf
from .types import DetectionConfig, RunResult, RunState, SplitConfiguration

__all__ = [
    "__version__",
    "DetectionConfig",
    "DirectoryCreationFailure",
    "InvalidConfiguration",
    "LoadFailure",
    "PageWriteFailure",
    "RunResult",
    "RunState",
    "SplitConfiguration",
    "SplitExecutor",
    "SplitterError",
    "inspect_pdf",
    "split_pdf",
]

__version__ = "0.1.0"
