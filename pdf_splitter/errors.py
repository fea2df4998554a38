from __future__ import annotations


class SplitterError(Exception):
    """Base class for every error raised by the splitter."""


class InvalidConfiguration(SplitterError, ValueError):
    """Configuration rejected before a run starts (e.g. non-positive chunk size)."""


class LoadFailure(SplitterError):
    """Source document is unreadable, encrypted or not a PDF."""


class DirectoryCreationFailure(SplitterError):
    """Output directory could not be created."""


class PageWriteFailure(SplitterError):
    """A single chunk could not be persisted."""

    def __init__(self, file_name: str, reason: str):
        super().__init__(f"{file_name}: {reason}")
        self.file_name = file_name
        self.reason = reason


class RenderFailure(SplitterError):
    """A page could not be rasterized for brightness sampling."""
