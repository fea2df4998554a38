from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence

from PIL import Image

from .errors import InvalidConfiguration

PAGES_PER_CHUNK_PRESETS: tuple[int, ...] = (5, 10, 25, 50)


class Page(Protocol):
    """Read-only view of one page, as consumed by the sampler and classifier."""

    index: int  # 0-based

    @property
    def size(self) -> tuple[float, float]: ...  # (width, height) in points

    def text(self) -> str: ...

    def annotation_count(self) -> int: ...

    def render(self, scale: float) -> Image.Image: ...


def validate_pages_per_chunk(value: object) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfiguration(f"pages_per_chunk must be a positive integer, got {value!r}")
    return value


@dataclass(frozen=True)
class SplitConfiguration:
    pages_per_chunk: int = 10
    remove_blank_pages: bool = True

    def __post_init__(self) -> None:
        validate_pages_per_chunk(self.pages_per_chunk)


@dataclass(frozen=True)
class DetectionConfig:
    scale: float = 0.5
    brightness_threshold: float = 0.99
    max_samples: int = 1000

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise InvalidConfiguration(f"scale must be > 0, got {self.scale!r}")
        if not 0.0 <= self.brightness_threshold <= 1.0:
            raise InvalidConfiguration(
                f"brightness_threshold must be within [0, 1], got {self.brightness_threshold!r}"
            )
        if isinstance(self.max_samples, bool) or not isinstance(self.max_samples, int) or self.max_samples <= 0:
            raise InvalidConfiguration(f"max_samples must be a positive integer, got {self.max_samples!r}")


class RunState(str, Enum):
    IDLE = "idle"
    DETECTING = "detecting"
    PLANNING = "planning"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ChunkWriteFailure:
    chunk_index: int  # 1-based, matches the file suffix
    file_name: str
    reason: str


@dataclass(frozen=True)
class ChunkFile:
    chunk_index: int  # 1-based
    file_name: str
    pages: tuple[int, ...]  # original 0-based page indices


@dataclass(frozen=True)
class RunResult:
    state: RunState
    output_location: str
    files_written: int = 0
    pages_removed: int = 0
    total_pages: int = 0
    retained_pages: tuple[int, ...] = ()
    chunks: tuple[tuple[int, ...], ...] = ()
    written: tuple[ChunkFile, ...] = ()
    write_failures: tuple[ChunkWriteFailure, ...] = ()
    failure: str | None = None

    @property
    def files(self) -> tuple[str, ...]:
        return tuple(c.file_name for c in self.written)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def message(self) -> str:
        if self.failure is not None:
            return self.failure
        lines = [f"Successfully split into {self.files_written} files"]
        if self.pages_removed > 0:
            lines.append(f"Removed {self.pages_removed} blank pages")
        if self.write_failures:
            lines.append(f"Failed to write {len(self.write_failures)} files")
        lines.append(f"Saved to: {Path(self.output_location).name}")
        return "\n".join(lines)

    @classmethod
    def failed(cls, reason: str, output_location: str | Path = "") -> "RunResult":
        return cls(state=RunState.FAILED, output_location=str(output_location), failure=reason)


class Document(Protocol):
    """Source document collaborator: random-access page reads plus chunk writes."""

    @property
    def page_count(self) -> int: ...

    @property
    def base_name(self) -> str: ...

    def page(self, index: int) -> Page: ...

    def write_pages(self, page_indices: Sequence[int], out_path: str | Path) -> None: ...
