from __future__ import annotations

from typing import Sequence

from .types import validate_pages_per_chunk


def plan_chunks(retained_pages: Sequence[int], chunk_size: int) -> list[list[int]]:
    """Partition retained page indices into consecutive runs of `chunk_size`.

    The last chunk may be shorter. An empty selection yields an empty plan.
    Raises InvalidConfiguration for a non-positive chunk size.
    """
    validate_pages_per_chunk(chunk_size)
    pages = list(retained_pages)
    return [pages[i : i + chunk_size] for i in range(0, len(pages), chunk_size)]
