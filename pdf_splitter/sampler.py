from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

from .errors import RenderFailure
from .types import Page


def sample_positions(total_pixels: int, max_samples: int = 1000) -> np.ndarray:
    """Evenly strided flat pixel indices, at most `max_samples` of them."""
    if total_pixels <= 0:
        return np.zeros(0, dtype=np.int64)
    n = min(max_samples, total_pixels)
    # stride = total / n, spread over the whole buffer.
    return (np.arange(n, dtype=np.int64) * total_pixels) // n


def average_brightness(image: Image.Image, max_samples: int = 1000) -> float:
    """Mean of (R+G+B)/3/255 over a deterministic pixel sample. Alpha is ignored."""
    rgb = np.asarray(image.convert("RGB"), dtype=np.float64).reshape(-1, 3)
    positions = sample_positions(rgb.shape[0], max_samples)
    if positions.size == 0:
        raise RenderFailure("empty pixel buffer")
    return float(rgb[positions].mean(axis=1).mean() / 255.0)


@dataclass(frozen=True)
class PixelSampler:
    scale: float = 0.5
    max_samples: int = 1000

    def target_size(self, page: Page) -> tuple[int, int]:
        w, h = page.size
        return int(math.floor(w * self.scale)), int(math.floor(h * self.scale))

    def render(self, page: Page) -> Image.Image:
        """Render onto a white canvas of the target size.

        Raises RenderFailure for zero-area targets or when the page cannot be drawn.
        """
        width, height = self.target_size(page)
        if width <= 0 or height <= 0:
            raise RenderFailure(f"page {page.index}: zero-area render target {width}x{height}")

        try:
            canvas = Image.new("RGB", (width, height), (255, 255, 255))
            drawn = page.render(self.scale)
            if drawn.mode in ("RGBA", "LA") or (drawn.mode == "P" and "transparency" in drawn.info):
                drawn = drawn.convert("RGBA")
                canvas.paste(drawn, (0, 0), drawn)
            else:
                canvas.paste(drawn.convert("RGB"), (0, 0))
        except Exception as e:
            raise RenderFailure(f"page {page.index}: {e}") from e
        return canvas

    def sample(self, page: Page) -> float:
        return average_brightness(self.render(page), self.max_samples)
