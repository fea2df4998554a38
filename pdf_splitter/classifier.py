from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import RenderFailure
from .sampler import PixelSampler
from .types import DetectionConfig, Page

logger = logging.getLogger(__name__)


@dataclass
class BlankPageClassifier:
    """Decide whether a page is blank.

    Checks run cheapest and most certain first:
    1. trimmed text is non-empty -> not blank
    2. one or more annotations -> not blank
    3. rendered average brightness > threshold -> blank

    A page that cannot be rendered is kept (not blank).
    """

    brightness_threshold: float = 0.99
    sampler: PixelSampler = field(default_factory=PixelSampler)

    @classmethod
    def from_config(cls, detection: DetectionConfig) -> "BlankPageClassifier":
        return cls(
            brightness_threshold=detection.brightness_threshold,
            sampler=PixelSampler(scale=detection.scale, max_samples=detection.max_samples),
        )

    def is_blank(self, page: Page) -> bool:
        if page.text().strip():
            logger.debug("page %d: text found", page.index)
            return False

        if page.annotation_count() > 0:
            logger.debug("page %d: annotations found", page.index)
            return False

        try:
            brightness = self.sampler.sample(page)
        except RenderFailure as e:
            logger.warning("page %d: render failed, keeping page: %s", page.index, e)
            return False

        blank = brightness > self.brightness_threshold
        logger.debug("page %d: brightness=%.4f blank=%s", page.index, brightness, blank)
        return blank
