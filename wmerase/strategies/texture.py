"""Texture-fill strategy backed by the progressive fill engine."""
from typing import Optional

import numpy as np

from wmerase.types import PixelBuffer, InpaintConfig, InpaintResult
from wmerase.selection import mask_to_selection, selection_to_mask
from wmerase.engine import Inpainter
from wmerase.progress import ProgressSink
from wmerase.strategies.base import InpaintStrategy


class TextureFillStrategy(InpaintStrategy):
    """Fill the bounding rectangle of the mask with synthesized texture."""

    name = "texture"

    def __init__(
        self,
        config: Optional[InpaintConfig] = None,
        rng: Optional[np.random.Generator] = None,
        progress: Optional[ProgressSink] = None
    ):
        self.inpainter = Inpainter(config, rng)
        self.progress = progress
        self.last_result: Optional[InpaintResult] = None

    def fill_region(self, mask: np.ndarray) -> np.ndarray:
        height, width = mask.shape
        return selection_to_mask(mask_to_selection(mask), width, height)

    def _fill(self, image: PixelBuffer, mask: np.ndarray) -> PixelBuffer:
        self.last_result = self.inpainter.process(image, mask_to_selection(mask), self.progress)
        return self.last_result.image
