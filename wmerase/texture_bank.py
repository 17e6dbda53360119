"""Texture bank: exterior colors sampled from a ring around the selection."""
import logging
from typing import Tuple

import numpy as np

from wmerase.types import PixelBuffer, Selection, EmptyTextureBankError

logger = logging.getLogger(__name__)


class TextureBank:
    """Pool of (r, g, b) samples taken strictly outside the selection."""

    def __init__(self, samples: np.ndarray):
        self.samples = np.asarray(samples, dtype=np.uint8).reshape(-1, 3)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0

    def mean_color(self) -> Tuple[int, int, int]:
        """
        Rounded mean color of the bank.

        Raises:
            EmptyTextureBankError: If the bank holds no samples
        """
        if self.is_empty:
            raise EmptyTextureBankError("Cannot average an empty texture bank")
        mean = self.samples.astype(np.float64).mean(axis=0)
        r, g, b = np.floor(mean + 0.5).astype(int)
        return int(r), int(g), int(b)

    def draw(self, rng: np.random.Generator, count: int) -> np.ndarray:
        """
        Draw samples uniformly with replacement.

        Args:
            rng: Random source
            count: Number of samples

        Returns:
            (count, 3) uint8 array

        Raises:
            EmptyTextureBankError: If the bank holds no samples
        """
        if self.is_empty:
            raise EmptyTextureBankError("Cannot draw from an empty texture bank")
        idx = rng.integers(0, len(self.samples), size=count)
        return self.samples[idx]


def build_texture_bank(buffer: PixelBuffer, selection: Selection, margin: int) -> TextureBank:
    """
    Collect exterior colors around a selection.

    Scans the selection grown by ``margin`` on every side (clipped to the
    image) in row-major order and keeps the RGB of every pixel that is not
    inside the selection.

    Args:
        buffer: RGBA pixel buffer
        selection: Clamped selection
        margin: Ring width in pixels

    Returns:
        TextureBank, possibly empty
    """
    height, width = buffer.shape[:2]
    box = selection.expanded(margin, width, height)
    rows, cols = box.slices()

    ring = np.ones((box.height, box.width), dtype=bool)
    ring[selection.y - box.y:selection.bottom - box.y,
         selection.x - box.x:selection.right - box.x] = False

    # Boolean indexing keeps row-major order
    samples = buffer[rows, cols, :3][ring]
    logger.debug(f"Texture bank: {len(samples)} samples from {box.width}x{box.height} box")
    return TextureBank(samples)
