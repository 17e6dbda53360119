"""Common interface for swappable inpainting strategies."""
from abc import ABC, abstractmethod

import numpy as np

from wmerase.types import PixelBuffer, InvalidBufferError, validate_buffer


class InpaintStrategy(ABC):
    """Fill the masked region of an RGBA image.

    Every strategy returns a new buffer; pixels outside the filled region
    and the whole alpha channel are copied from the input unchanged.
    """

    name = "base"

    @abstractmethod
    def _fill(self, image: PixelBuffer, mask: np.ndarray) -> PixelBuffer:
        """Strategy-specific fill, may touch pixels outside the mask."""

    def fill_region(self, mask: np.ndarray) -> np.ndarray:
        """Pixels the strategy actually rewrites for a given mask."""
        return mask

    def inpaint(self, image: PixelBuffer, mask: np.ndarray) -> PixelBuffer:
        """
        Inpaint the region marked by ``mask``.

        Args:
            image: (H, W, 4) uint8 RGBA array
            mask: (H, W) array, non-zero marks pixels to fill

        Returns:
            Inpainted (H, W, 4) uint8 array
        """
        validate_buffer(image)
        mask = np.asarray(mask)
        if mask.ndim == 3:
            mask = mask[:, :, 0]
        if mask.shape != image.shape[:2]:
            raise InvalidBufferError(
                f"Mask shape {mask.shape} does not match image {image.shape[:2]}"
            )
        mask = mask > 0
        if not mask.any():
            return image.copy()

        mask = self.fill_region(mask)
        result = self._fill(image, mask)
        return restore_outside(result, image, mask)


def restore_outside(result: PixelBuffer, image: PixelBuffer, mask: np.ndarray) -> PixelBuffer:
    """Copy unmasked pixels and the alpha channel back from the input."""
    result = np.array(result, dtype=np.uint8, copy=True)
    result[~mask] = image[~mask]
    result[..., 3] = image[..., 3]
    return result
