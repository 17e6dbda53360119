"""OpenCV classical inpainting (Telea fast marching, Navier-Stokes)."""
import logging

import cv2
import numpy as np

from wmerase.types import PixelBuffer, ConfigError
from wmerase.strategies.base import InpaintStrategy

logger = logging.getLogger(__name__)

METHODS = {
    "telea": cv2.INPAINT_TELEA,
    "ns": cv2.INPAINT_NS,
}


class OpenCVStrategy(InpaintStrategy):
    """Thin wrapper around ``cv2.inpaint``."""

    def __init__(self, method: str = "telea", radius: int = 3):
        """
        Args:
            method: "telea" or "ns"
            radius: Neighbourhood radius passed to cv2.inpaint
        """
        if method not in METHODS:
            raise ConfigError(f"Unknown OpenCV method '{method}'. Use 'telea' or 'ns'.")
        if radius <= 0:
            raise ConfigError("radius must be positive")
        self.method = method
        self.radius = radius

    @property
    def name(self) -> str:
        return self.method

    def _fill(self, image: PixelBuffer, mask: np.ndarray) -> PixelBuffer:
        rgb = np.ascontiguousarray(image[..., :3])
        mask_u8 = mask.astype(np.uint8) * 255

        logger.debug(f"Running cv2.inpaint ({self.method}) on {rgb.shape[1]}x{rgb.shape[0]}")
        filled = cv2.inpaint(rgb, mask_u8, self.radius, METHODS[self.method])

        result = image.copy()
        result[..., :3] = filled
        return result
