"""Raster image loading and saving as RGBA pixel buffers."""
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image
from PIL import ImageOps
from PIL import UnidentifiedImageError

from wmerase.types import PixelBuffer, DecodeError, InpaintError

logger = logging.getLogger(__name__)

# Formats with no alpha channel
OPAQUE_SUFFIXES = {'.jpg', '.jpeg', '.bmp'}


def buffer_from_array(image: np.ndarray) -> PixelBuffer:
    """
    Create a pixel buffer from a numpy array.

    Args:
        image: Grayscale (H, W), RGB (H, W, 3) or RGBA (H, W, 4) array,
            uint8 or float in [0, 1]

    Returns:
        C-contiguous (H, W, 4) uint8 array, alpha 255 where none was given

    Raises:
        DecodeError: If the array has an unsupported shape
    """
    image = np.asarray(image)

    if image.dtype != np.uint8:
        if image.size and image.max() <= 1.0:
            image = image * 255.0
        image = np.clip(np.floor(image + 0.5), 0, 255).astype(np.uint8)

    if image.ndim == 2:
        # Grayscale - replicate to RGB
        image = np.stack([image] * 3, axis=-1)

    if image.ndim != 3:
        raise DecodeError(f"Expected 2D or 3D array, got {image.ndim}D")

    if image.shape[2] == 3:
        alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
        image = np.concatenate([image, alpha], axis=-1)
    elif image.shape[2] != 4:
        raise DecodeError(f"Expected 3 or 4 channels, got {image.shape[2]}")

    return np.ascontiguousarray(image)


def load_image(path: Union[str, Path]) -> PixelBuffer:
    """
    Decode an image file into an RGBA pixel buffer.

    Args:
        path: Path to image file

    Returns:
        (H, W, 4) uint8 array

    Raises:
        FileNotFoundError: If file doesn't exist
        DecodeError: If file cannot be decoded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise DecodeError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)
            if img.mode != 'RGBA':
                img = img.convert('RGBA')
            buffer = np.array(img, dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"Failed to load image {path}: {e}") from e
    except (Image.DecompressionBombError, ValueError) as e:
        raise DecodeError(f"Unsupported image {path}: {e}") from e

    logger.debug(f"Loaded {path}: {buffer.shape[1]}x{buffer.shape[0]}")
    return np.ascontiguousarray(buffer)


def save_image(buffer: PixelBuffer, path: Union[str, Path]) -> Path:
    """
    Encode a pixel buffer to an image file.

    Parent folders are created; formats without alpha get RGB only.

    Args:
        buffer: (H, W, 4) uint8 array
        path: Output path, format chosen from the suffix

    Returns:
        Path written

    Raises:
        InpaintError: If the image cannot be saved
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    img = Image.fromarray(np.ascontiguousarray(buffer))
    if path.suffix.lower() in OPAQUE_SUFFIXES:
        img = img.convert('RGB')

    try:
        img.save(path)
    except (OSError, ValueError, KeyError) as e:
        raise InpaintError(f"Could not save image to {path}: {e}") from e

    logger.debug(f"Saved {path}")
    return path
