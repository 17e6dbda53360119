"""Selection resolving: auto-detect guess, clamping, and mask conversion."""
import logging
from typing import Optional

import numpy as np

from wmerase.types import Selection, SelectionError, DegenerateSelectionError

logger = logging.getLogger(__name__)

# Typical bottom-right watermark placement
AUTO_OFFSET_X = 200
AUTO_OFFSET_Y = 80
AUTO_WIDTH = 180
AUTO_HEIGHT = 60


def auto_detect_selection(width: int, height: int) -> Selection:
    """
    Guess the watermark rectangle from image size alone.

    No image analysis is done; the rectangle sits at a fixed offset from
    the bottom-right corner.

    Args:
        width: Image width
        height: Image height

    Returns:
        Unclamped selection
    """
    return Selection(
        x=max(0, width - AUTO_OFFSET_X),
        y=max(0, height - AUTO_OFFSET_Y),
        width=min(AUTO_WIDTH, width),
        height=min(AUTO_HEIGHT, height),
    )


def clamp_selection(selection: Selection, width: int, height: int) -> Selection:
    """
    Intersect a selection with the image rectangle.

    Args:
        selection: Requested rectangle
        width: Image width
        height: Image height

    Returns:
        Selection fully inside the image

    Raises:
        DegenerateSelectionError: If nothing of the rectangle is left
    """
    x0 = max(0, selection.x)
    y0 = max(0, selection.y)
    x1 = min(width, selection.x + selection.width)
    y1 = min(height, selection.y + selection.height)

    clamped = Selection(x0, y0, x1 - x0, y1 - y0)
    if clamped.is_degenerate:
        raise DegenerateSelectionError(
            f"Selection {selection.as_dict()} has no area inside {width}x{height} image"
        )

    if clamped != selection:
        logger.debug(f"Clamped selection {selection.as_dict()} -> {clamped.as_dict()}")
    return clamped


def resolve_selection(
    width: int,
    height: int,
    selection: Optional[Selection] = None,
    auto_detect: bool = True
) -> Selection:
    """
    Pick the rectangle to erase.

    Args:
        width: Image width
        height: Image height
        selection: User rectangle, takes precedence when given
        auto_detect: Fall back to the positional guess when no rectangle

    Returns:
        Clamped selection

    Raises:
        SelectionError: If no rectangle is given and auto-detect is off
        DegenerateSelectionError: If the rectangle clamps to zero area
    """
    if selection is None:
        if not auto_detect:
            raise SelectionError("No selection provided and auto-detect is disabled")
        selection = auto_detect_selection(width, height)
        logger.info(f"Auto-detected selection: {selection.as_dict()}")

    return clamp_selection(selection, width, height)


def selection_to_mask(selection: Selection, width: int, height: int) -> np.ndarray:
    """Boolean (H, W) mask, True inside the selection."""
    mask = np.zeros((height, width), dtype=bool)
    rows, cols = selection.slices()
    mask[rows, cols] = True
    return mask


def mask_to_selection(mask: np.ndarray) -> Selection:
    """
    Bounding rectangle of a region mask.

    Args:
        mask: (H, W) array, non-zero marks the region

    Returns:
        Selection covering every marked pixel

    Raises:
        DegenerateSelectionError: If the mask is empty
    """
    coords = np.where(np.asarray(mask) > 0)
    if len(coords[0]) == 0:
        raise DegenerateSelectionError("Region mask is empty")

    y0, y1 = int(np.min(coords[0])), int(np.max(coords[0]))
    x0, x1 = int(np.min(coords[1])), int(np.max(coords[1]))
    return Selection(x0, y0, x1 - x0 + 1, y1 - y0 + 1)
