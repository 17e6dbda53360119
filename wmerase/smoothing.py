"""Box-blur smoothing restricted to the selection."""
import logging
from typing import Callable, Iterator, Optional

import numpy as np
from scipy import ndimage

from wmerase.types import PixelBuffer, Selection

logger = logging.getLogger(__name__)


def box_blur_selection(snapshot: PixelBuffer, selection: Selection, radius: int = 2) -> np.ndarray:
    """
    Box-blurred RGB of the selection, computed from a snapshot.

    Each pixel becomes the unweighted mean of the in-bounds pixels of the
    (2*radius+1)^2 window around it, rounded half up. Window pixels outside
    the selection take part too.

    Args:
        snapshot: Read-only RGBA buffer
        selection: Clamped selection
        radius: Window radius

    Returns:
        (selection.height, selection.width, 3) uint8 array
    """
    height, width = snapshot.shape[:2]
    box = selection.expanded(radius, width, height)
    rows, cols = box.slices()
    crop = snapshot[rows, cols, :3].astype(np.int64)

    size = 2 * radius + 1
    kernel = np.ones((size, size), dtype=np.int64)
    # Zero padding at image borders drops out-of-bounds pixels from both sums
    counts = ndimage.correlate(
        np.ones(crop.shape[:2], dtype=np.int64), kernel, mode='constant', cval=0
    )
    sums = np.stack([
        ndimage.correlate(crop[..., c], kernel, mode='constant', cval=0)
        for c in range(3)
    ], axis=-1)

    oy = selection.y - box.y
    ox = selection.x - box.x
    sums = sums[oy:oy + selection.height, ox:ox + selection.width]
    counts = counts[oy:oy + selection.height, ox:ox + selection.width, None]

    # Integer round-half-up of sums / counts
    return ((2 * sums + counts) // (2 * counts)).astype(np.uint8)


def smooth_selection(
    work: PixelBuffer,
    selection: Selection,
    passes: int,
    radius: int = 2,
    on_progress: Optional[Callable[[float], None]] = None
) -> Iterator[None]:
    """
    Run ``passes`` box-blur iterations over the selection.

    Every pass reads a full snapshot of the previous one, never the pixels
    it is writing. Generator: yields after each pass.

    Args:
        work: Working buffer, updated in place
        selection: Clamped selection
        passes: Number of iterations, 0 skips the stage
        radius: Window radius
        on_progress: Receives the completed fraction in [0, 1]
    """
    if passes <= 0:
        logger.debug("Smoothing skipped (passes=0)")
        return

    rows, cols = selection.slices()
    for i in range(passes):
        snapshot = work.copy()
        work[rows, cols, :3] = box_blur_selection(snapshot, selection, radius)

        if on_progress is not None:
            on_progress((i + 1) / passes)
        yield
