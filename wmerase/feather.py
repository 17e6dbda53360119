"""Edge feathering: blend the boundary band toward the true exterior colors."""
import logging

import numpy as np

from wmerase.types import PixelBuffer, Selection

logger = logging.getLogger(__name__)


def nearest_exterior(
    original: PixelBuffer,
    selection: Selection,
    ys: np.ndarray,
    xs: np.ndarray,
    window: int
):
    """
    Nearest exterior pixel of each given pixel, within a square window.

    The window is scanned row by row; on equal distance the first pixel
    found wins.

    Args:
        original: Read-only snapshot of the input
        selection: Clamped selection
        ys: Row coordinates
        xs: Column coordinates
        window: Half-width of the search window

    Returns:
        Tuple (colors, found): (N, 3) uint8 colors and an (N,) bool array,
        False where the window holds no exterior pixel
    """
    height, width = original.shape[:2]
    count = len(ys)
    best = np.full(count, np.inf)
    colors = np.zeros((count, 3), dtype=np.uint8)

    for dy in range(-window, window + 1):
        for dx in range(-window, window + 1):
            sy = ys + dy
            sx = xs + dx
            valid = (sy >= 0) & (sy < height) & (sx >= 0) & (sx < width)
            valid &= ~(
                (sx >= selection.x) & (sx < selection.right)
                & (sy >= selection.y) & (sy < selection.bottom)
            )
            closer = valid & (np.hypot(dx, dy) < best)
            if not closer.any():
                continue
            best[closer] = np.hypot(dx, dy)
            colors[closer] = original[sy[closer], sx[closer], :3]

    return colors, np.isfinite(best)


def feather_edges(
    work: PixelBuffer,
    original: PixelBuffer,
    selection: Selection,
    field: np.ndarray,
    feather_width: int = 4
) -> int:
    """
    Blend the band of width ``feather_width`` inside the selection edge.

    output = current * (d / fw) + exterior * (1 - d / fw), where d is the
    pixel's distance field value. Band pixels with no exterior pixel in the
    search window keep their synthesized value.

    Args:
        work: Working buffer, updated in place
        original: Read-only snapshot of the input
        selection: Clamped selection
        field: Distance field of the selection
        feather_width: Band width and search half-width

    Returns:
        Number of pixels blended
    """
    ly, lx = np.nonzero(field < feather_width)
    if len(ly) == 0:
        return 0

    ys = ly + selection.y
    xs = lx + selection.x
    colors, found = nearest_exterior(original, selection, ys, xs, feather_width)

    ys, xs = ys[found], xs[found]
    blend = (field[ly[found], lx[found]] / feather_width)[:, None]
    current = work[ys, xs, :3].astype(np.float64)
    mixed = current * blend + colors[found].astype(np.float64) * (1.0 - blend)
    work[ys, xs, :3] = np.floor(mixed + 0.5).astype(np.uint8)

    skipped = int((~found).sum())
    if skipped:
        logger.debug(f"Feathering: {skipped} band pixels have no exterior pixel in reach")
    return int(found.sum())
