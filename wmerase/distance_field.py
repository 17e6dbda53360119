"""Distance field over the selection, ordering the fill from edge to center."""
import numpy as np


def compute_distance_field(width: int, height: int) -> np.ndarray:
    """
    Distance of each local pixel to the nearest selection edge.

    Value at (ly, lx) is min(lx, width-1-lx, ly, height-1-ly).

    Args:
        width: Selection width
        height: Selection height

    Returns:
        (height, width) int32 array
    """
    lx = np.arange(width, dtype=np.int32)
    ly = np.arange(height, dtype=np.int32)
    horizontal = np.minimum(lx, width - 1 - lx)
    vertical = np.minimum(ly, height - 1 - ly)
    return np.minimum(vertical[:, None], horizontal[None, :])


def max_layer(field: np.ndarray) -> int:
    """Largest distance in the field (0 for an empty field)."""
    return int(field.max()) if field.size else 0


def layer_coordinates(field: np.ndarray, layer: int):
    """Local (ly, lx) coordinates of one layer, in row-major order."""
    return np.nonzero(field == layer)
