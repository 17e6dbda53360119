"""Grain synthesis: noise so the patch is not unnaturally clean."""
import numpy as np

from wmerase.types import PixelBuffer, Selection


def add_grain(
    work: PixelBuffer,
    selection: Selection,
    strength: float,
    rng: np.random.Generator
) -> None:
    """
    Add uniform noise in [-strength, +strength] to each RGB channel.

    Every channel of every selection pixel gets its own draw; results are
    rounded and clamped to [0, 255]. Alpha is untouched.
    """
    if strength <= 0:
        return

    rows, cols = selection.slices()
    region = work[rows, cols, :3].astype(np.float64)
    noise = rng.uniform(-strength, strength, size=region.shape)
    work[rows, cols, :3] = np.clip(np.floor(region + noise + 0.5), 0, 255).astype(np.uint8)
