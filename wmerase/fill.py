"""Progressive fill: erode the selection from its edge to its center.

The selection is first flooded with the texture bank's mean color. Layers of
the distance field are then finalized in increasing order. A pixel at layer N
averages its neighbors that are either outside the selection (read from the
original snapshot) or inside at a layer below N (read from the working
buffer), plus a few random texture bank samples at a low weight.

Pixels of one layer never read each other, so each layer is computed as a
single vectorized step.
"""
import logging
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from wmerase.types import PixelBuffer, Selection, InpaintConfig
from wmerase.texture_bank import TextureBank
from wmerase.distance_field import max_layer, layer_coordinates

logger = logging.getLogger(__name__)


def neighbor_offsets(radius: int, falloff: float = 0.3) -> List[Tuple[int, int, float]]:
    """
    Offsets of the circular sampling window with their weights.

    Args:
        radius: Window radius; offsets with 0 < distance <= radius are kept
        falloff: Weight is 1 / (1 + distance * falloff)

    Returns:
        List of (dy, dx, weight) in row-major scan order
    """
    offsets = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            d = float(np.hypot(dx, dy))
            if d == 0 or d > radius:
                continue
            offsets.append((dy, dx, 1.0 / (1.0 + d * falloff)))
    return offsets


def prefill_mean_color(work: PixelBuffer, selection: Selection, bank: TextureBank) -> Tuple[int, int, int]:
    """
    Flood the selection RGB with the bank's mean color.

    Returns:
        The mean color used
    """
    color = bank.mean_color()
    rows, cols = selection.slices()
    work[rows, cols, :3] = color
    logger.debug(f"Pre-filled selection with mean color {color}")
    return color


def fill_layer(
    work: PixelBuffer,
    original: PixelBuffer,
    selection: Selection,
    field: np.ndarray,
    layer: int,
    offsets: List[Tuple[int, int, float]],
    bank: TextureBank,
    config: InpaintConfig,
    rng: np.random.Generator
) -> int:
    """
    Finalize every pixel of one layer.

    Args:
        work: Working buffer, updated in place
        original: Read-only snapshot of the input
        selection: Clamped selection
        field: Distance field of the selection
        layer: Layer to finalize
        offsets: Output of neighbor_offsets()
        bank: Texture bank for injection
        config: Processing options
        rng: Random source for injection draws

    Returns:
        Number of pixels updated
    """
    height, width = work.shape[:2]
    ly, lx = layer_coordinates(field, layer)
    count = len(ly)
    if count == 0:
        return 0

    gy = ly + selection.y
    gx = lx + selection.x

    sums = np.zeros((count, 3), dtype=np.float64)
    total = np.zeros(count, dtype=np.float64)

    for dy, dx, weight in offsets:
        sy = gy + dy
        sx = gx + dx
        in_bounds = (sy >= 0) & (sy < height) & (sx >= 0) & (sx < width)
        if not in_bounds.any():
            continue
        sy = np.clip(sy, 0, height - 1)
        sx = np.clip(sx, 0, width - 1)

        inside = (
            (sx >= selection.x) & (sx < selection.right)
            & (sy >= selection.y) & (sy < selection.bottom)
        )
        neighbor_layer = field[
            np.clip(sy - selection.y, 0, selection.height - 1),
            np.clip(sx - selection.x, 0, selection.width - 1),
        ]
        # Causal order: only exterior or already finalized pixels
        usable = in_bounds & (~inside | (neighbor_layer < layer))
        if not usable.any():
            continue

        values = np.where(
            inside[:, None],
            work[sy, sx, :3],
            original[sy, sx, :3],
        ).astype(np.float64)
        w = usable * weight
        sums += values * w[:, None]
        total += w

    k = config.injection_samples
    if k > 0 and config.injection_weight > 0 and not bank.is_empty:
        draws = bank.draw(rng, count * k).reshape(count, k, 3).astype(np.float64)
        gate = np.ones(count, dtype=bool)
        if config.texture_injection_probability < 1.0:
            gate = rng.random(count) < config.texture_injection_probability
        w = gate * config.injection_weight
        sums += draws.sum(axis=1) * w[:, None]
        total += w * k

    update = total > 0
    if not update.any():
        return 0

    mean = sums[update] / total[update][:, None]
    work[gy[update], gx[update], :3] = np.floor(mean + 0.5).astype(np.uint8)
    return int(update.sum())


def progressive_fill(
    work: PixelBuffer,
    original: PixelBuffer,
    selection: Selection,
    field: np.ndarray,
    bank: TextureBank,
    config: InpaintConfig,
    rng: np.random.Generator,
    on_progress: Optional[Callable[[float], None]] = None
) -> Iterator[None]:
    """
    Fill the selection layer by layer, from edge to center.

    Generator: yields after every ``config.yield_every`` layers so a host
    scheduler can run other work. Nothing else may touch ``work`` between
    yields.

    Args:
        work: Working buffer, already pre-filled, updated in place
        original: Read-only snapshot of the input
        selection: Clamped selection
        field: Distance field of the selection
        bank: Non-empty texture bank
        config: Processing options
        rng: Random source
        on_progress: Receives the completed fraction in [0, 1]
    """
    top = max_layer(field)
    offsets = neighbor_offsets(config.sample_radius, config.neighbor_falloff)
    logger.debug(f"Filling {top + 1} layers with {len(offsets)} neighbor offsets")

    for layer in range(top + 1):
        fill_layer(work, original, selection, field, layer, offsets, bank, config, rng)

        if on_progress is not None:
            on_progress(layer / top if top > 0 else 1.0)

        if layer % config.yield_every == 0:
            yield
