"""Texture-fill inpainting pipeline.

Stages, in order: selection resolving, texture bank, distance field,
progressive fill, smoothing, edge feathering, grain. The call owns one
working copy of the input buffer; the caller's array is never written.

Stages are generators. A bare ``yield`` marks a point where control can go
back to a host scheduler; ``Inpainter.process`` runs straight through,
``Inpainter.process_async`` hands control to the asyncio loop at each one.
"""
import asyncio
import logging
import time
from typing import Callable, Generator, Optional

import numpy as np

from wmerase.types import (
    PixelBuffer,
    Selection,
    InpaintConfig,
    InpaintResult,
    InpaintStatus,
    DegenerateSelectionError,
    validate_buffer,
)
from wmerase.selection import resolve_selection
from wmerase.texture_bank import build_texture_bank
from wmerase.distance_field import compute_distance_field, max_layer
from wmerase.fill import prefill_mean_color, progressive_fill
from wmerase.smoothing import smooth_selection
from wmerase.feather import feather_edges
from wmerase.grain import add_grain
from wmerase.progress import (
    ProgressReporter,
    ProgressSink,
    PREFILL_DONE,
    FILL_RANGE,
    FILL_DONE,
    SMOOTH_RANGE,
    SMOOTH_DONE,
    COMPLETE,
)

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class Inpainter:
    """Erase a rectangle by synthesizing texture from its surroundings."""

    def __init__(
        self,
        config: Optional[InpaintConfig] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize inpainter.

        Args:
            config: Processing options (uses defaults if None)
            rng: Random source for texture injection and grain. When None,
                a fresh generator seeded with ``config.seed`` is made for
                every call.
        """
        self.config = (config or InpaintConfig()).validate()
        self.rng = rng

    def _make_rng(self) -> np.random.Generator:
        if self.rng is not None:
            return self.rng
        return np.random.default_rng(self.config.seed)

    def steps(
        self,
        buffer: PixelBuffer,
        selection: Optional[Selection] = None,
        progress: Optional[ProgressSink] = None
    ) -> Generator[None, None, InpaintResult]:
        """
        Run the pipeline as a generator.

        Yields at every cooperative suspension point and returns the
        InpaintResult through StopIteration.

        Args:
            buffer: RGBA pixel buffer
            selection: Rectangle to erase (auto-detected if None and enabled)
            progress: Receives percentages in [0, 100], non-decreasing

        Raises:
            InvalidBufferError: If buffer is not (H, W, 4) uint8
            SelectionError: If no selection and auto-detect is disabled
        """
        start_time = time.time()
        validate_buffer(buffer)
        config = self.config
        height, width = buffer.shape[:2]
        reporter = ProgressReporter(progress)

        # Step 1: Resolve selection
        try:
            sel = resolve_selection(width, height, selection, config.auto_detect)
        except DegenerateSelectionError as e:
            logger.warning(f"Skipping inpaint: {e}")
            return InpaintResult(buffer, InpaintStatus.SKIPPED_DEGENERATE)
        logger.info(f"Step 1/7: Selection {sel.as_dict()} in {width}x{height} image")

        # Step 2: Texture bank
        bank = build_texture_bank(buffer, sel, config.margin)
        if bank.is_empty:
            logger.warning(f"Skipping inpaint: no texture samples within margin {config.margin}")
            return InpaintResult(buffer, InpaintStatus.SKIPPED_EMPTY_BANK, selection=sel)
        logger.info(f"Step 2/7: Texture bank holds {len(bank)} samples")

        rng = self._make_rng()
        original = buffer.copy()
        original.flags.writeable = False
        work = buffer.copy()

        prefill_mean_color(work, sel, bank)
        reporter.report(PREFILL_DONE)
        yield

        # Step 3: Distance field
        field = compute_distance_field(sel.width, sel.height)
        top = max_layer(field)
        logger.info(f"Step 3/7: Distance field with {top + 1} layers")

        # Step 4: Progressive fill
        yield from progressive_fill(
            work, original, sel, field, bank, config, rng,
            on_progress=reporter.sub_range(*FILL_RANGE),
        )
        reporter.report(FILL_DONE)
        logger.info("Step 4/7: Progressive fill done")

        # Step 5: Smoothing
        yield from smooth_selection(
            work, sel, config.passes, config.smoothing_radius,
            on_progress=reporter.sub_range(*SMOOTH_RANGE),
        )
        reporter.report(SMOOTH_DONE)
        logger.info(f"Step 5/7: Smoothing ({config.passes} passes) done")

        # Step 6: Feathering
        blended = feather_edges(work, original, sel, field, config.feather_width)
        logger.info(f"Step 6/7: Feathered {blended} boundary pixels")

        # Step 7: Grain
        add_grain(work, sel, config.grain_strength, rng)
        reporter.report(COMPLETE)

        elapsed = time.time() - start_time
        logger.info(f"Step 7/7: Grain added, inpaint finished in {elapsed:.2f}s")

        return InpaintResult(
            image=work,
            status=InpaintStatus.PROCESSED,
            selection=sel,
            texture_bank_size=len(bank),
            max_layer=top,
            elapsed=elapsed,
        )

    def process(
        self,
        buffer: PixelBuffer,
        selection: Optional[Selection] = None,
        progress: Optional[ProgressSink] = None,
        should_cancel: Optional[CancelCheck] = None
    ) -> InpaintResult:
        """
        Run the pipeline to completion on the calling thread.

        Args:
            buffer: RGBA pixel buffer
            selection: Rectangle to erase (auto-detected if None and enabled)
            progress: Receives percentages in [0, 100]
            should_cancel: Checked at every suspension point; when it returns
                True the call stops and returns the untouched input

        Returns:
            InpaintResult
        """
        gen = self.steps(buffer, selection, progress)
        try:
            while True:
                next(gen)
                if should_cancel is not None and should_cancel():
                    gen.close()
                    return self._cancelled(buffer)
        except StopIteration as stop:
            return stop.value

    async def process_async(
        self,
        buffer: PixelBuffer,
        selection: Optional[Selection] = None,
        progress: Optional[ProgressSink] = None,
        should_cancel: Optional[CancelCheck] = None
    ) -> InpaintResult:
        """
        Run the pipeline, yielding to the event loop at suspension points.

        Same arguments and result as ``process``.
        """
        gen = self.steps(buffer, selection, progress)
        try:
            while True:
                next(gen)
                await asyncio.sleep(0)
                if should_cancel is not None and should_cancel():
                    gen.close()
                    return self._cancelled(buffer)
        except StopIteration as stop:
            return stop.value

    def _cancelled(self, buffer: PixelBuffer) -> InpaintResult:
        logger.info("Inpaint cancelled, returning input unchanged")
        return InpaintResult(buffer, InpaintStatus.CANCELLED)


def inpaint(
    buffer: PixelBuffer,
    selection: Optional[Selection] = None,
    config: Optional[InpaintConfig] = None,
    progress: Optional[ProgressSink] = None,
    rng: Optional[np.random.Generator] = None
) -> PixelBuffer:
    """
    Erase a rectangle from an RGBA buffer.

    Convenience function for one-off processing. Degenerate selections and
    an empty texture bank return the input unchanged; use
    ``Inpainter.process`` to see which happened.

    Args:
        buffer: (H, W, 4) uint8 RGBA array
        selection: Rectangle to erase (auto-detected if None and enabled)
        config: Processing options
        progress: Receives percentages in [0, 100]
        rng: Random source, for reproducible output

    Returns:
        Inpainted buffer

    Example:
        >>> out = inpaint(pixels, Selection(200, 220, 180, 60))
        >>> out = inpaint(pixels, config=InpaintConfig(seed=7))
    """
    return Inpainter(config, rng).process(buffer, selection, progress).image
