"""Strategy router: pick an inpainting strategy by name."""
import logging
import time
from typing import Callable, Dict, List, Optional

from wmerase.types import (
    PixelBuffer,
    Selection,
    InpaintConfig,
    InpaintResult,
    InpaintStatus,
    ConfigError,
    DegenerateSelectionError,
)
from wmerase.selection import resolve_selection, selection_to_mask
from wmerase.progress import ProgressSink
from wmerase.strategies.base import InpaintStrategy
from wmerase.strategies.texture import TextureFillStrategy
from wmerase.strategies.classical import OpenCVStrategy
from wmerase.strategies.biharmonic import BiharmonicStrategy

logger = logging.getLogger(__name__)

StrategyFactory = Callable[[InpaintConfig, Optional[ProgressSink]], InpaintStrategy]

_STRATEGIES: Dict[str, StrategyFactory] = {
    "texture": lambda config, progress: TextureFillStrategy(config, progress=progress),
    "telea": lambda config, progress: OpenCVStrategy("telea"),
    "ns": lambda config, progress: OpenCVStrategy("ns"),
    "biharmonic": lambda config, progress: BiharmonicStrategy(margin=config.margin),
}


def available_strategies() -> List[str]:
    """Names accepted by get_strategy()."""
    return sorted(_STRATEGIES)


def get_strategy(
    name: Optional[str] = None,
    config: Optional[InpaintConfig] = None,
    progress: Optional[ProgressSink] = None
) -> InpaintStrategy:
    """
    Build the strategy registered under ``name``.

    Args:
        name: Strategy name (defaults to config.backend)
        config: Processing options
        progress: Progress sink, used by strategies that report progress

    Returns:
        InpaintStrategy instance

    Raises:
        ConfigError: If the name is unknown
    """
    config = config or InpaintConfig()
    name = (name or config.backend).lower()

    factory = _STRATEGIES.get(name)
    if factory is None:
        raise ConfigError(
            f"Unknown backend '{name}'. Choose from: {', '.join(available_strategies())}"
        )
    logger.debug(f"Using inpainting backend '{name}'")
    return factory(config, progress)


def inpaint_selection(
    image: PixelBuffer,
    selection: Optional[Selection] = None,
    config: Optional[InpaintConfig] = None,
    progress: Optional[ProgressSink] = None
) -> InpaintResult:
    """
    Inpaint a rectangle with the configured backend.

    Args:
        image: (H, W, 4) uint8 RGBA array
        selection: Rectangle to erase (auto-detected if None and enabled)
        config: Processing options, ``config.backend`` picks the strategy
        progress: Progress sink

    Returns:
        InpaintResult; a degenerate rectangle gives the input back with
        status SKIPPED_DEGENERATE

    Raises:
        ConfigError: If the backend is unknown
        SelectionError: If no rectangle is given and auto-detect is off
    """
    config = config or InpaintConfig()
    height, width = image.shape[:2]
    try:
        sel = resolve_selection(width, height, selection, config.auto_detect)
    except DegenerateSelectionError as e:
        logger.warning(f"Skipping inpaint: {e}")
        return InpaintResult(image, InpaintStatus.SKIPPED_DEGENERATE)

    strategy = get_strategy(config.backend, config, progress)
    start_time = time.time()
    output = strategy.inpaint(image, selection_to_mask(sel, width, height))

    engine_result = getattr(strategy, "last_result", None)
    if engine_result is not None:
        engine_result.image = output
        return engine_result
    return InpaintResult(
        image=output,
        status=InpaintStatus.PROCESSED,
        selection=sel,
        elapsed=time.time() - start_time,
    )
