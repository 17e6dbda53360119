"""Swappable inpainting strategies sharing the (image, mask) -> image contract."""
from wmerase.strategies.base import InpaintStrategy
from wmerase.strategies.router import available_strategies, get_strategy, inpaint_selection

__all__ = [
    "InpaintStrategy",
    "available_strategies",
    "get_strategy",
    "inpaint_selection",
]
