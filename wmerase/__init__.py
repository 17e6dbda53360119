"""wmerase: texture-synthesis watermark eraser."""
from wmerase.types import (
    Selection,
    InpaintConfig,
    InpaintResult,
    InpaintStatus,
    InpaintError,
    SelectionError,
    DegenerateSelectionError,
    EmptyTextureBankError,
    DecodeError,
    ConfigError,
    InvalidBufferError,
)
from wmerase.engine import Inpainter, inpaint
from wmerase.selection import auto_detect_selection, resolve_selection

__version__ = "0.1.0"

__all__ = [
    "Selection",
    "InpaintConfig",
    "InpaintResult",
    "InpaintStatus",
    "InpaintError",
    "SelectionError",
    "DegenerateSelectionError",
    "EmptyTextureBankError",
    "DecodeError",
    "ConfigError",
    "InvalidBufferError",
    "Inpainter",
    "inpaint",
    "auto_detect_selection",
    "resolve_selection",
]
