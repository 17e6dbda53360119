"""Core types for the watermark inpainting pipeline."""
import os
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np

# RGBA, uint8, shape (H, W, 4), row-major
PixelBuffer = np.ndarray


class InpaintError(Exception):
    """Base exception for inpainting errors."""
    pass


class SelectionError(InpaintError):
    """Exception raised when no usable selection can be resolved."""
    pass


class DegenerateSelectionError(SelectionError):
    """Selection has zero or negative area after clamping."""
    pass


class EmptyTextureBankError(InpaintError):
    """No exterior samples were found within the margin ring."""
    pass


class DecodeError(InpaintError):
    """Image file could not be decoded into a pixel buffer."""
    pass


class ConfigError(InpaintError, ValueError):
    """Invalid processing option."""
    pass


class InvalidBufferError(InpaintError, ValueError):
    """Array is not an (H, W, 4) uint8 pixel buffer."""
    pass


class InpaintStatus(Enum):
    """Outcome of a single inpaint call."""
    PROCESSED = auto()
    SKIPPED_DEGENERATE = auto()
    SKIPPED_EMPTY_BANK = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class Selection:
    """Rectangle to erase, in pixel coordinates."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def slices(self) -> Tuple[slice, slice]:
        """Row and column slices addressing the rectangle in a buffer."""
        return slice(self.y, self.bottom), slice(self.x, self.right)

    def expanded(self, margin: int, width: int, height: int) -> "Selection":
        """Grow by margin on every side, clipped to the image."""
        x0 = max(0, self.x - margin)
        y0 = max(0, self.y - margin)
        x1 = min(width, self.right + margin)
        y1 = min(height, self.bottom + margin)
        return Selection(x0, y0, x1 - x0, y1 - y0)

    def as_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}


@dataclass
class InpaintConfig:
    """Processing options for the texture-fill inpainter."""
    # Selection
    auto_detect: bool = True

    # Texture bank
    margin: int = 50

    # Progressive fill
    sample_radius_cap: int = 10
    neighbor_falloff: float = 0.3
    injection_samples: int = 2
    injection_weight: float = 0.1
    # Per-pixel chance of mixing in bank draws. The fill weights are tuned
    # for injection at every pixel (1.0); lower values thin it out.
    texture_injection_probability: float = 1.0

    # Smoothing
    passes: int = 8
    smoothing_radius: int = 2

    # Feathering
    feather_width: int = 4

    # Grain
    grain_strength: float = 2.0

    # Scheduling
    yield_every: int = 3

    # Reproducibility
    seed: Optional[int] = None

    # Strategy name, see wmerase.strategies
    backend: str = "texture"

    @property
    def sample_radius(self) -> int:
        return min(self.sample_radius_cap, self.margin)

    def validate(self) -> "InpaintConfig":
        """
        Check every option is in range.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigError: If an option is out of range
        """
        if self.margin < 0:
            raise ConfigError(f"margin must be >= 0, got {self.margin}")
        if self.passes < 0:
            raise ConfigError(f"passes must be >= 0, got {self.passes}")
        if self.grain_strength < 0:
            raise ConfigError(f"grain_strength must be >= 0, got {self.grain_strength}")
        if not 0.0 <= self.texture_injection_probability <= 1.0:
            raise ConfigError(
                "texture_injection_probability must be in [0, 1], "
                f"got {self.texture_injection_probability}"
            )
        if self.sample_radius_cap < 0:
            raise ConfigError(f"sample_radius_cap must be >= 0, got {self.sample_radius_cap}")
        if self.injection_samples < 0 or self.injection_weight < 0:
            raise ConfigError("injection_samples and injection_weight must be >= 0")
        if self.smoothing_radius < 0:
            raise ConfigError(f"smoothing_radius must be >= 0, got {self.smoothing_radius}")
        if self.feather_width < 1:
            raise ConfigError(f"feather_width must be >= 1, got {self.feather_width}")
        if self.yield_every < 1:
            raise ConfigError(f"yield_every must be >= 1, got {self.yield_every}")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "InpaintConfig":
        """Build a config, taking backend and seed from the environment."""
        env = {}
        backend = os.environ.get('WMERASE_BACKEND')
        if backend:
            env['backend'] = backend
        seed = os.environ.get('WMERASE_SEED')
        if seed:
            try:
                env['seed'] = int(seed)
            except ValueError:
                raise ConfigError(f"WMERASE_SEED must be an integer, got {seed!r}")
        env.update(overrides)
        return cls(**env)


@dataclass
class InpaintResult:
    """Result of an inpaint call."""
    image: PixelBuffer
    status: InpaintStatus
    selection: Optional[Selection] = None
    texture_bank_size: int = 0
    max_layer: int = 0
    elapsed: float = 0.0

    @property
    def processed(self) -> bool:
        return self.status is InpaintStatus.PROCESSED


def validate_buffer(buffer: np.ndarray) -> PixelBuffer:
    """
    Check an array is a usable pixel buffer.

    Args:
        buffer: Candidate array

    Returns:
        The same array

    Raises:
        InvalidBufferError: If shape or dtype is wrong
    """
    if not isinstance(buffer, np.ndarray):
        raise InvalidBufferError(f"Expected numpy array, got {type(buffer).__name__}")
    if buffer.ndim != 3 or buffer.shape[2] != 4:
        raise InvalidBufferError(f"Expected (H, W, 4) array, got shape {buffer.shape}")
    if buffer.dtype != np.uint8:
        raise InvalidBufferError(f"Expected uint8 array, got {buffer.dtype}")
    return buffer
