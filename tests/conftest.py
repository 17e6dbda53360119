"""Pytest configuration and fixtures."""
import numpy as np
import pytest

from wmerase.types import Selection


def noisy_rgba(width: int, height: int, seed: int = 0, random_alpha: bool = False) -> np.ndarray:
    """Dark noisy RGBA image, every channel value in [20, 110)."""
    rng = np.random.default_rng(seed)
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., :3] = rng.integers(20, 110, size=(height, width, 3))
    if random_alpha:
        image[..., 3] = rng.integers(0, 256, size=(height, width))
    else:
        image[..., 3] = 255
    return image


def stamp(image: np.ndarray, selection: Selection, color=(255, 255, 255)) -> np.ndarray:
    """Copy of image with the selection painted a flat color."""
    out = image.copy()
    rows, cols = selection.slices()
    out[rows, cols, :3] = color
    return out


@pytest.fixture
def make_image():
    """Factory for noisy test images."""
    return noisy_rgba


@pytest.fixture
def small_selection():
    """40x20 rectangle inside the small test image."""
    return Selection(40, 35, 40, 20)


@pytest.fixture
def small_image(small_selection):
    """120x90 noisy image with a white block over small_selection."""
    return stamp(noisy_rgba(120, 90, seed=1, random_alpha=True), small_selection)


@pytest.fixture
def scenario_image():
    """400x300 noisy image with a white block at the auto-detect position."""
    return stamp(noisy_rgba(400, 300, seed=2), Selection(200, 220, 180, 60))


@pytest.fixture
def uniform_image():
    """64x48 image of a single color (90, 120, 150)."""
    image = np.empty((48, 64, 4), dtype=np.uint8)
    image[..., :3] = (90, 120, 150)
    image[..., 3] = 255
    return image


@pytest.fixture
def stamp_region():
    """Helper painting a selection with a flat color."""
    return stamp
