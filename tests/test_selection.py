"""Tests for selection resolving."""
import numpy as np
import pytest

from wmerase.types import Selection, SelectionError, DegenerateSelectionError
from wmerase.selection import (
    auto_detect_selection,
    clamp_selection,
    resolve_selection,
    selection_to_mask,
    mask_to_selection,
)


class TestAutoDetect:
    """Test the fixed-offset watermark guess."""

    def test_standard_image(self):
        """400x300 gives the bottom-right 180x60 block."""
        assert auto_detect_selection(400, 300) == Selection(200, 220, 180, 60)

    def test_small_image(self):
        """Offsets and size shrink to fit a tiny image."""
        assert auto_detect_selection(100, 50) == Selection(0, 0, 100, 50)


class TestClampSelection:
    """Test clamping to image bounds."""

    def test_inside_unchanged(self):
        sel = Selection(10, 10, 20, 20)
        assert clamp_selection(sel, 100, 100) == sel

    def test_overhang_right_bottom(self):
        """Rectangle running past the image is cut at the border."""
        assert clamp_selection(Selection(350, 280, 100, 100), 400, 300) == Selection(350, 280, 50, 20)

    def test_negative_origin(self):
        assert clamp_selection(Selection(-10, -5, 30, 20), 100, 100) == Selection(0, 0, 20, 15)

    def test_outside_is_degenerate(self):
        with pytest.raises(DegenerateSelectionError):
            clamp_selection(Selection(500, 0, 10, 10), 400, 300)

    def test_zero_width_is_degenerate(self):
        with pytest.raises(DegenerateSelectionError):
            clamp_selection(Selection(10, 10, 0, 10), 400, 300)


class TestResolveSelection:
    """Test picking user rectangle vs auto-detect."""

    def test_user_selection_wins(self):
        sel = Selection(5, 5, 10, 10)
        assert resolve_selection(400, 300, sel, auto_detect=True) == sel

    def test_auto_detect_fallback(self):
        assert resolve_selection(400, 300) == Selection(200, 220, 180, 60)

    def test_no_selection_no_auto(self):
        """Without a rectangle and without auto-detect there is nothing to do."""
        with pytest.raises(SelectionError):
            resolve_selection(400, 300, None, auto_detect=False)


class TestMaskConversion:
    """Test rectangle <-> region mask conversion."""

    def test_mask_matches_rectangle(self):
        sel = Selection(3, 2, 4, 5)
        mask = selection_to_mask(sel, 10, 10)

        assert mask.shape == (10, 10)
        assert mask.sum() == 20
        assert mask[2:7, 3:7].all()
        assert mask_to_selection(mask) == sel

    def test_bounding_box_of_irregular_mask(self):
        mask = np.zeros((20, 20), dtype=np.uint8)
        mask[4, 6] = 255
        mask[9, 2] = 255

        assert mask_to_selection(mask) == Selection(2, 4, 5, 6)

    def test_empty_mask(self):
        with pytest.raises(DegenerateSelectionError):
            mask_to_selection(np.zeros((5, 5), dtype=bool))
