"""Tests for edge feathering."""
import numpy as np

from wmerase.types import Selection
from wmerase.distance_field import compute_distance_field
from wmerase.feather import nearest_exterior, feather_edges


class TestNearestExterior:
    """Test the exterior pixel search."""

    def test_tie_goes_to_first_in_scan_order(self):
        image = np.zeros((7, 7, 4), dtype=np.uint8)
        image[1, 2, :3] = (10, 10, 10)   # above the corner
        image[2, 1, :3] = (20, 20, 20)   # left of the corner
        sel = Selection(2, 2, 3, 3)

        colors, found = nearest_exterior(image, sel, np.array([2]), np.array([2]), 4)

        assert found[0]
        assert tuple(colors[0]) == (10, 10, 10)

    def test_nothing_in_reach(self):
        image = np.zeros((20, 20, 4), dtype=np.uint8)
        sel = Selection(0, 10, 20, 10)

        _, found = nearest_exterior(image, sel, np.array([19]), np.array([10]), 4)

        assert not found[0]


class TestFeatherEdges:
    """Test band blending."""

    def test_linear_blend_by_layer(self):
        image = np.zeros((20, 20, 4), dtype=np.uint8)
        image[..., :3] = 100
        image[..., 3] = 255
        sel = Selection(5, 5, 10, 10)
        work = image.copy()
        work[5:15, 5:15, :3] = 200
        field = compute_distance_field(sel.width, sel.height)

        feather_edges(work, image, sel, field, feather_width=4)

        row = work[9, 5:10, 0]
        np.testing.assert_array_equal(row, [100, 125, 150, 175, 200])

    def test_pixels_without_exterior_keep_value(self):
        image = np.zeros((20, 20, 4), dtype=np.uint8)
        image[:10, :, :3] = 100
        sel = Selection(0, 10, 20, 10)
        work = image.copy()
        work[10:, :, :3] = 200
        field = compute_distance_field(sel.width, sel.height)

        blended = feather_edges(work, image, sel, field, feather_width=4)

        # top row of the selection sees the exterior
        assert work[10, 10, 0] == 100
        # bottom row is four layers from any exterior pixel
        assert work[19, 10, 0] == 200
        assert blended < int((field < 4).sum())

    def test_alpha_untouched(self, small_image, small_selection):
        work = small_image.copy()
        field = compute_distance_field(small_selection.width, small_selection.height)

        feather_edges(work, small_image, small_selection, field)

        np.testing.assert_array_equal(work[..., 3], small_image[..., 3])
