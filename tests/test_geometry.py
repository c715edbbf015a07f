"""
Geometry tests: Point3D, position sets, periodic boxes.

Run: python -m pytest tests/test_geometry.py -v
"""

import numpy as np
import pytest

from dpdgeom.constants import get_lattice_name, get_region_name, layer_spacing, row_spacing
from dpdgeom.geometry import BoxGeometry, Point3D, SegmentedBoxGeometry, as_points, as_positions, is_empty


# =============================================================================
# Point3D
# =============================================================================

class TestPoint3D:

    def test_translate_in_place(self):
        p = Point3D(1.0, 2.0, 3.0)
        q = p.translate((0.5, -1.0, 2.0))
        assert q is p
        assert p == Point3D(1.5, 1.0, 5.0)

    def test_translate_by_point(self):
        p = Point3D().translate(Point3D(1, 1, 1))
        assert (p.x, p.y, p.z) == (1.0, 1.0, 1.0)

    def test_norm_and_distance(self):
        assert Point3D(3, 4, 0).norm() == pytest.approx(5.0)
        assert Point3D(1, 1, 1).distance_to(Point3D(1, 1, 3)) == pytest.approx(2.0)

    def test_array_conversion(self):
        arr = np.asarray(Point3D(1, 2, 3))
        assert arr.shape == (3,)
        np.testing.assert_allclose(arr, [1.0, 2.0, 3.0])

    def test_from_sequence(self):
        assert Point3D.from_sequence([1, 2, 3]) == Point3D(1, 2, 3)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Point3D())


# =============================================================================
# Position sets
# =============================================================================

class TestPositions:

    def test_points_and_array_agree(self):
        points = [Point3D(0, 0, 0), Point3D(1, 2, 3)]
        np.testing.assert_allclose(as_positions(points), [[0, 0, 0], [1, 2, 3]])

    def test_round_trip_points(self):
        points = as_points([[0, 0, 0], [1, 2, 3]])
        assert points == [Point3D(0, 0, 0), Point3D(1, 2, 3)]

    def test_none_and_empty(self):
        assert as_positions(None) is None
        assert as_positions([]).shape == (0, 3)
        assert is_empty(None)
        assert is_empty([])
        assert not is_empty([Point3D()])

    def test_bad_shape_raises(self):
        with pytest.raises(ValueError, match="shape"):
            as_positions(np.zeros((4, 2)))


# =============================================================================
# BoxGeometry
# =============================================================================

class TestBoxGeometry:

    @pytest.mark.parametrize("lengths", [(0, 1, 1), (1, -1, 1), (1, 1, 0)])
    def test_non_positive_length_raises(self, lengths):
        with pytest.raises(ValueError, match="positive"):
            BoxGeometry(*lengths)

    def test_nan_length_raises(self):
        with pytest.raises(ValueError, match="positive"):
            BoxGeometry(float("nan"), 1.0, 1.0)

    def test_half_lengths_and_volume(self):
        box = BoxGeometry(2.0, 4.0, 6.0)
        np.testing.assert_allclose(box.half_lengths, [1.0, 2.0, 3.0])
        assert box.volume() == pytest.approx(48.0)

    def test_immutable_arrays(self):
        box = BoxGeometry(1.0, 1.0, 1.0)
        with pytest.raises(ValueError):
            box.lengths[0] = 5.0

    def test_minimum_image_wraps_periodic_axes(self):
        box = BoxGeometry(10.0, 10.0, 10.0)
        np.testing.assert_allclose(box.minimum_image([6.0, -6.0, 4.0]), [-4.0, 4.0, 4.0])

    def test_minimum_image_exact_half_unchanged(self):
        box = BoxGeometry(10.0, 10.0, 10.0)
        np.testing.assert_allclose(box.minimum_image([5.0, -5.0, 0.0]), [5.0, -5.0, 0.0])

    def test_minimum_image_non_periodic_axis(self):
        box = BoxGeometry(10.0, 10.0, 10.0, periodic_x=False)
        np.testing.assert_allclose(box.minimum_image([9.0, 9.0, 9.0]), [9.0, -1.0, -1.0])

    def test_distance_across_boundary(self):
        box = BoxGeometry(10.0, 10.0, 10.0)
        assert box.distance([1.0, 0.0, 0.0], [9.5, 0.0, 0.0]) == pytest.approx(1.5)

    def test_distances_vectorised(self):
        box = BoxGeometry(10.0, 10.0, 10.0)
        others = np.array([[1.0, 0, 0], [9.0, 0, 0], [0, 0, 3.0]])
        np.testing.assert_allclose(box.distances([0, 0, 0], others), [1.0, 1.0, 3.0])


# =============================================================================
# SegmentedBoxGeometry
# =============================================================================

class TestSegmentedBoxGeometry:

    def test_non_positive_segment_raises(self):
        with pytest.raises(ValueError, match="Segment"):
            SegmentedBoxGeometry(0.0, 10.0, 10.0, 10.0)

    def test_nan_segment_raises(self):
        with pytest.raises(ValueError, match="Segment"):
            SegmentedBoxGeometry(float("nan"), 10.0, 10.0, 10.0)

    def test_always_periodic(self):
        assert SegmentedBoxGeometry(1.0, 10.0, 10.0, 10.0).periodic.all()

    def test_minimum_half_length(self):
        box = SegmentedBoxGeometry(0.5, 10.0, 6.0, 8.0)
        assert box.minimum_half_length == pytest.approx(3.0)
        assert box.max_bin_index() == 6

    def test_bin_index_truncates(self):
        box = SegmentedBoxGeometry(1.0, 10.0, 10.0, 10.0)
        assert box.bin_index(0.0) == 0
        assert box.bin_index(0.99) == 0
        assert box.bin_index(2.0) == 2
        np.testing.assert_array_equal(box.bin_indices([0.5, 1.5, 2.0]), [0, 1, 2])

    def test_bin_edges_and_centers(self):
        box = SegmentedBoxGeometry(0.5, 10.0, 10.0, 10.0)
        np.testing.assert_allclose(box.bin_edges(3), [0.0, 0.5, 1.0, 1.5])
        np.testing.assert_allclose(box.bin_centers(3), [0.25, 0.75, 1.25])


# =============================================================================
# Constants
# =============================================================================

class TestConstants:

    def test_spacings(self):
        assert row_spacing(1.0) == pytest.approx(np.sqrt(3.0))
        assert layer_spacing(1.0) == pytest.approx(2.0 * np.sqrt(6.0) / 3.0)

    @pytest.mark.parametrize("alias,name", [
        ("SC", "sc"), ("simple_cubic", "sc"),
        ("hcp", "hcp"), ("hexagonal_close", "hcp"),
        ("FCC", "fcc"), ("face_centered_cubic", "fcc"),
    ])
    def test_lattice_names(self, alias, name):
        assert get_lattice_name(alias) == name

    def test_region_names(self):
        assert get_region_name("box") == "cuboid"
        assert get_region_name("Globe") == "sphere"

    def test_unknown_names(self):
        assert get_lattice_name("bcc") is None
        assert get_region_name("cylinder") is None
