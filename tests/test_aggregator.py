"""Tests for framing target computation."""

import numpy as np
import pytest

from camframe.camera.projection import Viewport
from camframe.framing.aggregator import (
    BoundsAggregator,
    EmptyInputError,
    compute_framing_target,
    framing_offset,
)
from camframe.geometry.bounds import BoundingVolume, BoundsSet

FORWARD_Z = np.array([0.0, 0.0, 1.0])


def _vol(center, extents=(1, 1, 1)):
    return BoundingVolume(center=center, extents=extents)


class TestFramingOffset:
    def test_taller_on_screen_uses_height(self, viewport):
        # 2/600 > 2/800
        assert framing_offset(np.array([2.0, 2.0, 2.0]), viewport) == 2.0

    def test_wider_on_screen_uses_width(self, viewport):
        assert framing_offset(np.array([8.0, 2.0, 1.0]), viewport) == 8.0

    def test_equal_ratio_uses_width(self, viewport):
        # 3/600 == 4/800: Y must be strictly larger to win
        assert framing_offset(np.array([4.0, 3.0, 0.0]), viewport) == 4.0


class TestSingleVolume:
    def test_unit_cube_at_origin(self, viewport):
        target = compute_framing_target([_vol((0, 0, 0))], FORWARD_Z, viewport)
        # size (2,2,2): offset = size.y = 2, depth term = size.z = 2
        np.testing.assert_array_equal(target, [0.0, 0.0, -4.0])

    def test_wide_volume_uses_width(self, viewport):
        target = compute_framing_target([_vol((0, 0, 0), (4, 1, 0.5))], FORWARD_Z, viewport)
        # offset = size.x = 8, depth term = 1
        np.testing.assert_array_equal(target, [0.0, 0.0, -9.0])

    def test_offset_follows_forward(self, viewport):
        forward = np.array([1.0, 0.0, 0.0])
        target = compute_framing_target([_vol((0, 5, 0))], forward, viewport)
        np.testing.assert_array_equal(target, [-4.0, 5.0, 0.0])

    def test_accepts_bounds_set(self, viewport):
        bounds = BoundsSet([_vol((1, 2, 3))])
        target = compute_framing_target(bounds, FORWARD_Z, viewport)
        np.testing.assert_array_equal(target, [1.0, 2.0, -1.0])


class TestMultipleVolumes:
    def test_two_volumes(self, viewport):
        vols = [_vol((0, 0, 0)), _vol((4, 2, 6))]
        target = compute_framing_target(vols, FORWARD_Z, viewport)
        # region (-1,-1,-1)..(5,3,7): center (2,1,3), size (6,4,8)
        # 4/600 < 6/800 -> offset 6; depth term 8/2
        np.testing.assert_array_equal(target, [2.0, 1.0, -7.0])

    def test_enclosing_region(self):
        vols = [_vol((0, 0, 0)), _vol((4, 2, 6))]
        region = BoundsAggregator().enclosing_region(vols)
        np.testing.assert_array_equal(region.min, [-1, -1, -1])
        np.testing.assert_array_equal(region.max, [5, 3, 7])

    def test_idempotent(self, viewport):
        bounds = BoundsSet([_vol((0, 0, 0)), _vol((3, -2, 5), (0.5, 2, 1)), _vol((-4, 1, 2))])
        agg = BoundsAggregator()
        first = agg.compute_framing_target(bounds, FORWARD_Z, viewport)
        second = agg.compute_framing_target(bounds, FORWARD_Z, viewport)
        np.testing.assert_array_equal(first, second)

    def test_does_not_mutate_input(self, viewport):
        vols = [_vol((0, 0, 0)), _vol((4, 2, 6))]
        bounds = BoundsSet(vols)
        compute_framing_target(bounds, FORWARD_Z, viewport)
        assert list(bounds) == vols
        np.testing.assert_array_equal(vols[1].center, [4, 2, 6])

    def test_duplicates_frame_like_single_box(self, viewport):
        vols = [_vol((0, 0, 0)), _vol((0, 0, 0))]
        target = compute_framing_target(vols, FORWARD_Z, viewport)
        # region is the box itself: offset 2, depth term 1
        np.testing.assert_array_equal(target, [0.0, 0.0, -3.0])


class TestDepthScan:
    """The back volume decides the region's near Z plane."""

    VOLS = [_vol((0, 0, 0)), _vol((0, 0, -6), (1, 1, 2))]

    def test_fixed_scan_shifts_z(self, viewport):
        agg = BoundsAggregator(legacy_depth_scan=False)
        region = agg.enclosing_region(self.VOLS)
        np.testing.assert_array_equal(region.min, [-1, -1, -8])
        np.testing.assert_array_equal(region.max, [1, 1, 1])
        target = agg.compute_framing_target(self.VOLS, FORWARD_Z, viewport)
        np.testing.assert_array_equal(target, [0.0, 0.0, -10.0])

    def test_legacy_scan_shifts_x(self, viewport):
        agg = BoundsAggregator(legacy_depth_scan=True)
        region = agg.enclosing_region(self.VOLS)
        # back point becomes (-2, 0, -6): X grows, Z stays at the center
        np.testing.assert_array_equal(region.min, [-2, -1, -6])
        np.testing.assert_array_equal(region.max, [1, 1, 1])
        target = agg.compute_framing_target(self.VOLS, FORWARD_Z, viewport)
        np.testing.assert_array_equal(target, [-0.5, 0.0, -9.0])

    def test_wrapper_forwards_flag(self, viewport):
        target = compute_framing_target(self.VOLS, FORWARD_Z, viewport, legacy_depth_scan=True)
        np.testing.assert_array_equal(target, [-0.5, 0.0, -9.0])


class TestEmptyInput:
    def test_empty_list_raises(self, viewport):
        with pytest.raises(EmptyInputError):
            compute_framing_target([], FORWARD_Z, viewport)

    def test_empty_bounds_set_raises(self, viewport):
        with pytest.raises(EmptyInputError):
            BoundsAggregator().compute_framing_target(BoundsSet(), FORWARD_Z, viewport)

    def test_is_value_error(self):
        assert issubclass(EmptyInputError, ValueError)


class TestViewportDependence:
    def test_short_viewport_switches_to_height(self):
        # size (8, 2, 1): 2/200 = 0.01 > 8/1000 = 0.008 -> offset from Y
        target = compute_framing_target(
            [_vol((0, 0, 0), (4, 1, 0.5))], FORWARD_Z, Viewport(width=1000, height=200)
        )
        np.testing.assert_array_equal(target, [0.0, 0.0, -3.0])
