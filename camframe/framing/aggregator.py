"""
Framing target computation.

Reduces an ordered set of bounding volumes to one camera position that
frames all of them, by backing the camera off along its (fixed) forward
axis from the center of the enclosing region.

The back-off distance is a heuristic, not a field-of-view fit: the
dimension (X or Y) with the larger screen-space footprint ratio is picked,
and its world-space size is used as the offset.
"""

from __future__ import annotations

import logging
from typing import Sequence, Union

import numpy as np

from camframe.camera.projection import Viewport
from camframe.geometry.bounds import BoundingVolume, BoundsSet, Region, Vec3Like, as_vec3

logger = logging.getLogger(__name__)

BoundsInput = Union[BoundsSet, Sequence[BoundingVolume]]


class EmptyInputError(ValueError):
    """Raised when a framing target is requested for zero volumes."""
    pass


def framing_offset(size: np.ndarray, viewport: Viewport) -> float:
    """World-space back-off for a box of *size* on *viewport*.

    Y wins only if its screen ratio is strictly larger than X's.
    """
    if size[1] / viewport.height > size[0] / viewport.width:
        return float(size[1])
    return float(size[0])


class BoundsAggregator:
    """Computes the framing target for a set of bounding volumes.

    Pure: never mutates the input set or any camera state.

    Args:
        legacy_depth_scan: Reproduce the historical front/back scan that
            shifts the X component of the extremal point by the Z extent
            instead of the Z component.
    """

    def __init__(self, legacy_depth_scan: bool = False):
        self.legacy_depth_scan = legacy_depth_scan

    def compute_framing_target(
        self,
        bounds: BoundsInput,
        camera_forward: Vec3Like,
        viewport: Viewport,
    ) -> np.ndarray:
        volumes = tuple(bounds)
        if not volumes:
            raise EmptyInputError("cannot compute a framing target for zero volumes")
        forward = as_vec3(camera_forward, "camera_forward")

        if len(volumes) == 1:
            vol = volumes[0]
            size = vol.size
            offset = framing_offset(size, viewport)
            target = vol.center - forward * size[2] - forward * offset
            logger.debug("Single-volume framing: offset=%.3f target=%s", offset, target.tolist())
            return target

        region = self.enclosing_region(volumes)
        size = region.size
        offset = framing_offset(size, viewport)
        target = region.center - forward * offset - forward * (size[2] / 2.0)
        logger.debug(
            "Framing %d volumes: region size=%s offset=%.3f target=%s",
            len(volumes), size.tolist(), offset, target.tolist(),
        )
        return target

    def enclosing_region(self, volumes: Sequence[BoundingVolume]) -> Region:
        """Region spanned by the six extremal face points of *volumes*.

        Each direction is scanned independently; on a tie the later volume
        wins. This is not a true union of the boxes: the extremal points
        carry the other coordinates of the volume's center.
        """
        first = volumes[0]
        top = first.face_point(1, +1)
        bottom = first.face_point(1, -1)
        right = first.face_point(0, +1)
        left = first.face_point(0, -1)
        front = first.face_point(2, +1)
        back = first.face_point(2, -1)

        # axis shifted by the Z extent in the front/back scan
        depth_axis = 0 if self.legacy_depth_scan else 2

        for vol in volumes[1:]:
            c = vol.center
            e = vol.extents
            if top[1] <= c[1] + e[1]:
                top = vol.face_point(1, +1)
            if bottom[1] >= c[1] - e[1]:
                bottom = vol.face_point(1, -1)
            if right[0] <= c[0] + e[0]:
                right = vol.face_point(0, +1)
            if left[0] >= c[0] - e[0]:
                left = vol.face_point(0, -1)
            if front[2] <= c[2] + e[2]:
                front = c.copy()
                front[depth_axis] += e[2]
            if back[2] >= c[2] - e[2]:
                back = c.copy()
                back[depth_axis] -= e[2]

        region = Region.at(top)
        for point in (bottom, right, left, front, back):
            region.encapsulate(point)
        return region


def compute_framing_target(
    bounds: BoundsInput,
    camera_forward: Vec3Like,
    viewport: Viewport,
    legacy_depth_scan: bool = False,
) -> np.ndarray:
    """Functional wrapper around BoundsAggregator.compute_framing_target()."""
    return BoundsAggregator(legacy_depth_scan).compute_framing_target(
        bounds, camera_forward, viewport
    )
