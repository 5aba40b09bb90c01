"""Axis-aligned bounding volumes and regions."""

from camframe.geometry.bounds import BoundingVolume, BoundsSet, Region, as_vec3

__all__ = ["BoundingVolume", "BoundsSet", "Region", "as_vec3"]
