"""
Axis-aligned bounding volumes.

A BoundingVolume is an immutable snapshot of an object's bounds taken when
the object is registered; moving the object afterwards does not update it.
A Region is the mutable min/max box used while aggregating volumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

import numpy as np

Vec3Like = Union[Sequence[float], np.ndarray]


def as_vec3(value: Vec3Like, name: str = "vector") -> np.ndarray:
    """Convert *value* to a float64 array of shape (3,)."""
    arr = np.array(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {arr.shape}")
    return arr


@dataclass(frozen=True, eq=False)
class BoundingVolume:
    """Axis-aligned box described by its center and half-size per axis.

    Attributes:
        center: (3,) world-space center
        extents: (3,) half-size along X, Y, Z (non-negative)
    """

    center: np.ndarray
    extents: np.ndarray

    def __post_init__(self):
        center = as_vec3(self.center, "center")
        extents = as_vec3(self.extents, "extents")
        if np.any(extents < 0):
            raise ValueError(f"extents must be non-negative, got {extents.tolist()}")
        center.flags.writeable = False
        extents.flags.writeable = False
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "extents", extents)

    @classmethod
    def from_min_max(cls, bounds_min: Vec3Like, bounds_max: Vec3Like) -> BoundingVolume:
        lo = as_vec3(bounds_min, "bounds_min")
        hi = as_vec3(bounds_max, "bounds_max")
        return cls(center=(lo + hi) / 2.0, extents=(hi - lo) / 2.0)

    @property
    def size(self) -> np.ndarray:
        return self.extents * 2.0

    @property
    def min(self) -> np.ndarray:
        return self.center - self.extents

    @property
    def max(self) -> np.ndarray:
        return self.center + self.extents

    def face_point(self, axis: int, sign: int) -> np.ndarray:
        """Center of the face on *axis* (0=X, 1=Y, 2=Z) in direction *sign* (+1/-1)."""
        point = self.center.copy()
        point[axis] += sign * self.extents[axis]
        return point

    def __repr__(self) -> str:
        c = self.center
        e = self.extents
        return (
            f"BoundingVolume(center=({c[0]:.3f}, {c[1]:.3f}, {c[2]:.3f}), "
            f"extents=({e[0]:.3f}, {e[1]:.3f}, {e[2]:.3f}))"
        )


class Region:
    """Mutable axis-aligned box grown point by point.

    Starts as a zero-size box at a point and grows with encapsulate()::

        region = Region.at(top)
        for p in (bottom, left, right):
            region.encapsulate(p)
    """

    def __init__(self, bounds_min: Vec3Like, bounds_max: Vec3Like):
        self.min = as_vec3(bounds_min, "bounds_min").copy()
        self.max = as_vec3(bounds_max, "bounds_max").copy()

    @classmethod
    def at(cls, point: Vec3Like) -> Region:
        p = as_vec3(point, "point")
        return cls(p, p)

    def encapsulate(self, point: Vec3Like) -> None:
        p = as_vec3(point, "point")
        self.min = np.minimum(self.min, p)
        self.max = np.maximum(self.max, p)

    @property
    def center(self) -> np.ndarray:
        return (self.min + self.max) / 2.0

    @property
    def size(self) -> np.ndarray:
        return self.max - self.min

    @property
    def extents(self) -> np.ndarray:
        return self.size / 2.0

    def to_volume(self) -> BoundingVolume:
        return BoundingVolume.from_min_max(self.min, self.max)


class BoundsSet:
    """Ordered collection of bounding volumes.

    Insertion order is kept for deterministic aggregation and reporting.
    Duplicates are allowed. Consumers that must not mutate the set should
    work on snapshot().
    """

    def __init__(self, volumes: Iterable[BoundingVolume] = ()):
        self._volumes: List[BoundingVolume] = list(volumes)

    def add(self, volume: BoundingVolume) -> None:
        if not isinstance(volume, BoundingVolume):
            raise TypeError(f"expected BoundingVolume, got {type(volume).__name__}")
        self._volumes.append(volume)

    def clear(self) -> None:
        self._volumes.clear()

    def snapshot(self) -> Tuple[BoundingVolume, ...]:
        return tuple(self._volumes)

    def __len__(self) -> int:
        return len(self._volumes)

    def __iter__(self) -> Iterator[BoundingVolume]:
        return iter(self._volumes)

    def __getitem__(self, index: int) -> BoundingVolume:
        return self._volumes[index]

    def __bool__(self) -> bool:
        return bool(self._volumes)

    def __repr__(self) -> str:
        return f"BoundsSet({len(self._volumes)} volumes)"
