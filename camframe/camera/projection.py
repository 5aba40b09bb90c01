"""Camera pose and lens model for world→screen projection.

Conventions (left-handed, matching common game engines):
  - +Y is world up, the default forward is +Z, right is +X
  - Screen origin is the bottom-left corner, Y grows upward, units are pixels
  - Perspective uses a vertical field of view; orthographic uses a
    half-height ``ortho_size`` in world units

The forward direction is fixed for the lifetime of a camera: framing only
ever translates the camera along it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import numpy as np

from camframe.geometry.bounds import Vec3Like, as_vec3

logger = logging.getLogger(__name__)

WORLD_UP = np.array([0.0, 1.0, 0.0])
_FALLBACK_UP = np.array([0.0, 0.0, 1.0])

DEFAULT_FOV_DEG = 60.0
DEFAULT_ORTHO_SIZE = 5.0
DEFAULT_NEAR_CLIP = 0.3
DEFAULT_FAR_CLIP = 1000.0


class ProjectionMode(str, Enum):
    ORTHOGRAPHIC = "orthographic"
    PERSPECTIVE = "perspective"


@dataclass(frozen=True)
class Viewport:
    """Screen size in pixels."""

    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"viewport must be positive, got {self.width}x{self.height}")

    @property
    def aspect(self) -> float:
        return self.width / self.height


def camera_basis(forward: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return (right, up) unit vectors for a unit *forward* direction."""
    ref_up = WORLD_UP
    if abs(float(np.dot(forward, WORLD_UP))) > 1.0 - 1e-9:
        ref_up = _FALLBACK_UP
    right = np.cross(ref_up, forward)
    right = right / np.linalg.norm(right)
    up = np.cross(forward, right)
    return right, up


class Camera:
    """Camera with a fixed forward axis and a switchable projection.

    Only ``position`` and ``mode`` change at runtime; CameraRig owns both.
    """

    def __init__(
        self,
        viewport: Viewport,
        position: Vec3Like = (0.0, 0.0, 0.0),
        forward: Vec3Like = (0.0, 0.0, 1.0),
        mode: ProjectionMode = ProjectionMode.PERSPECTIVE,
        fov_deg: float = DEFAULT_FOV_DEG,
        ortho_size: float = DEFAULT_ORTHO_SIZE,
        near_clip: float = DEFAULT_NEAR_CLIP,
        far_clip: float = DEFAULT_FAR_CLIP,
    ):
        fwd = as_vec3(forward, "forward")
        norm = float(np.linalg.norm(fwd))
        if norm < 1e-12:
            raise ValueError("forward must be a non-zero vector")
        if not 0.0 < fov_deg < 180.0:
            raise ValueError(f"fov_deg must be in (0, 180), got {fov_deg}")
        if ortho_size <= 0:
            raise ValueError(f"ortho_size must be positive, got {ortho_size}")
        if far_clip <= near_clip:
            raise ValueError(f"far_clip ({far_clip}) must exceed near_clip ({near_clip})")

        self.viewport = viewport
        self.position = as_vec3(position, "position").copy()
        self._forward = fwd / norm
        self._forward.flags.writeable = False
        self._right, self._up = camera_basis(self._forward)
        self.mode = ProjectionMode(mode)
        self.fov_deg = float(fov_deg)
        self.ortho_size = float(ortho_size)
        self.near_clip = float(near_clip)
        self.far_clip = float(far_clip)

    @classmethod
    def from_config(cls, cfg: dict[str, Any], viewport: Optional[Viewport] = None) -> Camera:
        """Build a camera from the ``camera``/``viewport`` sections of a config dict."""
        cam = cfg.get("camera", {})
        if viewport is None:
            vp = cfg.get("viewport", {})
            viewport = Viewport(width=vp["width"], height=vp["height"])
        mode = ProjectionMode.ORTHOGRAPHIC if cam.get("orthographic") else ProjectionMode.PERSPECTIVE
        return cls(
            viewport=viewport,
            position=cam.get("position", (0.0, 0.0, 0.0)),
            forward=cam.get("forward", (0.0, 0.0, 1.0)),
            mode=mode,
            fov_deg=cam.get("fov_deg", DEFAULT_FOV_DEG),
            ortho_size=cam.get("ortho_size", DEFAULT_ORTHO_SIZE),
            near_clip=cam.get("near_clip", DEFAULT_NEAR_CLIP),
            far_clip=cam.get("far_clip", DEFAULT_FAR_CLIP),
        )

    @property
    def forward(self) -> np.ndarray:
        return self._forward

    @property
    def right(self) -> np.ndarray:
        return self._right

    @property
    def up(self) -> np.ndarray:
        return self._up

    @property
    def is_orthographic(self) -> bool:
        return self.mode == ProjectionMode.ORTHOGRAPHIC

    def to_camera_space(self, point: Vec3Like) -> np.ndarray:
        d = as_vec3(point, "point") - self.position
        return np.array([np.dot(d, self._right), np.dot(d, self._up), np.dot(d, self._forward)])

    def world_to_screen(self, point: Vec3Like) -> np.ndarray:
        """Project a world point to (x_px, y_px, depth).

        Points on the camera's depth plane give non-finite X/Y in
        perspective mode; callers decide how to treat them.
        """
        x, y, z = self.to_camera_space(point)
        vp = self.viewport
        if self.is_orthographic:
            half_h = self.ortho_size
            half_w = self.ortho_size * vp.aspect
            nx = x / half_w
            ny = y / half_h
        else:
            tan_half = math.tan(math.radians(self.fov_deg) / 2.0)
            with np.errstate(divide="ignore", invalid="ignore"):
                nx = np.float64(x) / (z * tan_half * vp.aspect)
                ny = np.float64(y) / (z * tan_half)
        sx = (nx + 1.0) / 2.0 * vp.width
        sy = (ny + 1.0) / 2.0 * vp.height
        return np.array([sx, sy, z], dtype=np.float64)

    def distance_to(self, point: Vec3Like) -> float:
        return float(np.linalg.norm(as_vec3(point, "point") - self.position))

    def __repr__(self) -> str:
        p = self.position
        return (
            f"Camera(pos=({p[0]:.3f}, {p[1]:.3f}, {p[2]:.3f}), "
            f"mode={self.mode.value}, viewport={self.viewport.width}x{self.viewport.height})"
        )
