"""
Per-volume visibility classification and the running test report.

A volume counts as visible only when all of these hold:
  - perspective mode: camera-to-center distance does not exceed far_clip
  - projected top face point is below the top edge of the viewport
  - projected bottom face point is above the bottom edge
  - projected left face point is right of the left edge
  - projected right face point is left of the right edge

Only the four face-center points are projected, not the volume's screen
rectangle, so corners can leave the screen at oblique angles unnoticed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

import numpy as np

from camframe.camera.projection import Camera, Viewport
from camframe.geometry.bounds import BoundingVolume

logger = logging.getLogger(__name__)


class VisibilityVerdict(str, Enum):
    VISIBLE = "visible"
    BEYOND_FAR_CLIP = "beyond_far_clip"
    CLIPPED_TOP = "clipped_top"
    CLIPPED_BOTTOM = "clipped_bottom"
    CLIPPED_LEFT = "clipped_left"
    CLIPPED_RIGHT = "clipped_right"
    DEGENERATE = "degenerate"  # projection was NaN/inf


@dataclass
class VolumeResult:
    index: int
    volume: BoundingVolume
    verdict: VisibilityVerdict

    @property
    def visible(self) -> bool:
        return self.verdict == VisibilityVerdict.VISIBLE

    @property
    def center(self) -> np.ndarray:
        return self.volume.center


@dataclass
class TestReport:
    """Outcome of the latest evaluation plus the session's failure count."""

    __test__ = False  # not a pytest test class

    fail_count: int = 0
    results: List[VolumeResult] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def visible_count(self) -> int:
        return sum(1 for r in self.results if r.visible)

    @property
    def not_visible(self) -> List[VolumeResult]:
        return [r for r in self.results if not r.visible]

    @property
    def all_visible(self) -> bool:
        return self.visible_count == self.total_count

    @property
    def is_empty(self) -> bool:
        return self.fail_count == 0 and not self.results


def format_point(point: np.ndarray) -> str:
    return f"({point[0]:.1f}, {point[1]:.1f}, {point[2]:.1f})"


def format_report(report: TestReport) -> str:
    """Render a report as text; empty string for an empty report."""
    if report.is_empty:
        return ""
    lines = [
        f"Number of failed test : {report.fail_count}",
        f"Visible objects {report.visible_count}/{report.total_count}",
    ]
    for r in report.not_visible:
        lines.append(f"Object at position {format_point(r.center)} not visible.")
    return "\n".join(lines) + "\n"


class VisibilityChecker:
    """Classifies volumes against a camera and tracks the failure count.

    fail_count grows by exactly one per evaluate() call that finds at least
    one volume not visible, regardless of how many failed.

    Args:
        inclusive_edges: Treat a point projected exactly on a viewport edge
            as inside. Default False: the edge itself is outside.
    """

    def __init__(self, inclusive_edges: bool = False):
        self.inclusive_edges = inclusive_edges
        self._fail_count = 0
        self._report = TestReport()

    @property
    def fail_count(self) -> int:
        return self._fail_count

    @property
    def report(self) -> TestReport:
        return self._report

    def _beyond(self, value: float, limit: float) -> bool:
        return value > limit if self.inclusive_edges else value >= limit

    def _below(self, value: float, limit: float) -> bool:
        return value < limit if self.inclusive_edges else value <= limit

    def classify(
        self,
        volume: BoundingVolume,
        camera: Camera,
        viewport: Optional[Viewport] = None,
    ) -> VisibilityVerdict:
        vp = viewport or camera.viewport

        if not camera.is_orthographic and camera.distance_to(volume.center) > camera.far_clip:
            return VisibilityVerdict.BEYOND_FAR_CLIP

        checks = (
            (volume.face_point(1, +1), 1, lambda v: self._beyond(v, vp.height), VisibilityVerdict.CLIPPED_TOP),
            (volume.face_point(1, -1), 1, lambda v: self._below(v, 0.0), VisibilityVerdict.CLIPPED_BOTTOM),
            (volume.face_point(0, -1), 0, lambda v: self._below(v, 0.0), VisibilityVerdict.CLIPPED_LEFT),
            (volume.face_point(0, +1), 0, lambda v: self._beyond(v, vp.width), VisibilityVerdict.CLIPPED_RIGHT),
        )
        for point, axis, fails, verdict in checks:
            screen = camera.world_to_screen(point)
            if not np.isfinite(screen[axis]):
                logger.warning(
                    "Non-finite projection for volume at %s (camera at %s)",
                    format_point(volume.center), format_point(camera.position),
                )
                return VisibilityVerdict.DEGENERATE
            if fails(float(screen[axis])):
                return verdict
        return VisibilityVerdict.VISIBLE

    def evaluate(
        self,
        bounds: Iterable[BoundingVolume],
        camera: Camera,
        viewport: Optional[Viewport] = None,
    ) -> TestReport:
        """Classify every volume and update the report.

        *bounds* is only read.
        """
        results = [
            VolumeResult(index=i, volume=vol, verdict=self.classify(vol, camera, viewport))
            for i, vol in enumerate(bounds)
        ]
        report = TestReport(fail_count=self._fail_count, results=results)
        if report.visible_count < report.total_count:
            self._fail_count += 1
            report.fail_count = self._fail_count
            logger.info(
                "Visibility check failed: %d/%d visible (fail count %d)",
                report.visible_count, report.total_count, self._fail_count,
            )
        else:
            logger.info("Visibility check passed: %d/%d visible", report.visible_count, report.total_count)
        self._report = report
        return report

    def reset(self) -> None:
        """Clear the failure count and the report."""
        self._fail_count = 0
        self._report = TestReport()
        logger.info("Visibility report reset")
